"""CatalogService — command help, search, suggestions, categories, and status."""

from __future__ import annotations

from typing import Literal

from giacbind.domain.help import parse_help
from giacbind.services.base import BaseService, error_result
from giacbind.services.result import ServiceResult
from giacbind.services.telemetry import traced

SearchMode = Literal["prefix", "regex", "description"]


class CatalogService(BaseService):
    """Read-only queries over the command registry and help database."""

    @traced
    def help(self, name: str) -> ServiceResult:
        """Parsed help for *name*; unknown names fail with suggestions."""
        runtime = self._runtime
        if not runtime.registry.accepts(name):
            return error_result("help", runtime.dispatcher.unknown_command_error(name))
        text = runtime.help_text(name)
        parsed = parse_help(text, name)
        warnings: list[str] = []
        if not text:
            if runtime.available:
                warnings.append(f"No help found for: {name}")
            else:
                warnings.append("Help not available in stub mode")
        return ServiceResult(
            ok=True,
            op="help",
            data={**parsed.model_dump(), "category": runtime.registry.category_of(name)},
            warnings=warnings,
        )

    @traced
    def search(self, pattern: str, mode: SearchMode = "prefix") -> ServiceResult:
        registry = self._runtime.registry
        try:
            if mode == "regex":
                items = registry.search_regex(pattern)
            elif mode == "description":
                items = registry.search_description(pattern, doc_for=self._runtime.help_text)
            else:
                items = registry.search(pattern)
        except ValueError as exc:
            return error_result("search", exc)
        return ServiceResult(
            ok=True,
            op="search",
            data={"pattern": pattern, "mode": mode, "items": items, "count": len(items)},
        )

    @traced
    def suggest(self, name: str, n: int | None = None) -> ServiceResult:
        runtime = self._runtime
        count = runtime.suggestion_count if n is None else n
        ranked = runtime.registry.suggest_with_distances(name, count)
        items = [{"name": cmd, "distance": dist} for cmd, dist in ranked]
        return ServiceResult(
            ok=True,
            op="suggest",
            data={"input": name, "items": items, "count": len(items)},
        )

    @traced
    def categories(self, category: str | None = None) -> ServiceResult:
        registry = self._runtime.registry
        if category is None:
            items = [
                {"name": name, "count": len(registry.commands_in_category(name))}
                for name in registry.categories()
            ]
            return ServiceResult(
                ok=True,
                op="categories",
                data={"items": items, "count": len(items)},
            )
        try:
            commands = registry.commands_in_category(category)
        except ValueError as exc:
            return error_result("categories", exc)
        return ServiceResult(
            ok=True,
            op="category",
            data={"category": category, "items": commands, "count": len(commands)},
        )

    @traced
    def status(self) -> ServiceResult:
        runtime = self._runtime
        native = runtime.native
        settings = runtime.settings
        data = {
            "library_path": native.path if native is not None else None,
            "version": runtime.version(),
            "stub_mode": native is None,
            "command_count": len(runtime.registry),
            "help_count": native.help_count() if native is not None else 0,
            "suggestion_count": runtime.suggestion_count,
            "tier1": settings.dispatch.tier1,
            "tier2": settings.dispatch.tier2,
        }
        warnings: list[str] = []
        if runtime.load_error:
            warnings.append(runtime.load_error)
        return ServiceResult(ok=True, op="status", data=data, warnings=warnings)
