"""Command registry — the set of valid GIAC command names.

Populated once from the native command list at runtime initialization and
read-only thereafter. An empty registry means the list was unavailable;
callers then skip validation rather than reject every name.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable, Mapping

from pydantic import BaseModel, ConfigDict

from giacbind.domain.categories import (
    COMMAND_CATEGORIES,
    OTHER_CATEGORY,
    build_category_lookup,
)
from giacbind.domain.suggest import DEFAULT_SUGGESTION_COUNT, rank


class CommandInfo(BaseModel):
    """Metadata about a single command."""

    model_config = ConfigDict(frozen=True)

    name: str
    category: str = OTHER_CATEGORY
    aliases: tuple[str, ...] = ()
    doc: str = ""


class CommandRegistry:
    """Immutable index of command names, categories, and preloaded docs."""

    def __init__(
        self,
        names: Iterable[str] = (),
        *,
        docs: Mapping[str, str] | None = None,
        categories: Mapping[str, tuple[str, ...]] | None = None,
    ) -> None:
        self._names = frozenset(name for name in names if name)
        self._sorted = tuple(sorted(self._names))
        self._docs = dict(docs or {})
        self._categories = dict(categories if categories is not None else COMMAND_CATEGORIES)
        self._lookup = build_category_lookup(self._categories)

    @property
    def names(self) -> tuple[str, ...]:
        """All command names, sorted."""
        return self._sorted

    @property
    def is_empty(self) -> bool:
        return not self._names

    def __contains__(self, name: object) -> bool:
        return name in self._names

    def __len__(self) -> int:
        return len(self._names)

    def accepts(self, name: str) -> bool:
        """Whether *name* passes validation. An empty registry accepts everything."""
        return self.is_empty or name in self._names

    def doc(self, name: str) -> str:
        """Preloaded help text for *name*, or the empty string."""
        return self._docs.get(name, "")

    def category_of(self, name: str) -> str:
        return self._lookup.get(name, OTHER_CATEGORY)

    def info(self, name: str) -> CommandInfo | None:
        """Metadata for *name*, or ``None`` when it is not a registered command."""
        if not self.accepts(name):
            return None
        return CommandInfo(name=name, category=self.category_of(name), doc=self.doc(name))

    # --- search ---

    def search(self, prefix: str) -> list[str]:
        """Commands starting with *prefix*, sorted."""
        return [name for name in self._sorted if name.startswith(prefix)]

    def search_regex(self, pattern: str | re.Pattern[str]) -> list[str]:
        """Commands containing a match for *pattern*, sorted.

        Raises:
            ValueError: *pattern* is not a valid regular expression.
        """
        try:
            compiled = re.compile(pattern)
        except re.error as exc:
            msg = f"Invalid regular expression {pattern!r}: {exc}"
            raise ValueError(msg) from exc
        return [name for name in self._sorted if compiled.search(name)]

    def search_description(
        self,
        text: str,
        doc_for: Callable[[str], str] | None = None,
    ) -> list[str]:
        """Commands whose help text contains *text* (case-insensitive), sorted."""
        needle = text.lower()
        if not needle:
            return []
        lookup = doc_for or self.doc
        return [name for name in self._sorted if needle in lookup(name).lower()]

    # --- categories ---

    def categories(self) -> list[str]:
        """All category names, sorted, including ``other``."""
        return sorted({*self._categories, OTHER_CATEGORY})

    def commands_in_category(self, category: str) -> list[str]:
        """Commands in *category*, sorted.

        ``other`` lists registered commands that belong to no category.

        Raises:
            ValueError: *category* is not a known category.
        """
        if category == OTHER_CATEGORY:
            return [name for name in self._sorted if name not in self._lookup]
        if category not in self._categories:
            valid = ", ".join(self.categories())
            msg = f"Unknown category: {category}. Valid categories: {valid}"
            raise ValueError(msg)
        return sorted(set(self._categories[category]))

    # --- suggestions ---

    def suggest_with_distances(
        self, name: str, n: int = DEFAULT_SUGGESTION_COUNT
    ) -> list[tuple[str, int]]:
        """Nearest registered names to *name* with their edit distances."""
        return rank(name, self._sorted, n)

    def suggest(self, name: str, n: int = DEFAULT_SUGGESTION_COUNT) -> list[str]:
        """Nearest registered names to *name*."""
        return [cmd for cmd, _ in self.suggest_with_distances(name, n)]
