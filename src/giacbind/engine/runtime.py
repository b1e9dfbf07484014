"""Process-wide GIAC runtime: native library, default context, command registry.

The runtime is created lazily on first use, under the global lock, and
lives until process exit. When the wrapper library cannot be loaded the
runtime runs in degraded mode: the registry is empty and every native
operation raises a ``resource`` GiacError.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from giacbind.config.settings import GiacSettings
from giacbind.domain.categories import COMMAND_CATEGORIES, merge_categories
from giacbind.domain.errors import ErrorKind, GiacError, unavailable_error
from giacbind.domain.help import clean_help_string
from giacbind.domain.registry import CommandRegistry
from giacbind.domain.suggest import normalize_count
from giacbind.infrastructure.library import (
    NativeLibrary,
    find_help_database,
    load_native_library,
)
from giacbind.infrastructure.lock import GIAC_LOCK
from giacbind.plugins.builtins.transforms import TransformsPlugin
from giacbind.plugins.manager import PluginManager

if TYPE_CHECKING:
    from giacbind.engine.commands import CommandTable
    from giacbind.engine.context import GiacContext
    from giacbind.engine.dispatch import Dispatcher

logger = logging.getLogger(__name__)


class GiacRuntime:
    """Owns the native library handle and the process-wide singletons."""

    def __init__(
        self,
        native: NativeLibrary | None,
        settings: GiacSettings,
        registry: CommandRegistry | None = None,
        *,
        load_error: str | None = None,
    ) -> None:
        self.native = native
        self.settings = settings
        self.registry = registry if registry is not None else CommandRegistry()
        self.load_error = load_error
        self._suggestion_count = normalize_count(settings.registry.suggestion_count)
        self._default_context: GiacContext | None = None
        self._dispatcher: Dispatcher | None = None
        self._command_table: CommandTable | None = None

    @property
    def available(self) -> bool:
        """Whether the native library is loaded."""
        return self.native is not None

    def require_native(self) -> NativeLibrary:
        """The native library, or a ``resource`` GiacError in degraded mode."""
        if self.native is None:
            raise unavailable_error()
        return self.native

    @property
    def suggestion_count(self) -> int:
        return self._suggestion_count

    @suggestion_count.setter
    def suggestion_count(self, value: int) -> None:
        self._suggestion_count = normalize_count(value)

    @property
    def default_context(self) -> GiacContext:
        """The process-wide default context, created on first use."""
        if self._default_context is None:
            with GIAC_LOCK:
                if self._default_context is None:
                    from giacbind.engine.context import GiacContext

                    self._default_context = GiacContext.create(self)
        return self._default_context

    @property
    def dispatcher(self) -> Dispatcher:
        if self._dispatcher is None:
            from giacbind.engine.dispatch import Dispatcher

            self._dispatcher = Dispatcher(self)
        return self._dispatcher

    @property
    def command_table(self) -> CommandTable:
        if self._command_table is None:
            from giacbind.engine.commands import CommandTable

            self._command_table = CommandTable(self.registry)
        return self._command_table

    def help_text(self, name: str) -> str:
        """Raw help text for *name*, cleaned of quoting. Empty when unavailable."""
        doc = self.registry.doc(name)
        if doc or self.native is None:
            return doc
        return clean_help_string(self.native.help(name))

    def version(self) -> str:
        if self.native is None:
            return ""
        return self.native.version()


def _build_registry(
    native: NativeLibrary | None,
    settings: GiacSettings,
    plugins: PluginManager | None,
) -> CommandRegistry:
    """Populate the command registry; listing failures leave it empty."""
    if plugins is None:
        plugins = PluginManager()
        plugins.register_plugin(TransformsPlugin(), name="transforms-builtin")
        plugins.discover_and_load()
    categories = merge_categories(COMMAND_CATEGORIES, plugins.collect_categories())

    names: list[str] = []
    docs: dict[str, str] = {}
    if native is not None and settings.registry.bootstrap:
        try:
            names = native.list_commands()
        except Exception:
            logger.warning("Failed to list GIAC commands; validation disabled", exc_info=True)
            names = []
        if settings.registry.preload_help:
            for name in names:
                doc = clean_help_string(native.help(name))
                if doc:
                    docs[name] = doc

    registry = CommandRegistry(names, docs=docs, categories=categories)
    logger.debug("Command registry initialized with %d commands", len(registry))
    plugins.notify_registry_init(len(registry))
    return registry


def _init_help_database(native: NativeLibrary, settings: GiacSettings) -> None:
    lib_cfg = settings.library
    if lib_cfg.xcasroot:
        native.set_xcasroot(lib_cfg.xcasroot)
    aide_cas = find_help_database(lib_cfg.xcasroot, lib_cfg.giac_path)
    if aide_cas is None:
        logger.debug("GIAC help database (aide_cas) not found")
        return
    if not native.init_help(str(aide_cas)):
        logger.warning("Failed to load GIAC help database from %s", aide_cas)


def build_runtime(
    settings: GiacSettings | None = None,
    *,
    native: NativeLibrary | None = None,
    plugins: PluginManager | None = None,
) -> GiacRuntime:
    """Construct a runtime, loading the native library unless *native* is given.

    Raises:
        GiacError: ``resource`` kind when the library cannot be loaded and
            ``[library] required`` is set.
    """
    settings = settings or GiacSettings.load()
    load_error: str | None = None
    if native is None:
        try:
            native = load_native_library(settings.library.wrapper_path)
        except OSError as exc:
            load_error = str(exc)
            if settings.library.required:
                raise GiacError(load_error, ErrorKind.RESOURCE) from exc
            logger.warning("GIAC native library unavailable, running in degraded mode: %s", exc)
    if native is not None:
        _init_help_database(native, settings)
    registry = _build_registry(native, settings, plugins)
    return GiacRuntime(native, settings, registry, load_error=load_error)


_runtime: GiacRuntime | None = None


def get_runtime() -> GiacRuntime:
    """The process-wide runtime, created on first use."""
    global _runtime
    if _runtime is None:
        with GIAC_LOCK:
            if _runtime is None:
                _runtime = build_runtime()
    return _runtime


def peek_runtime() -> GiacRuntime | None:
    """The installed runtime, without creating one."""
    return _runtime


def init_runtime(
    settings: GiacSettings | None = None,
    *,
    native: NativeLibrary | None = None,
    plugins: PluginManager | None = None,
) -> GiacRuntime:
    """Build and install the process-wide runtime explicitly."""
    global _runtime
    with GIAC_LOCK:
        _runtime = build_runtime(settings, native=native, plugins=plugins)
        return _runtime


def reset_runtime() -> None:
    """Drop the process-wide runtime. Intended for tests."""
    global _runtime
    with GIAC_LOCK:
        _runtime = None
