"""pluggy wiring for giacbind plugins.

Plugins are found through the ``giacbind.plugins`` entry-point group or
registered directly. They can add command categories and are told how
many commands the registry holds once it is built. A misbehaving plugin
costs a warning, never the runtime.
"""

from __future__ import annotations

import inspect
import logging

import pluggy

from giacbind.plugins.hookspecs import GiacbindHookSpec

PROJECT_NAME = "giacbind"
ENTRY_POINT_GROUP = "giacbind.plugins"

logger = logging.getLogger(__name__)


class PluginManager:
    """Thin wrapper over :class:`pluggy.PluginManager` with fault isolation."""

    def __init__(self) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(GiacbindHookSpec)
        self._loaded = False

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    def _name(self, plugin: object) -> str:
        return self._pm.get_name(plugin) or getattr(plugin, "__name__", type(plugin).__name__)

    def discover_and_load(self) -> list[str]:
        """Load entry-point plugins and return the names of all registered plugins."""
        try:
            self._pm.load_setuptools_entrypoints(ENTRY_POINT_GROUP)
        except Exception:
            logger.warning("Failed to load giacbind entry-point plugins", exc_info=True)
        self._instantiate_classes()
        self._loaded = True
        return self.list_plugin_names()

    def register_plugin(self, plugin: object, name: str | None = None) -> None:
        name = name or type(plugin).__name__
        self._pm.register(plugin, name=name)
        logger.debug("Registered plugin: %s", name)

    def unregister(self, plugin: object) -> None:
        self._pm.unregister(plugin)

    def get_plugins(self) -> list[object]:
        return list(self._pm.get_plugins())

    def list_plugin_names(self) -> list[str]:
        return [self._name(plugin) for plugin in self._pm.get_plugins()]

    def collect_categories(self) -> dict[str, list[str]]:
        """Merge ``register_command_categories`` results across plugins.

        Plugins are called one at a time so a raising plugin only loses its
        own categories. Names already in a category are not repeated.
        """
        merged: dict[str, list[str]] = {}
        for plugin in self._pm.get_plugins():
            impl = getattr(plugin, "register_command_categories", None)
            if impl is None:
                continue
            try:
                contributed = impl()
            except Exception:
                logger.warning(
                    "Plugin %s failed to register command categories",
                    self._name(plugin),
                    exc_info=True,
                )
                continue
            if contributed is None:
                continue
            if not isinstance(contributed, dict):
                logger.warning("Plugin %s returned non-dict command categories", self._name(plugin))
                continue
            for category, names in contributed.items():
                bucket = merged.setdefault(str(category), [])
                bucket.extend(n for n in map(str, names) if n not in bucket)
        return merged

    def notify_registry_init(self, command_count: int) -> None:
        try:
            self._pm.hook.post_registry_init(command_count=command_count)
        except Exception:
            logger.warning("post_registry_init hook failed", exc_info=True)

    def _instantiate_classes(self) -> None:
        """Swap plugin classes loaded from entry points for instances.

        Hook methods on a bare class would be called without ``self``.
        """
        for plugin in list(self._pm.get_plugins()):
            if not inspect.isclass(plugin):
                continue
            name = self._name(plugin)
            self._pm.unregister(plugin)
            try:
                instance = plugin()
            except Exception:
                logger.warning("Failed to instantiate plugin %s", name, exc_info=True)
                continue
            self._pm.register(instance, name=name)
            logger.debug("Instantiated plugin class: %s", name)
