"""Tests for GiacRuntime construction, degraded mode, and the singleton."""

from __future__ import annotations

import logging
from collections.abc import Generator

import pytest

from giacbind.config.models import LibraryConfig, RegistryConfig
from giacbind.config.settings import GiacSettings
from giacbind.domain.errors import ErrorKind, GiacError
from giacbind.engine import runtime as runtime_mod
from giacbind.engine.runtime import (
    GiacRuntime,
    build_runtime,
    get_runtime,
    init_runtime,
    peek_runtime,
    reset_runtime,
)
from giacbind.plugins import hookimpl
from giacbind.plugins.builtins.transforms import TransformsPlugin
from giacbind.plugins.manager import PluginManager


class _CountingPlugin:
    def __init__(self) -> None:
        self.counts: list[int] = []

    @hookimpl
    def post_registry_init(self, command_count: int) -> None:
        self.counts.append(command_count)


@pytest.fixture(autouse=True)
def _reset() -> Generator[None]:
    yield
    reset_runtime()


class TestBuildRuntime:
    def test_registry_populated(self, fake_native, settings: GiacSettings) -> None:
        rt = build_runtime(settings, native=fake_native, plugins=PluginManager())
        assert rt.available
        assert len(rt.registry) == len(fake_native.commands)
        assert "factor" in rt.registry

    def test_list_failure_leaves_registry_empty(
        self, fake_native, settings: GiacSettings, caplog: pytest.LogCaptureFixture
    ) -> None:
        fake_native.list_error = RuntimeError("boom")
        with caplog.at_level(logging.WARNING, logger="giacbind"):
            rt = build_runtime(settings, native=fake_native, plugins=PluginManager())
        assert rt.registry.is_empty
        assert rt.registry.accepts("anything")
        assert "Failed to list GIAC commands" in caplog.text

    def test_bootstrap_disabled(self, fake_native) -> None:
        settings = GiacSettings(registry=RegistryConfig(bootstrap=False))
        rt = build_runtime(settings, native=fake_native, plugins=PluginManager())
        assert rt.registry.is_empty

    def test_preload_help(self, fake_native) -> None:
        settings = GiacSettings(registry=RegistryConfig(preload_help=True))
        rt = build_runtime(settings, native=fake_native, plugins=PluginManager())
        assert rt.registry.doc("factor").startswith("Description: Factorizes")
        assert rt.registry.doc("sin") == ""

    def test_plugins_contribute_categories(self, fake_native, settings: GiacSettings) -> None:
        pm = PluginManager()
        pm.register_plugin(TransformsPlugin(), name="transforms")
        rt = build_runtime(settings, native=fake_native, plugins=pm)
        assert "transforms" in rt.registry.categories()
        assert rt.registry.category_of("laplace") == "transforms"

    def test_post_registry_init_notified(self, fake_native, settings: GiacSettings) -> None:
        pm = PluginManager()
        plugin = _CountingPlugin()
        pm.register_plugin(plugin, name="counting")
        build_runtime(settings, native=fake_native, plugins=pm)
        assert plugin.counts == [len(fake_native.commands)]

    def test_xcasroot_forwarded(self, fake_native, tmp_path) -> None:
        (tmp_path / "aide_cas").write_text("")
        settings = GiacSettings(library=LibraryConfig(xcasroot=str(tmp_path)))
        build_runtime(settings, native=fake_native, plugins=PluginManager())
        assert fake_native.calls_named("set_xcasroot") == [str(tmp_path)]
        assert fake_native.help_db == str(tmp_path / "aide_cas")


class TestDegradedMode:
    def test_load_failure_degrades(
        self, settings: GiacSettings, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        def _fail(configured: str | None = None) -> None:
            raise OSError("libgiac_c not found")

        monkeypatch.setattr(runtime_mod, "load_native_library", _fail)
        rt = build_runtime(settings, plugins=PluginManager())
        assert not rt.available
        assert rt.load_error == "libgiac_c not found"
        assert rt.version() == ""
        with pytest.raises(GiacError) as exc_info:
            rt.require_native()
        assert exc_info.value.kind is ErrorKind.RESOURCE

    def test_required_library_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        def _fail(configured: str | None = None) -> None:
            raise OSError("libgiac_c not found")

        monkeypatch.setattr(runtime_mod, "load_native_library", _fail)
        settings = GiacSettings(library=LibraryConfig(required=True))
        with pytest.raises(GiacError) as exc_info:
            build_runtime(settings, plugins=PluginManager())
        assert exc_info.value.kind is ErrorKind.RESOURCE

    def test_default_context_unavailable(self, stub_runtime: GiacRuntime) -> None:
        with pytest.raises(GiacError) as exc_info:
            _ = stub_runtime.default_context
        assert exc_info.value.kind is ErrorKind.RESOURCE


class TestRuntimeState:
    def test_default_context_created_once(self, runtime: GiacRuntime) -> None:
        first = runtime.default_context
        assert runtime.default_context is first

    def test_help_text_cleans_quotes(self, runtime: GiacRuntime, fake_native) -> None:
        fake_native.helps["sin"] = '"Description: Sine.\\nRelated: cos"'
        assert runtime.help_text("sin") == "Description: Sine.\nRelated: cos"
        assert runtime.help_text("nothing") == ""

    def test_suggestion_count_normalized(self, runtime: GiacRuntime) -> None:
        runtime.suggestion_count = -1
        assert runtime.suggestion_count == 4
        runtime.suggestion_count = 2
        assert runtime.suggestion_count == 2

    def test_version(self, runtime: GiacRuntime) -> None:
        assert runtime.version() == "1.9.0-fake"


class TestSingleton:
    def test_init_and_peek(self, fake_native, settings: GiacSettings) -> None:
        reset_runtime()
        assert peek_runtime() is None
        rt = init_runtime(settings, native=fake_native, plugins=PluginManager())
        assert peek_runtime() is rt
        assert get_runtime() is rt

    def test_reset(self, runtime: GiacRuntime) -> None:
        reset_runtime()
        assert peek_runtime() is None
