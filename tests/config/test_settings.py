"""Tests for GiacSettings — unified settings with TOML and env sources."""

from __future__ import annotations

from pathlib import Path

import pytest

from giacbind.config.settings import ConfigError, GiacSettings


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("GIACBIND_CONFIG", raising=False)
    monkeypatch.delenv("GIACBIND_WRAPPER_LIB", raising=False)


class TestDefaults:
    def test_all_defaults(self, tmp_path: Path) -> None:
        settings = GiacSettings.load(start=tmp_path)
        assert settings.json_output is False
        assert settings.verbose is False
        assert settings.library.wrapper_path is None
        assert settings.library.required is False
        assert settings.registry.bootstrap is True
        assert settings.registry.suggestion_count == 4
        assert settings.dispatch.tier1 is True
        assert settings.dispatch.tier2 is True
        assert settings.output.latex_display is True

    def test_frozen(self, tmp_path: Path) -> None:
        settings = GiacSettings.load(start=tmp_path)
        with pytest.raises(Exception):
            settings.quiet = True  # type: ignore[misc]


class TestTomlSource:
    def test_loads_from_discovered_toml(self, tmp_path: Path) -> None:
        (tmp_path / "giacbind.toml").write_text(
            '[library]\nwrapper_path = "/opt/giac/libgiac_c.so"\n'
            "[registry]\nsuggestion_count = 8\n"
        )
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)
        settings = GiacSettings.load(start=nested)
        assert settings.library.wrapper_path == "/opt/giac/libgiac_c.so"
        assert settings.registry.suggestion_count == 8
        assert settings.registry.bootstrap is True
        assert settings.config_path == (tmp_path / "giacbind.toml").resolve()

    def test_explicit_config_path(self, tmp_path: Path) -> None:
        custom = tmp_path / "custom.toml"
        custom.write_text("[dispatch]\ntier1 = false\n")
        settings = GiacSettings.from_cli(config_path=str(custom))
        assert settings.dispatch.tier1 is False
        assert settings.dispatch.tier2 is True
        assert settings.config_path == custom

    def test_missing_explicit_path_uses_defaults(self, tmp_path: Path) -> None:
        settings = GiacSettings.from_cli(config_path=str(tmp_path / "absent.toml"))
        assert settings.config_path is None
        assert settings.dispatch.tier1 is True

    def test_invalid_toml_raises_config_error(self, tmp_path: Path) -> None:
        bad = tmp_path / "giacbind.toml"
        bad.write_text("[library\n")
        with pytest.raises(ConfigError, match="Invalid TOML"):
            GiacSettings.load(config_path=bad)


class TestPriority:
    def test_env_overrides_toml(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "giacbind.toml").write_text("[output]\nlatex_display = true\n")
        monkeypatch.setenv("GIACBIND_OUTPUT__LATEX_DISPLAY", "false")
        settings = GiacSettings.load(start=tmp_path)
        assert settings.output.latex_display is False

    def test_cli_flags_override(self, tmp_path: Path) -> None:
        settings = GiacSettings.load(start=tmp_path, json_output=True, verbose=True)
        assert settings.json_output is True
        assert settings.verbose is True
