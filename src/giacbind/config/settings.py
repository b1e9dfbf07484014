"""Unified settings — CLI flags, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs  — CLI flags passed by Click, or keyword overrides
  2. Env vars     — ``GIACBIND_*`` prefix, ``__`` for nested sections
  3. TOML file    — ``giacbind.toml`` (env var, walk-up, then per-user file)
  4. Code defaults — baked into the section models
"""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from giacbind.config.discovery import ConfigError, find_config, read_toml
from giacbind.config.models import DispatchConfig, LibraryConfig, OutputConfig, RegistryConfig

__all__ = ["ConfigError", "GiacSettings", "TomlSettingsSource"]


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Read settings from a ``giacbind.toml`` file discovered via walk-up."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if toml_path and toml_path.is_file():
            self._data = read_toml(toml_path)

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Return ``(value, field_name, value_is_complex)``."""
        val = self._data.get(field_name)
        return val, field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        """Return the full TOML data dict for Pydantic to merge."""
        return self._data


# Thread-local storage for TOML path during construction.
_tls = threading.local()


class GiacSettings(BaseSettings):
    """Unified settings for the binding runtime and the CLI.

    Attributes:
        config_path: The TOML file the settings were read from, if any.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "GIACBIND_",
        "env_nested_delimiter": "__",
    }

    config_path: Path | None = None

    # --- CLI flags ---
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False

    # --- TOML sections ---
    library: LibraryConfig = Field(default_factory=LibraryConfig)
    registry: RegistryConfig = Field(default_factory=RegistryConfig)
    dispatch: DispatchConfig = Field(default_factory=DispatchConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert TOML source between env vars and defaults."""
        toml_path = getattr(_tls, "toml_path", None)
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, toml_path),
        )

    @classmethod
    def load(
        cls,
        *,
        config_path: str | Path | None = None,
        start: Path | None = None,
        **overrides: Any,
    ) -> GiacSettings:
        """Construct settings, discovering ``giacbind.toml`` unless *config_path* is given.

        *overrides* are merged as highest-priority values.
        """
        toml_path: Path | None = None
        if config_path:
            p = Path(config_path)
            if p.is_file():
                toml_path = p
        else:
            toml_path = find_config(start)

        _tls.toml_path = toml_path
        try:
            return cls(config_path=toml_path, **overrides)
        finally:
            _tls.toml_path = None

    @classmethod
    def from_cli(cls, *, config_path: str | None = None, **cli_flags: Any) -> GiacSettings:
        """Construct settings from a CLI invocation."""
        return cls.load(config_path=config_path, **cli_flags)
