"""Locate and read ``giacbind.toml``.

Lookup order: the ``GIACBIND_CONFIG`` env var, then a walk up from the
working directory, then the per-user file under ``$XDG_CONFIG_HOME``
(``~/.config`` when unset).
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any

from giacbind.config.models import GiacConfig

CONFIG_FILENAME = "giacbind.toml"
CONFIG_ENV_VAR = "GIACBIND_CONFIG"


class ConfigError(ValueError):
    """Raised when a config file exists but cannot be parsed."""


def user_config_path() -> Path:
    base = os.environ.get("XDG_CONFIG_HOME") or Path.home() / ".config"
    return Path(base) / "giacbind" / CONFIG_FILENAME


def _walk_up(start: Path) -> Path | None:
    for directory in (start, *start.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def find_config(start: Path | None = None) -> Path | None:
    """Return the config file that applies to *start* (default: cwd), or None.

    An explicit ``GIACBIND_CONFIG`` that points nowhere disables discovery
    instead of falling back.
    """
    explicit = os.environ.get(CONFIG_ENV_VAR)
    if explicit:
        path = Path(explicit)
        return path if path.is_file() else None

    found = _walk_up((start or Path.cwd()).resolve())
    if found is not None:
        return found
    user = user_config_path()
    return user if user.is_file() else None


def read_toml(path: Path) -> dict[str, Any]:
    """Parse *path*, raising :class:`ConfigError` on malformed TOML."""
    try:
        return tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        msg = f"Invalid TOML in {path}: {exc}"
        raise ConfigError(msg) from exc


def load_config(path: Path | None = None, cwd: Path | None = None) -> GiacConfig:
    """Validate the file sections into a :class:`GiacConfig`.

    Without *path* the file is discovered from *cwd*; no file means defaults.
    """
    if path is None:
        path = find_config(cwd)
    if path is None:
        return GiacConfig()
    return GiacConfig.model_validate(read_toml(path))
