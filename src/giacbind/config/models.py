"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, giacbind.toml only contains overrides.
A machine with the wrapper library on a standard path needs no config at all.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

# --- giacbind.toml sections ---


class LibraryConfig(BaseModel):
    """[library] section."""

    model_config = {"frozen": True}

    wrapper_path: str | None = None
    giac_path: str | None = None
    xcasroot: str | None = None
    required: bool = False


class RegistryConfig(BaseModel):
    """[registry] section."""

    model_config = {"frozen": True}

    bootstrap: bool = True
    preload_help: bool = False
    suggestion_count: int = 4


class DispatchConfig(BaseModel):
    """[dispatch] section. Tier 3 (text evaluation) is always enabled."""

    model_config = {"frozen": True}

    tier1: bool = True
    tier2: bool = True


class OutputConfig(BaseModel):
    """[output] section."""

    model_config = {"frozen": True}

    latex_display: bool = True


class GiacConfig(BaseModel):
    """Root config model — all sections with defaults."""

    model_config = {"frozen": True}

    library: LibraryConfig = Field(default_factory=LibraryConfig)
    registry: RegistryConfig = Field(default_factory=RegistryConfig)
    dispatch: DispatchConfig = Field(default_factory=DispatchConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
