"""Built-in plugin adding an integral-transforms command category."""

from __future__ import annotations

from giacbind.plugins import hookimpl


TRANSFORM_COMMANDS = [
    "laplace",
    "invlaplace",
    "ilaplace",
    "ztrans",
    "ztransform",
    "invztrans",
    "invztransform",
    "fourier",
    "ifourier",
    "addtable",
]


class TransformsPlugin:
    """Registers the ``transforms`` category."""

    @hookimpl
    def register_command_categories(self) -> dict[str, list[str]] | None:
        return {"transforms": list(TRANSFORM_COMMANDS)}
