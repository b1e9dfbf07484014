"""AppContext — shared Click context for all commands.

Created once by the root CLI group and passed to subcommands via
``@click.pass_obj``. Owns lazy runtime initialization and result emission
(stdout/stderr routing and exit codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from giacbind.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from giacbind.config.settings import GiacSettings
    from giacbind.engine.runtime import GiacRuntime
    from giacbind.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    The runtime is created on first access, so ``--help`` and
    ``--version`` never load the native library.
    """

    def __init__(self, settings: GiacSettings) -> None:
        self.settings = settings
        self._runtime: GiacRuntime | None = None

        from giacbind.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

        if settings.verbose:
            from giacbind.services.telemetry import enable_telemetry

            enable_telemetry()

    @property
    def runtime(self) -> GiacRuntime:
        """The process-wide runtime; an already installed one is reused."""
        if self._runtime is None:
            from giacbind.engine.runtime import init_runtime, peek_runtime

            self._runtime = peek_runtime() or init_runtime(self.settings)
        return self._runtime

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success: writes to stdout. Warnings go to stderr outside JSON mode.
        * Failure: writes to stderr and exits with code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
