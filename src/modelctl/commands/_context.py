"""AppContext — shared Click context for all commands.

Created once by the root CLI group and passed to subcommands via
``@click.pass_obj``. Configures logging and telemetry, and centralizes
result emission (stdout/stderr routing and exit codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from modelctl.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from modelctl.config.settings import ModelctlSettings
    from modelctl.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy."""

    def __init__(self, settings: ModelctlSettings) -> None:
        self.settings = settings

        from modelctl.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

        if settings.verbose:
            from modelctl.services.telemetry import enable_telemetry

            enable_telemetry()

    def emit(self, result: ServiceResult, *, failed: bool = False) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success (``result.ok``): writes to stdout. Warnings go to stderr
          so they do not pollute piped output.
        * Failure: writes to stderr, exits with code 1.
        * *failed*: the operation completed but its outcome is a failure
          (a validation run with errors); output goes to stdout and the
          exit code is 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            # In JSON mode, warnings are already in the serialized payload.
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
            if failed:
                raise SystemExit(1)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
