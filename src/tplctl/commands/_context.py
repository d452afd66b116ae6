"""AppContext — shared Click context for all commands.

Created once by the root CLI group and handed to subcommands via
``@click.pass_obj``. Owns logging setup and result emission (stdout/stderr
routing and exit codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from tplctl.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from tplctl.config.settings import TplSettings
    from tplctl.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy."""

    def __init__(self, settings: TplSettings) -> None:
        self.settings = settings

        from tplctl.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success: stdout, returns normally. Warnings go to stderr so they
          don't pollute piped output.
        * Failure: stderr, exits with code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if not settings.json_output:
            for warning in result.warnings:
                click.echo(f"WARNING: {warning}", err=True)
        if result.ok:
            click.echo(output)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
