"""Command: print environment debug info."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from tplctl.commands._base import TplCommand

if TYPE_CHECKING:
    from tplctl.commands._context import AppContext


@click.command("info", cls=TplCommand)
@click.pass_obj
def info(app: AppContext) -> None:
    """Print host, runtime and package-manager versions for bug reports."""
    from tplctl.services.preflight import PreflightService

    app.emit(PreflightService(app.settings).info())
