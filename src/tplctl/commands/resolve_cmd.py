"""Command: show how a template specifier resolves, without installing."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from tplctl.commands._base import TplCommand

if TYPE_CHECKING:
    from tplctl.commands._context import AppContext


@click.command(
    "resolve",
    cls=TplCommand,
    examples="""\
  tplctl resolve
  tplctl resolve typescript
  tplctl resolve @acme@1.2.0 --json
  tplctl resolve file:./templates/basic""",
)
@click.argument("specifier", required=False, default=None)
@click.pass_obj
def resolve(app: AppContext, specifier: str | None) -> None:
    """Resolve SPECIFIER to its canonical template name and version."""
    from tplctl.services.inspect import InspectService

    app.emit(InspectService(app.settings).inspect(specifier, origin_dir=Path.cwd()))
