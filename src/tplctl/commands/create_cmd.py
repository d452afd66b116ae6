"""Command: create a project directory from a template."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from tplctl.commands._base import TplCommand

if TYPE_CHECKING:
    from tplctl.commands._context import AppContext

_CREATE_EXAMPLES = """\
  tplctl create my-app
  tplctl create my-app --template typescript
  tplctl create my-app --template @acme/cra-template-internal@2.1.0
  tplctl create my-app --template file:../my-template --language js
  tplctl create my-app --template https://example.com/cra-template-x-1.0.0.tgz
  tplctl create my-app --overwrite --install"""


@click.command("create", cls=TplCommand, examples=_CREATE_EXAMPLES)
@click.argument("project_directory", metavar="PROJECT_DIRECTORY")
@click.option("-t", "--template", default=None, help="Template specifier (name, file:, URL, git+).")
@click.option(
    "--language",
    type=click.Choice(["ts", "js"], case_sensitive=False),
    default=None,
    help="Language mode. Inferred from the template name when omitted.",
)
@click.option("--private/--public", "is_private", default=True, help="Value of `private` in package.json.")
@click.option("--overwrite", is_flag=True, help="Replace an existing project directory.")
@click.option("--install", "install_after", is_flag=True, help="Run the installer again after merging.")
@click.option("--skip-preflight", is_flag=True, help="Skip the runtime version check.")
@click.pass_obj
def create(
    app: AppContext,
    project_directory: str,
    template: str | None,
    language: str | None,
    is_private: bool,
    overwrite: bool,
    install_after: bool,
    skip_preflight: bool,
) -> None:
    """Create a new project in PROJECT_DIRECTORY."""
    settings = app.settings

    if settings.runtime.check and not skip_preflight:
        from tplctl.services.preflight import PreflightService

        preflight = PreflightService(settings).check_runtime()
        if not preflight.ok:
            app.emit(preflight)

    from tplctl.domain.project import ProjectSpec
    from tplctl.services.create import CreateService

    spec = ProjectSpec.for_directory(
        project_directory,
        template_specifier=template,
        language=language.lower() if language else None,
        is_private=is_private,
        overwrite=overwrite,
        verbose=settings.verbose,
        log_level=settings.install_log_level,
        install_after=install_after,
        origin_dir=Path.cwd(),
    )
    app.emit(CreateService(settings).create(spec))
