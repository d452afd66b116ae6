"""Subcommand modules for tplctl.

Provides register_commands() which uses deferred imports to keep
``tplctl --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all standalone commands on the root CLI group."""
    from tplctl.commands.create_cmd import create
    from tplctl.commands.info_cmd import info
    from tplctl.commands.resolve_cmd import resolve

    cli.add_command(create)
    cli.add_command(resolve)
    cli.add_command(info)
