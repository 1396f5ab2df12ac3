"""Subcommand modules for modelctl.

Provides register_commands() which uses deferred imports to keep
``modelctl --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all standalone commands on the root CLI group."""
    from modelctl.commands.discover import discover
    from modelctl.commands.schema import schema
    from modelctl.commands.serve import serve
    from modelctl.commands.validate import validate

    cli.add_command(validate)
    cli.add_command(discover)
    cli.add_command(schema)
    cli.add_command(serve)
