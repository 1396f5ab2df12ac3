"""Command: list discovered model files grouped by directory."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from modelctl.commands._base import ModelctlCommand

if TYPE_CHECKING:
    from modelctl.commands._context import AppContext


@click.command(
    cls=ModelctlCommand,
    examples="""\
  modelctl discover .
  modelctl -v discover models
  modelctl --json discover src/models""",
)
@click.argument("path", type=click.Path(path_type=Path), default=".")
@click.pass_obj
def discover(app: AppContext, path: Path) -> None:
    """Show how model files under PATH are grouped and classified."""
    from modelctl.services.validate import ValidationService

    app.emit(ValidationService(app.settings).discover(path))
