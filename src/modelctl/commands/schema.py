"""Command: export JSON Schemas for editor completion."""

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
  modelctl schema --output .vscode/schemas
  modelctl --json schema""",
)
@click.option(
    "-o",
    "--output",
    "output_dir",
    type=click.Path(path_type=Path, file_okay=False),
    default=None,
    help="Directory to write <kind>.schema.json files into.",
)
@click.pass_obj
def schema(app: AppContext, output_dir: Path | None) -> None:
    """Export the JSON Schemas of the five model document shapes."""
    from modelctl.services.schema import SchemaService

    app.emit(SchemaService(app.settings).export_schemas(output_dir))
