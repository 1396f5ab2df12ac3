"""Command: validate a model tree or a single model file."""

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
  modelctl validate .
  modelctl validate models/Business/CustomerManagement/Customer.Type.yaml
  modelctl validate models --root . --min-severity warning
  modelctl validate . --errors-only
  modelctl --json validate . --workers 4""",
)
@click.argument("path", type=click.Path(path_type=Path), default=".")
@click.option(
    "--root",
    "solution_root",
    type=click.Path(path_type=Path, file_okay=False),
    default=None,
    help="Solution root holding the Shared folders (default: walk up from PATH).",
)
@click.option(
    "--min-severity",
    type=click.Choice(["info", "warning", "error"]),
    default="info",
    help="Hide findings below this severity.",
)
@click.option("--errors-only", is_flag=True, help="Shortcut for --min-severity error.")
@click.option(
    "--workers",
    type=click.IntRange(min=1),
    default=None,
    help="Directory groups validated in parallel (default: [validation] workers).",
)
@click.pass_obj
def validate(
    app: AppContext,
    path: Path,
    solution_root: Path | None,
    min_severity: str,
    errors_only: bool,
    workers: int | None,
) -> None:
    """Validate model files under PATH. Exits 1 when any error is found."""
    from modelctl.config.discovery import find_solution_root
    from modelctl.services.validate import ValidationService

    if solution_root is None and path.exists():
        solution_root = find_solution_root(path)

    threshold = "error" if errors_only else min_severity
    result = ValidationService(app.settings).validate(
        path,
        solution_root=solution_root,
        workers=workers,
        min_severity=threshold,
    )
    app.emit(result, failed=not result.data.get("valid", True))
