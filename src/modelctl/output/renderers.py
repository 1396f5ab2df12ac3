"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO). The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json as _json
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from modelctl.output.console import create_console, get_output, style_for_severity

if TYPE_CHECKING:
    from rich.console import Console

    from modelctl.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich.

    Returns plain text (no ANSI) when Rich detects no terminal, which is
    the case inside Click's CliRunner and piped output.
    """
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode.

    Validation runs print one line per Error finding, or the status line
    when there are none.
    """
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"

    if result.op == "validate":
        errors = [r for r in result.data.get("results", []) if r.get("severity") == "error"]
        if errors:
            return "\n".join(f"{r['path']}: {r['message']}" for r in errors)

    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    """Print the OK status line."""
    label = Text("OK", style="mc.ok")
    op = Text(f"  {result.op}", style="mc.op")
    console.print(label, op, end="")
    console.print()


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="mc.key")
    if key in ("path", "solution_root", "output_dir"):
        v = Text(str(value), style="mc.path")
    else:
        v = Text(str(value))
    console.print(k, v, sep="", end="")
    console.print()


def _plural(count: int, noun: str) -> str:
    return f"{count} {noun}" if count == 1 else f"{count} {noun}s"


def _render_meta(console: Console, result: ServiceResult) -> None:
    """Print meta block including telemetry span tree (verbose only)."""
    if not result.meta:
        return

    console.print()
    console.print(Text("  meta:", style="dim"))

    for k, v in result.meta.items():
        if k == "telemetry":
            _render_telemetry_tree(console, v, indent=4)
        else:
            console.print(f"    {k}: {v}")


def _render_telemetry_tree(
    console: Console,
    span_data: dict[str, Any],
    indent: int = 4,
) -> None:
    """Render a hierarchical span tree with color-coded timing."""
    prefix = " " * indent
    name = span_data.get("name", "?")
    duration = span_data.get("duration_ms", 0.0)

    if duration > 1000:
        style = "bold red"
    elif duration > 100:
        style = "yellow"
    else:
        style = "dim"

    line = Text(prefix)
    line.append(f"{duration:>8.2f}ms", style=style)
    line.append(f"  {name}")
    annotations = span_data.get("annotations") or {}
    if annotations:
        line.append(f"  ({', '.join(f'{k}={v}' for k, v in annotations.items())})")
    console.print(line)

    for child in span_data.get("children", []):
        _render_telemetry_tree(console, child, indent=indent + 4)


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="mc.error")
    op = Text(f"  {result.op}", style="mc.op")
    sep = Text(" — ")
    console.print(label, op, sep, msg)
    if verbose and err and err.detail:
        for k, v in err.detail.items():
            _field(console, k, v)


# ── Validation renderers ──────────────────────────────────────────────


def _render_validate(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render diagnostics grouped by file, then a severity summary line."""
    data = result.data
    results = data.get("results", [])

    if data.get("valid", True) and not results:
        console.print(Text("OK", style="mc.ok"), Text("  No issues found."))
    else:
        by_path: dict[str, list[dict[str, Any]]] = {}
        for item in results:
            by_path.setdefault(str(item.get("path", "")), []).append(item)

        for path, items in by_path.items():
            console.print()
            console.print(Text(path, style="mc.title"))
            for item in items:
                severity = str(item.get("severity", "info"))
                line = Text("  ")
                line.append(severity, style=style_for_severity(severity))
                line.append(f": {item.get('message', '')}")
                console.print(line)

    console.print()
    summary = ", ".join(
        [
            _plural(data.get("error_count", 0), "error"),
            _plural(data.get("warning_count", 0), "warning"),
            f"{data.get('info_count', 0)} info",
        ]
    )
    console.print(summary)
    if data.get("cancelled"):
        console.print(Text("Validation cancelled; results are partial.", style="mc.warning"))

    if verbose:
        registry = data.get("registry") or {}
        _field(console, "solution_root", data.get("solution_root"))
        _field(console, "shared_types", registry.get("type_count", 0))
        _field(console, "collisions", registry.get("collision_count", 0))
        _render_meta(console, result)


def _render_discover(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render discovered groups as a table, then loose files and errors."""
    _status_line(console, result)
    data = result.data
    _field(console, "path", data.get("path", ""))
    _field(console, "total_file_count", data.get("total_file_count", 0))

    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Directory", style="mc.path")
    table.add_column("Files", justify="right")
    table.add_column("Metadata")
    table.add_column("Type")
    table.add_column("Behaviour")

    rows = 0
    for directory in data.get("directories", []):
        for group in directory.get("groups", []):
            table.add_row(
                str(group.get("directory", "")),
                str(len(group.get("files", []))),
                "yes" if group.get("has_metadata") else "-",
                "yes" if group.get("has_type_file") else "-",
                "yes" if group.get("has_behaviour_file") else "-",
            )
            rows += 1
            if verbose:
                for info in group.get("files", []):
                    table.add_row(f"  {info.get('name', '')}", "", "", info.get("kind", ""), "")
    if rows:
        console.print()
        console.print(table)

    loose = data.get("loose_files", [])
    if loose:
        console.print()
        console.print(Text("Unclassified files", style="mc.title"))
        for info in loose:
            console.print(Text(f"  {info.get('path', '')}", style="mc.path"))

    for error in data.get("errors", []):
        console.print(Text("  error", style="mc.error"), Text(f": {error}"))

    if verbose:
        _render_meta(console, result)


def _render_export_schemas(
    result: ServiceResult, console: Console, *, verbose: bool = False
) -> None:
    _status_line(console, result)
    data = result.data
    if "files" in data:
        _field(console, "output_dir", data.get("output_dir", ""))
        for path in data["files"]:
            console.print(Text(f"  {path}", style="mc.path"))
    else:
        for kind in data.get("schemas", {}):
            console.print(Text(f"  {kind}", style="mc.kind"))
    if verbose:
        _render_meta(console, result)


# ── Generic fallback ──────────────────────────────────────────────────


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        if isinstance(value, (dict, list)):
            _field(console, key, _json.dumps(value, separators=(",", ":")))
        else:
            _field(console, key, value)
    if verbose:
        _render_meta(console, result)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    "validate": _render_validate,
    "discover": _render_discover,
    "export_schemas": _render_export_schemas,
}
