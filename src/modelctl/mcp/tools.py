"""MCP tool definitions — validation, discovery and schema export.

Each tool has a ``<name>_impl`` function testable without the mcp package.
``register_tools()`` wraps them with FastMCP decorators.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from modelctl.services.result import ServiceResult


def _to_mcp_response(result: ServiceResult) -> dict[str, Any]:
    """Convert a ServiceResult to an MCP-friendly dict."""
    response: dict[str, Any] = {
        "ok": result.ok,
        "op": result.op,
        "data": result.data,
    }
    if result.warnings:
        response["warnings"] = result.warnings
    if result.error is not None:
        response["error"] = {
            "code": result.error.code,
            "message": result.error.message,
        }
    return response


def _resolve(settings: Any, path: str) -> Path:
    """Resolve *path* against the project root unless it is absolute."""
    candidate = Path(path)
    if candidate.is_absolute():
        return candidate
    return Path(settings.project_root) / candidate


# ---------------------------------------------------------------------------
# Tool implementations
# ---------------------------------------------------------------------------


def validate_model_impl(
    settings: Any,
    path: str,
    *,
    solution_root: str | None = None,
    min_severity: str = "info",
) -> dict[str, Any]:
    """Validate a model file or directory."""
    from modelctl.config.discovery import find_solution_root
    from modelctl.services.validate import ValidationService

    target = _resolve(settings, path)
    if solution_root is not None:
        root: Path | None = _resolve(settings, solution_root)
    elif target.exists():
        root = find_solution_root(target)
    else:
        root = None

    result = ValidationService(settings).validate(
        target,
        solution_root=root,
        min_severity=min_severity,
    )
    return _to_mcp_response(result)


def discover_models_impl(settings: Any, path: str) -> dict[str, Any]:
    """Discover model files grouped by directory."""
    from modelctl.services.validate import ValidationService

    result = ValidationService(settings).discover(_resolve(settings, path))
    return _to_mcp_response(result)


def export_schemas_impl(settings: Any, output_dir: str | None = None) -> dict[str, Any]:
    """Generate editor JSON Schemas, optionally writing them to disk."""
    from modelctl.services.schema import SchemaService

    target = _resolve(settings, output_dir) if output_dir else None
    result = SchemaService(settings).export_schemas(target)
    return _to_mcp_response(result)


# ---------------------------------------------------------------------------
# Registration: wraps _impl functions with FastMCP decorators
# ---------------------------------------------------------------------------


def register_tools(server: Any, settings: Any) -> None:
    """Register the MCP tools on the FastMCP server."""

    @server.tool()  # type: ignore[untyped-decorator]
    def validate_model(
        path: str,
        solution_root: str | None = None,
        min_severity: str = "info",
    ) -> dict[str, Any]:
        """Validate model YAML files and return (path, message, severity) findings."""
        return validate_model_impl(
            settings,
            path,
            solution_root=solution_root,
            min_severity=min_severity,
        )

    @server.tool()  # type: ignore[untyped-decorator]
    def discover_models(path: str = ".") -> dict[str, Any]:
        """List model files grouped by directory with their classified kinds."""
        return discover_models_impl(settings, path)

    @server.tool()  # type: ignore[untyped-decorator]
    def export_schemas(output_dir: str | None = None) -> dict[str, Any]:
        """Generate JSON Schemas for the model document shapes."""
        return export_schemas_impl(settings, output_dir)
