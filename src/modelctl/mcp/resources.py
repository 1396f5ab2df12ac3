"""MCP resource definitions.

URIs: ``modelctl://schemas`` (index) and ``modelctl://schemas/{kind}``.
Each resource has a ``<name>_impl`` function testable without the mcp package.
"""

from __future__ import annotations

import json
from typing import Any

# ---------------------------------------------------------------------------
# Resource implementations (testable without mcp)
# ---------------------------------------------------------------------------


def schema_index_impl() -> list[str]:
    """Document kinds that have a schema."""
    from modelctl.services.schema import SCHEMA_MODELS

    return [kind.value for kind in SCHEMA_MODELS]


def schema_impl(kind: str) -> dict[str, Any]:
    """JSON Schema for one document kind, or an error payload for unknown kinds."""
    from modelctl.services.schema import schema_for

    try:
        return schema_for(kind)
    except (KeyError, ValueError):
        return {"error": f"No schema for kind '{kind}'", "kinds": schema_index_impl()}


# ---------------------------------------------------------------------------
# Registration: wraps _impl functions with FastMCP decorators
# ---------------------------------------------------------------------------


def register_resources(server: Any, settings: Any) -> None:
    """Register the schema resources on the FastMCP server."""

    @server.resource("modelctl://schemas")  # type: ignore[untyped-decorator]
    def schemas_resource() -> str:
        """Document kinds with a JSON Schema."""
        return json.dumps(schema_index_impl(), indent=2)

    @server.resource("modelctl://schemas/{kind}")  # type: ignore[untyped-decorator]
    def schema_resource(kind: str) -> str:
        """JSON Schema for one model document kind."""
        return json.dumps(schema_impl(kind), indent=2)
