"""FastMCP server setup.

Optional extra — guarded behind try/except ImportError.
Transport: stdio by default, SSE and streamable HTTP optional.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from modelctl.config.settings import ModelctlSettings

mcp_available = False
_FastMCP: Any = None

try:
    from mcp.server.fastmcp import FastMCP as _FastMCP  # type: ignore[no-redef,import-not-found]

    mcp_available = True
except ImportError:
    pass

__all__ = ["create_server", "mcp_available"]


def create_server(
    *,
    settings: ModelctlSettings | None = None,
    project_root: Path | None = None,
    host: str = "127.0.0.1",
    port: int = 8000,
) -> Any:
    """Create and configure the MCP server.

    Uses *settings* when given, otherwise loads them from *project_root*
    (or CWD). Registers all tools and resources and returns the FastMCP
    instance. *host* and *port* only apply to HTTP transports.

    Raises RuntimeError if the mcp extra is not installed.
    """
    if not mcp_available or _FastMCP is None:
        msg = "MCP extra not installed. Install with: pip install modelctl[mcp]"
        raise RuntimeError(msg)

    from modelctl.mcp.resources import register_resources
    from modelctl.mcp.tools import register_tools

    if settings is None:
        from modelctl.config.settings import ModelctlSettings

        settings = ModelctlSettings.from_cli(project_root=project_root)

    server = _FastMCP("modelctl", host=host, port=port)

    register_tools(server, settings)
    register_resources(server, settings)

    return server
