"""ServiceResult and ServiceError — the contract every surface consumes.

INVARIANT: All service-layer methods return ServiceResult.
The CLI and the MCP adapter only ever see this type.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class ServiceError(BaseModel):
    """Structured error payload within a ServiceResult."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class ServiceResult(BaseModel):
    """Return type for all service operations.

    Attributes:
        ok: Whether the operation ran to completion. A validation run that
            finds Error diagnostics is still ``ok``; see ``data["valid"]``.
        op: Name of the operation (``"validate"``, ``"discover"``, ...).
        data: Operation-specific payload.
        warnings: Non-fatal issues with the run itself (not diagnostics).
        error: Structured error if ``ok`` is False.
        meta: Optional metadata (telemetry span tree when verbose).
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None
