"""Document kinds and diagnostic severities.

The five model shapes share one physical format (YAML), so the kind is
decided by :mod:`modelctl.domain.classifier`, never by file extension alone.
"""

from __future__ import annotations

from enum import StrEnum


class Severity(StrEnum):
    """Diagnostic severity, most severe first."""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"

    @property
    def rank(self) -> int:
        """Numeric rank for threshold filtering (error=2, warning=1, info=0)."""
        return _SEVERITY_RANK[self]


_SEVERITY_RANK: dict[Severity, int] = {
    Severity.ERROR: 2,
    Severity.WARNING: 1,
    Severity.INFO: 0,
}


class DocumentKind(StrEnum):
    """Shapes a model file can take."""

    ENTITY = "entity"
    ATTRIBUTE_TYPES = "attribute_types"
    ENUM = "enum"
    VALIDATION_PROFILES = "validation_profiles"
    METADATA = "metadata"
    INSTRUCTIONS = "instructions"
    DOCUMENTATION = "documentation"
    UNKNOWN = "unknown"

    @property
    def is_auxiliary(self) -> bool:
        """Documentation-like files that are recorded but never checked."""
        return self in (DocumentKind.INSTRUCTIONS, DocumentKind.DOCUMENTATION)
