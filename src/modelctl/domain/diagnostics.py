"""Diagnostics — the engine's only output.

A :class:`ValidationResult` is a ``(path, message, severity)`` triple with
no identity beyond its fields. :class:`DiagnosticsSink` collects them in
insertion order; repeated findings about different items are all kept.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from pathlib import Path

from pydantic import BaseModel

from modelctl.domain.models import ModelDefinition
from modelctl.domain.types import Severity


class ValidationResult(BaseModel):
    """One finding about one file."""

    model_config = {"frozen": True}

    path: str
    message: str
    severity: Severity


class DiagnosticsSink:
    """Ordered collection of findings for one run (or one group)."""

    def __init__(self) -> None:
        self._results: list[ValidationResult] = []

    def __len__(self) -> int:
        return len(self._results)

    def __iter__(self) -> Iterator[ValidationResult]:
        return iter(self._results)

    def add(self, path: Path | str, message: str, severity: Severity) -> None:
        self._results.append(
            ValidationResult(path=str(path), message=message, severity=severity)
        )

    def error(self, path: Path | str, message: str) -> None:
        self.add(path, message, Severity.ERROR)

    def warning(self, path: Path | str, message: str) -> None:
        self.add(path, message, Severity.WARNING)

    def info(self, path: Path | str, message: str) -> None:
        self.add(path, message, Severity.INFO)

    def extend(self, results: Iterable[ValidationResult]) -> None:
        self._results.extend(results)

    def count(self, severity: Severity) -> int:
        return sum(1 for r in self._results if r.severity is severity)

    @property
    def has_errors(self) -> bool:
        return any(r.severity is Severity.ERROR for r in self._results)

    def sorted_results(self) -> list[ValidationResult]:
        """Results stable-sorted by path; per-file emission order is preserved."""
        return sorted(self._results, key=lambda r: r.path)


class ValidationReport(BaseModel):
    """Diagnostics for a run, optionally paired with the primary entity model."""

    model_config = {"frozen": True}

    results: list[ValidationResult]
    model: ModelDefinition | None = None
    cancelled: bool = False

    def at_least(self, severity: Severity) -> list[ValidationResult]:
        """Results at or above *severity*."""
        return [r for r in self.results if r.severity.rank >= severity.rank]
