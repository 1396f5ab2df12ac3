"""Tests for the diagnostics sink and report."""

from __future__ import annotations

from pathlib import Path

from modelctl.domain.diagnostics import DiagnosticsSink, ValidationReport, ValidationResult
from modelctl.domain.types import Severity


class TestDiagnosticsSink:
    def test_keeps_repeated_findings(self) -> None:
        sink = DiagnosticsSink()
        sink.warning(Path("a.yaml"), "stale")
        sink.warning("a.yaml", "stale")
        sink.info("a.yaml", "stale")
        assert len(sink) == 3
        assert sink.count(Severity.WARNING) == 2

    def test_keeps_insertion_order(self) -> None:
        sink = DiagnosticsSink()
        sink.error("b.yaml", "first")
        sink.info("a.yaml", "second")
        assert [r.message for r in sink] == ["first", "second"]

    def test_sorted_results_is_stable_by_path(self) -> None:
        sink = DiagnosticsSink()
        sink.info("b.yaml", "one")
        sink.error("a.yaml", "two")
        sink.warning("b.yaml", "three")
        ordered = sink.sorted_results()
        assert [(r.path, r.message) for r in ordered] == [
            ("a.yaml", "two"),
            ("b.yaml", "one"),
            ("b.yaml", "three"),
        ]

    def test_counts(self) -> None:
        sink = DiagnosticsSink()
        assert not sink.has_errors
        sink.error("a.yaml", "broken")
        sink.warning("a.yaml", "odd")
        sink.warning("b.yaml", "odd")
        assert sink.has_errors
        assert sink.count(Severity.WARNING) == 2
        assert sink.count(Severity.INFO) == 0

    def test_extend_appends_in_order(self) -> None:
        first = DiagnosticsSink()
        first.error("a.yaml", "broken")
        second = DiagnosticsSink()
        second.error("a.yaml", "broken")
        second.info("b.yaml", "hint")
        first.extend(second)
        assert [r.message for r in first] == ["broken", "broken", "hint"]


class TestValidationReport:
    def test_at_least_filters_by_rank(self) -> None:
        report = ValidationReport(
            results=[
                ValidationResult(path="a", message="e", severity=Severity.ERROR),
                ValidationResult(path="a", message="w", severity=Severity.WARNING),
                ValidationResult(path="a", message="i", severity=Severity.INFO),
            ]
        )
        assert [r.message for r in report.at_least(Severity.WARNING)] == ["e", "w"]
        assert len(report.at_least(Severity.INFO)) == 3
        assert not report.cancelled

    def test_result_serializes_severity_as_text(self) -> None:
        result = ValidationResult(path="a.yaml", message="m", severity=Severity.INFO)
        assert result.model_dump(mode="json") == {
            "path": "a.yaml",
            "message": "m",
            "severity": "info",
        }
