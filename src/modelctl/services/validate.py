"""ValidationService — the engine's public entry point.

INVARIANT: No exception escapes :meth:`ValidationService.validate`.
Every failure, from a missing root to a bug in a checker, becomes a
diagnostic; a run always returns a complete (possibly partial) list.

Pipeline: discovery -> registry (built once per solution root, before any
per-file check) -> structure checks and per-file checks per directory
group -> loose files -> stable sort by path.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import UTC, date, datetime
from pathlib import Path
from typing import Any

from modelctl.domain.diagnostics import DiagnosticsSink, ValidationReport
from modelctl.domain.errors import ValidationCancelled
from modelctl.domain.models import ModelDefinition
from modelctl.domain.rules import RuleContext, check_file
from modelctl.domain.types import Severity
from modelctl.infrastructure.discovery import DiscoveryResult, ModelFileGroup, discover_models
from modelctl.infrastructure.filesystem import read_model_file
from modelctl.infrastructure.registry import RegistryCache, SharedTypeRegistry
from modelctl.services.base import BaseService
from modelctl.services.result import ServiceResult
from modelctl.services.structure import StructureValidator
from modelctl.services.telemetry import Span, get_current_span, trace_span, traced

logger = logging.getLogger(__name__)


def _today(now: datetime | date | None) -> date:
    if now is None:
        return datetime.now(UTC).date()
    if isinstance(now, datetime):
        return now.date()
    return now


class _Run:
    """State for one validation call: context, registry cache, cancel signal."""

    def __init__(
        self,
        ctx: RuleContext,
        structure: StructureValidator,
        cancel: threading.Event | None,
    ) -> None:
        self.ctx = ctx
        self.structure = structure
        self.cancel = cancel

    def check_path(self, path: Path, sink: DiagnosticsSink) -> ModelDefinition | None:
        """Read and check one file. Only cancellation propagates."""
        try:
            content = read_model_file(path, cancel=self.cancel)
        except (OSError, UnicodeDecodeError) as exc:
            sink.error(path, f"Unable to read file: {exc}")
            return None
        try:
            return check_file(path, content, self.ctx, sink)
        except Exception as exc:
            logger.exception("Unexpected failure checking %s", path)
            sink.error(path, f"Validation error: {exc}")
            return None

    def check_group(
        self,
        group: ModelFileGroup,
        parent: Span | None = None,
    ) -> tuple[DiagnosticsSink, bool]:
        """Structure and per-file checks for one group; returns (findings, cancelled)."""
        sink = DiagnosticsSink()
        with trace_span(f"group:{group.directory.name}", parent=parent) as span:
            try:
                self.structure.check_group(group, sink)
                for info in group.files:
                    self.check_path(info.path, sink)
            except ValidationCancelled:
                return sink, True
            if span is not None:
                span.annotate("files", len(group.files))
                span.annotate("findings", len(sink))
        return sink, False


class ValidationService(BaseService):
    """Validate a model tree or a single model file."""

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @traced
    def validate(
        self,
        path: Path | str,
        *,
        solution_root: Path | str | None = None,
        cancel: threading.Event | None = None,
        now: datetime | date | None = None,
        workers: int | None = None,
        min_severity: Severity | str = Severity.INFO,
    ) -> ServiceResult:
        """Validate *path* (a directory or a single file).

        Args:
            path: Directory to scan, or one model file.
            solution_root: Directory whose shared folders feed the type
                registry. Defaults to *path* (or its parent for a file).
            cancel: Checked before every file read; when set the run stops
                and returns what it has with ``cancelled: true``.
            now: Clock used for metadata freshness (defaults to UTC now).
            workers: Directory groups validated concurrently; defaults to
                ``[validation] workers``.
            min_severity: Hide results below this severity. Counts and
                ``valid`` always reflect the full set.
        """
        target = Path(path)
        try:
            threshold = Severity(min_severity)
        except ValueError:
            return self._failure(
                "validate",
                "INVALID_SEVERITY",
                f"Unknown severity: {min_severity!r}",
                detail={"allowed": [s.value for s in Severity]},
            )
        config = self._settings.validation
        sink = DiagnosticsSink()
        warnings: list[str] = []
        model: ModelDefinition | None = None
        cancelled = False
        registry = SharedTypeRegistry()

        if not target.exists():
            sink.error(target, f"Root path does not exist: {target}")
            report = ValidationReport(results=sink.sorted_results())
            return self._build_result(report, target, None, registry, threshold, warnings)

        root = Path(solution_root) if solution_root is not None else (
            target if target.is_dir() else target.parent
        )
        cache = RegistryCache(
            config=self._settings.registry,
            discovery=self._settings.discovery,
            cancel=cancel,
        )

        try:
            with trace_span("registry") as span:
                registry = cache.get(root)
                if span is not None:
                    span.annotate("types", len(registry))
            run = self._new_run(registry, _today(now), cancel)

            if target.is_file():
                model = run.check_path(target, sink)
            else:
                cancelled = self._validate_tree(
                    target, run, registry, sink, workers or config.workers
                )
        except ValidationCancelled:
            cancelled = True
        except Exception as exc:
            logger.exception("Validation of %s failed", target)
            sink.error(target, f"Validation error: {exc}")

        if cancelled:
            warnings.append("Validation cancelled; results are partial")
        elif not registry.available:
            warnings.append(
                f"No shared type folder found under {root}; attribute types were not resolved"
            )

        report = ValidationReport(results=sink.sorted_results(), model=model, cancelled=cancelled)
        return self._build_result(report, target, root, registry, threshold, warnings)

    @traced
    def discover(
        self,
        path: Path | str,
        *,
        cancel: threading.Event | None = None,
    ) -> ServiceResult:
        """List the model files under *path*, grouped by directory."""
        target = Path(path)
        with trace_span("discover"):
            result = discover_models(target, config=self._settings.discovery, cancel=cancel)
        warnings = ["Discovery cancelled; results are partial"] if result.cancelled else []
        if result.errors and not result.directories and not result.loose_files:
            return self._failure(
                "discover",
                "DISCOVERY_FAILED",
                result.errors[0],
                detail={"errors": result.errors},
            )
        return ServiceResult(
            ok=True,
            op="discover",
            data={"path": str(target), **result.to_dict()},
            warnings=warnings,
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _new_run(
        self,
        registry: SharedTypeRegistry,
        today: date,
        cancel: threading.Event | None,
    ) -> _Run:
        config = self._settings.validation
        ctx = RuleContext(
            registry=registry,
            today=today,
            staleness_days=config.staleness_days,
            abbreviation_allowlist=config.allowed_abbreviations,
        )
        structure = StructureValidator(
            today=today,
            staleness_days=config.staleness_days,
            registry_config=self._settings.registry,
            cancel=cancel,
            check_metadata=False,
        )
        return _Run(ctx, structure, cancel)

    def _validate_tree(
        self,
        target: Path,
        run: _Run,
        registry: SharedTypeRegistry,
        sink: DiagnosticsSink,
        workers: int,
    ) -> bool:
        """Validate a directory into *sink*; return True if cancelled."""
        with trace_span("discover") as span:
            discovery = discover_models(target, config=self._settings.discovery, cancel=run.cancel)
            if span is not None:
                span.annotate("files", discovery.total_file_count)

        for error in discovery.errors:
            sink.error(target, error)
        if discovery.cancelled:
            return True

        self._report_collisions(target, registry, sink)

        cancelled = self._validate_groups(discovery, run, sink, workers)
        if cancelled:
            return True

        for info in discovery.loose_files:
            run.structure.check_loose_file(info, sink)
            run.check_path(info.path, sink)
        return False

    def _validate_groups(
        self,
        discovery: DiscoveryResult,
        run: _Run,
        sink: DiagnosticsSink,
        workers: int,
    ) -> bool:
        groups = discovery.groups
        parent = get_current_span()
        if workers <= 1 or len(groups) <= 1:
            outcomes = [run.check_group(group, parent) for group in groups]
        else:
            logger.debug("Validating %d groups on %d workers", len(groups), workers)
            with ThreadPoolExecutor(max_workers=workers) as pool:
                futures = [pool.submit(run.check_group, group, parent) for group in groups]
                # Merge in group order, not completion order.
                outcomes = [future.result() for future in futures]

        cancelled = False
        for group_sink, group_cancelled in outcomes:
            sink.extend(group_sink)
            cancelled = cancelled or group_cancelled
        return cancelled

    @staticmethod
    def _report_collisions(
        target: Path,
        registry: SharedTypeRegistry,
        sink: DiagnosticsSink,
    ) -> None:
        scope = target.resolve()
        for collision in registry.collisions:
            if not collision.path.resolve().is_relative_to(scope):
                continue
            sink.warning(
                collision.path,
                f"Shared type '{collision.name}' is also defined in "
                f"{collision.previous_path}; this definition takes precedence",
            )

    @staticmethod
    def _build_result(
        report: ValidationReport,
        target: Path,
        root: Path | None,
        registry: SharedTypeRegistry,
        threshold: Severity,
        warnings: list[str],
    ) -> ServiceResult:
        counts = {severity: 0 for severity in Severity}
        for result in report.results:
            counts[result.severity] += 1
        shown = report.at_least(threshold)

        data: dict[str, Any] = {
            "path": str(target),
            "solution_root": str(root) if root is not None else None,
            "results": [r.model_dump(mode="json") for r in shown],
            "count": len(shown),
            "error_count": counts[Severity.ERROR],
            "warning_count": counts[Severity.WARNING],
            "info_count": counts[Severity.INFO],
            "valid": counts[Severity.ERROR] == 0,
            "cancelled": report.cancelled,
            "model": (
                report.model.model_dump(mode="json", by_alias=True, exclude_none=True)
                if report.model is not None
                else None
            ),
            "registry": registry.summary(),
        }
        return ServiceResult(ok=True, op="validate", data=data, warnings=warnings)
