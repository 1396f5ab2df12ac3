"""Model discovery — find model files and group them by directory.

INVARIANT: Discovery never raises. A missing root, unreadable file, or
cancellation is recorded on the :class:`DiscoveryResult` instead.

Conventional model folders (``models``, ``src/models``) are scanned when
present; otherwise the whole root is scanned, skipping build output
directories by name. A single file is accepted as a one-file discovery.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable
from pathlib import Path

from pydantic import BaseModel, Field

from modelctl.config.models import DiscoveryConfig
from modelctl.domain.classifier import classify_document
from modelctl.domain.errors import ValidationCancelled
from modelctl.domain.types import DocumentKind
from modelctl.infrastructure.filesystem import find_model_files, read_model_file

logger = logging.getLogger(__name__)

_TYPE_SUFFIX = ".type"
_BEHAVIOUR_SUFFIXES = (".behaviour", ".behavior")


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------


class ModelFileInfo(BaseModel):
    """One discovered file and its classified kind."""

    model_config = {"frozen": True}

    path: Path
    name: str
    kind: DocumentKind

    @property
    def stem(self) -> str:
        """File name without its final extension."""
        return self.name.rsplit(".", 1)[0] if "." in self.name else self.name


class ModelFileGroup(BaseModel):
    """Classified files that share a parent directory."""

    model_config = {"frozen": True}

    directory: Path
    files: list[ModelFileInfo] = Field(default_factory=list)
    has_metadata: bool = False
    metadata_path: Path | None = None
    has_type_file: bool = False
    has_behaviour_file: bool = False


class ModelDirectory(BaseModel):
    """A scanned model folder; ``is_root`` marks a conventional model folder."""

    model_config = {"frozen": True}

    path: Path
    is_root: bool = True
    groups: list[ModelFileGroup] = Field(default_factory=list)


class DiscoveryResult(BaseModel):
    """Everything discovery found, plus what it could not do."""

    model_config = {"frozen": True}

    directories: list[ModelDirectory] = Field(default_factory=list)
    loose_files: list[ModelFileInfo] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)
    cancelled: bool = False

    @property
    def groups(self) -> list[ModelFileGroup]:
        return [group for directory in self.directories for group in directory.groups]

    @property
    def has_models(self) -> bool:
        return any(group.files for group in self.groups)

    @property
    def total_file_count(self) -> int:
        return sum(len(group.files) for group in self.groups) + len(self.loose_files)

    def to_dict(self) -> dict[str, object]:
        """JSON-friendly payload for ServiceResult.data."""
        return {
            "directories": [d.model_dump(mode="json") for d in self.directories],
            "loose_files": [f.model_dump(mode="json") for f in self.loose_files],
            "errors": list(self.errors),
            "cancelled": self.cancelled,
            "has_models": self.has_models,
            "total_file_count": self.total_file_count,
        }


# ---------------------------------------------------------------------------
# Discovery
# ---------------------------------------------------------------------------


class _Collector:
    """Mutable accumulator behind a single discovery call."""

    def __init__(self, cancel: threading.Event | None) -> None:
        self.cancel = cancel
        self.errors: list[str] = []
        self.loose: list[ModelFileInfo] = []
        self.cancelled = False

    def classify(self, path: Path) -> ModelFileInfo | None:
        if self.cancelled:
            return None
        try:
            content = read_model_file(path, cancel=self.cancel)
        except ValidationCancelled:
            self.cancelled = True
            return None
        except (OSError, UnicodeDecodeError) as exc:
            self.errors.append(f"Unable to read {path}: {exc}")
            return None
        return ModelFileInfo(path=path, name=path.name, kind=classify_document(path.name, content))

    def build_groups(self, paths: Iterable[Path]) -> list[ModelFileGroup]:
        by_dir: dict[Path, list[ModelFileInfo]] = {}
        for path in sorted(paths):
            info = self.classify(path)
            if info is None:
                continue
            if info.kind is DocumentKind.UNKNOWN:
                self.loose.append(info)
                continue
            by_dir.setdefault(path.parent, []).append(info)
        return [_make_group(directory, files) for directory, files in sorted(by_dir.items())]


def _make_group(directory: Path, files: list[ModelFileInfo]) -> ModelFileGroup:
    metadata = next((f for f in files if f.kind is DocumentKind.METADATA), None)
    has_type = any(
        (f.kind is DocumentKind.ENTITY and not f.stem.lower().endswith(_BEHAVIOUR_SUFFIXES))
        or f.stem.lower().endswith(_TYPE_SUFFIX)
        for f in files
    )
    has_behaviour = any(f.stem.lower().endswith(_BEHAVIOUR_SUFFIXES) for f in files)
    return ModelFileGroup(
        directory=directory,
        files=files,
        has_metadata=metadata is not None,
        metadata_path=metadata.path if metadata else None,
        has_type_file=has_type,
        has_behaviour_file=has_behaviour,
    )


def discover_models(
    path: Path,
    *,
    config: DiscoveryConfig | None = None,
    cancel: threading.Event | None = None,
) -> DiscoveryResult:
    """Discover model files under *path* (a directory or a single file)."""
    config = config or DiscoveryConfig()
    collector = _Collector(cancel)

    if not path.exists():
        return DiscoveryResult(errors=[f"Root path does not exist: {path}"])

    directories: list[ModelDirectory] = []
    try:
        if path.is_file():
            groups = collector.build_groups([path])
            directories.append(ModelDirectory(path=path.parent, is_root=False, groups=groups))
        else:
            for rel in config.model_dirs:
                model_dir = path / rel
                if not model_dir.is_dir():
                    continue
                files = find_model_files(
                    model_dir, extensions=config.extensions, skip_dirs=config.skip_dirs
                )
                if not files:
                    continue
                logger.debug("Scanning model folder %s (%d files)", model_dir, len(files))
                groups = collector.build_groups(files)
                directories.append(ModelDirectory(path=model_dir, is_root=True, groups=groups))

            if not directories:
                files = find_model_files(
                    path, extensions=config.extensions, skip_dirs=config.skip_dirs
                )
                logger.debug("No model folder under %s; flat scan found %d files", path, len(files))
                groups = collector.build_groups(files)
                if groups:
                    directories.append(ModelDirectory(path=path, is_root=False, groups=groups))
    except OSError as exc:
        collector.errors.append(f"Error during model discovery: {exc}")

    return DiscoveryResult(
        directories=directories,
        loose_files=collector.loose,
        errors=collector.errors,
        cancelled=collector.cancelled,
    )
