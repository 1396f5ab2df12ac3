"""Structure checks — layout conventions per directory group.

INVARIANT: Structure findings are Warning or Info, never Error. Layout
deviations are recoverable by convention.

Checks per group:
- file-name casing (dot-separated UpperCamel segments)
- ``.Type`` / ``.Behaviour`` suffix hints and type/behaviour separation
- reserved folders (shared types and enums) must be flat and named for
  their shape
- folder metadata freshness (off when the caller runs the per-file
  metadata checks, which cover the same file)
"""

from __future__ import annotations

import logging
import threading
from datetime import date
from pathlib import Path

from pydantic import ValidationError

from modelctl.config.models import RegistryConfig
from modelctl.domain.diagnostics import DiagnosticsSink
from modelctl.domain.documents import parse_document
from modelctl.domain.errors import DocumentParseError
from modelctl.domain.models import FolderMetadata
from modelctl.domain.naming import is_upper_camel
from modelctl.domain.rules import DEFAULT_STALENESS_DAYS, check_freshness
from modelctl.domain.types import DocumentKind
from modelctl.infrastructure.discovery import ModelFileGroup, ModelFileInfo
from modelctl.infrastructure.filesystem import list_subdirectories, read_model_file

logger = logging.getLogger(__name__)

_HINT_SUFFIXES = (".Type", ".Behaviour", ".Behavior")


class StructureValidator:
    """Applies layout conventions to one directory group at a time."""

    def __init__(
        self,
        *,
        today: date,
        staleness_days: int = DEFAULT_STALENESS_DAYS,
        registry_config: RegistryConfig | None = None,
        cancel: threading.Event | None = None,
        check_metadata: bool = True,
    ) -> None:
        self._today = today
        self._staleness_days = staleness_days
        self._config = registry_config or RegistryConfig()
        self._cancel = cancel
        self._check_metadata_file = check_metadata

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def check_group(self, group: ModelFileGroup, sink: DiagnosticsSink) -> None:
        """Run every structure check for *group*.

        Raises:
            ValidationCancelled: If the cancel event is set before the
                metadata file is read.
        """
        documents = [f for f in group.files if f.kind is not DocumentKind.METADATA]

        for info in documents:
            self._check_casing(info, sink)

        shape = self.reserved_shape(group.directory)
        if shape is None:
            for info in documents:
                self._check_suffix_hint(info, sink)
            self._check_separation(group, documents, sink)
        else:
            self._check_reserved_folder(group.directory, shape, documents, sink)

        parent = group.directory.parent
        if self.reserved_shape(parent) in ("types", "enums"):
            sink.info(parent, f"{parent.name} directory should not contain subdirectories.")

        if self._check_metadata_file and group.metadata_path is not None:
            self._check_metadata(group.metadata_path, sink)

    def check_loose_file(self, info: ModelFileInfo, sink: DiagnosticsSink) -> None:
        """Name checks for a file that belongs to no directory group."""
        self._check_casing(info, sink)

    def reserved_shape(self, directory: Path) -> str | None:
        """Return ``"shared"``, ``"types"`` or ``"enums"`` for reserved folders.

        A folder is reserved when its own name, or its name under a shared
        parent, marks it as hosting shared definitions.
        """
        name = directory.name.lower()
        if name == self._config.shared_folder.lower():
            return "shared"
        if name == self._config.type_folder.lower():
            return "types"
        if name == self._config.enum_folder.lower():
            return "enums"
        return None

    # ------------------------------------------------------------------
    # Individual checks
    # ------------------------------------------------------------------

    @staticmethod
    def _check_casing(info: ModelFileInfo, sink: DiagnosticsSink) -> None:
        if not is_upper_camel(info.stem):
            sink.warning(
                info.path,
                f"File name '{info.stem}' should be in PascalCase "
                "(UpperCamel, e.g. 'Customer.Type')",
            )

    @staticmethod
    def _check_suffix_hint(info: ModelFileInfo, sink: DiagnosticsSink) -> None:
        if info.kind.is_auxiliary:
            return
        if not info.stem.endswith(_HINT_SUFFIXES):
            sink.info(
                info.path,
                f"File name '{info.stem}' should end with '.Type' or '.Behaviour' for clarity",
            )

    @staticmethod
    def _check_separation(
        group: ModelFileGroup,
        documents: list[ModelFileInfo],
        sink: DiagnosticsSink,
    ) -> None:
        if not group.has_type_file:
            sink.info(group.directory, "Directory should contain at least one .Type.yaml file")
        if len(documents) > 1 and not group.has_behaviour_file:
            sink.info(
                group.directory,
                "Directory with multiple files should separate behaviors "
                "into .Behaviour.yaml files",
            )

    def _check_reserved_folder(
        self,
        directory: Path,
        shape: str,
        documents: list[ModelFileInfo],
        sink: DiagnosticsSink,
    ) -> None:
        # The shared container itself holds the type and enum folders.
        if shape != "shared" and list_subdirectories(directory):
            sink.info(directory, f"{directory.name} directory should not contain subdirectories.")

        for info in documents:
            is_types = shape == "types" or (
                shape == "shared" and info.kind is DocumentKind.ATTRIBUTE_TYPES
            )
            is_enums = shape == "enums" or (shape == "shared" and info.kind is DocumentKind.ENUM)
            if is_types and "Type" not in info.stem:
                sink.info(
                    info.path,
                    f"AttributeTypes file '{info.stem}' should include 'Type' "
                    "in the name for clarity.",
                )
            if is_enums and any(marker in info.stem for marker in _HINT_SUFFIXES):
                sink.info(
                    info.path,
                    f"Enum file '{info.stem}' should not include '.Type' or "
                    "'.Behaviour' in the name.",
                )

    def _check_metadata(self, path: Path, sink: DiagnosticsSink) -> None:
        try:
            content = read_model_file(path, cancel=self._cancel)
        except (OSError, UnicodeDecodeError) as exc:
            sink.warning(path, f"Error reading metadata file: {exc}")
            return

        if not content.strip():
            sink.warning(path, "Metadata file is empty")
            return

        try:
            tree = parse_document(content)
            metadata = FolderMetadata.model_validate(tree if isinstance(tree, dict) else {})
        except (DocumentParseError, ValidationError):
            # Reported as an Error by the per-file checks.
            logger.debug("Skipping freshness check for unparseable %s", path)
            return

        check_freshness(path, metadata, self._today, self._staleness_days, sink)
