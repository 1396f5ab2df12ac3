"""Shared type registry — the run-scoped lookup of shared types and enums.

INVARIANT: A registry is an immutable snapshot. It is built once per
solution root, then only read; no check ever mutates it.

Every folder whose name ends with the configured shared-folder name is a
shared container. Inside it, the attribute-type and enum subfolders (and
files placed directly in the container) are parsed and merged into one
name -> definition map. Definitions are merged in sorted path order and
the last one wins; each overwrite is kept as a :class:`RegistryCollision`
so the caller can report it. Files that fail to read or parse are skipped
so one broken shared file never blocks validation.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel, ValidationError

from modelctl.config.models import DiscoveryConfig, RegistryConfig
from modelctl.domain.classifier import classify_tree
from modelctl.domain.documents import parse_document
from modelctl.domain.errors import DocumentParseError
from modelctl.domain.models import (
    AttributeTypeDefinition,
    AttributeTypesDocument,
    EnumDefinition,
)
from modelctl.domain.types import DocumentKind
from modelctl.infrastructure.filesystem import (
    check_cancelled,
    find_model_files,
    read_model_file,
)

logger = logging.getLogger(__name__)


class RegistryCollision(BaseModel):
    """A shared name defined more than once; *path* is the definition that won."""

    model_config = {"frozen": True}

    name: str
    path: Path
    previous_path: Path


@dataclass(frozen=True)
class SharedTypeRegistry:
    """Read-only name -> definition snapshot for one solution root."""

    types: Mapping[str, AttributeTypeDefinition] = field(
        default_factory=lambda: MappingProxyType({})
    )
    sources: Mapping[str, Path] = field(default_factory=lambda: MappingProxyType({}))
    collisions: tuple[RegistryCollision, ...] = ()
    shared_folders: tuple[Path, ...] = ()

    @property
    def available(self) -> bool:
        """True when at least one shared folder was found.

        Without one, type references cannot be checked and are not reported.
        """
        return bool(self.shared_folders)

    def __contains__(self, name: object) -> bool:
        return name in self.types

    def __iter__(self) -> Iterator[str]:
        return iter(self.types)

    def __len__(self) -> int:
        return len(self.types)

    def get(self, name: str) -> AttributeTypeDefinition | None:
        return self.types.get(name)

    def summary(self) -> dict[str, Any]:
        return {
            "available": self.available,
            "type_count": len(self.types),
            "collision_count": len(self.collisions),
            "shared_folders": [str(p) for p in self.shared_folders],
        }


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------


def find_shared_folders(
    root: Path,
    *,
    config: RegistryConfig,
    skip_dirs: list[str],
) -> list[Path]:
    """Every directory under *root* (inclusive) whose name ends with the shared-folder name."""
    suffix = config.shared_folder.lower()
    skipped = set(skip_dirs)
    folders = [root] if root.name.lower().endswith(suffix) else []
    for path in root.rglob("*"):
        if not path.is_dir() or not path.name.lower().endswith(suffix):
            continue
        if any(part in skipped for part in path.relative_to(root).parts):
            continue
        folders.append(path)
    return sorted(folders)


def _shared_files(folder: Path, config: RegistryConfig, discovery: DiscoveryConfig) -> list[Path]:
    suffixes = {ext.lower() for ext in discovery.extensions}
    files = [p for p in folder.iterdir() if p.is_file() and p.suffix.lower() in suffixes]
    for name in (config.type_folder, config.enum_folder):
        child = folder / name
        if child.is_dir():
            files.extend(
                find_model_files(
                    child, extensions=discovery.extensions, skip_dirs=discovery.skip_dirs
                )
            )
    return sorted(files)


def _definitions_in(content: str) -> list[AttributeTypeDefinition]:
    tree = parse_document(content)
    kind = classify_tree(tree)
    if kind is DocumentKind.ATTRIBUTE_TYPES:
        document = AttributeTypesDocument.model_validate(tree)
        return [d for d in document.attribute_types if d.name.strip()]
    if kind is DocumentKind.ENUM:
        enum = EnumDefinition.model_validate(tree)
        return [enum.as_attribute_type()] if enum.enum.strip() else []
    return []


def load_shared_registry(
    root: Path,
    *,
    config: RegistryConfig | None = None,
    discovery: DiscoveryConfig | None = None,
    cancel: threading.Event | None = None,
) -> SharedTypeRegistry:
    """Build the registry for *root*.

    Raises:
        ValidationCancelled: If *cancel* is set before a shared file is read.
    """
    config = config or RegistryConfig()
    discovery = discovery or DiscoveryConfig()
    if not root.is_dir():
        return SharedTypeRegistry()

    check_cancelled(cancel)
    folders = find_shared_folders(root, config=config, skip_dirs=discovery.skip_dirs)

    types: dict[str, AttributeTypeDefinition] = {}
    sources: dict[str, Path] = {}
    collisions: list[RegistryCollision] = []
    seen: set[Path] = set()

    for folder in folders:
        for path in _shared_files(folder, config, discovery):
            if path in seen:
                continue
            seen.add(path)
            try:
                content = read_model_file(path, cancel=cancel)
                definitions = _definitions_in(content)
            except (OSError, UnicodeDecodeError, DocumentParseError, ValidationError) as exc:
                logger.debug("Skipping unparseable shared file %s: %s", path, exc)
                continue
            for definition in definitions:
                previous = sources.get(definition.name)
                if previous is not None:
                    collisions.append(
                        RegistryCollision(name=definition.name, path=path, previous_path=previous)
                    )
                types[definition.name] = definition
                sources[definition.name] = path

    logger.debug(
        "Loaded %d shared types from %d folders (%d collisions)",
        len(types),
        len(folders),
        len(collisions),
    )
    return SharedTypeRegistry(
        types=MappingProxyType(types),
        sources=MappingProxyType(sources),
        collisions=tuple(collisions),
        shared_folders=tuple(folders),
    )


class RegistryCache:
    """Builds each root's registry on first use and keeps it for one run."""

    def __init__(
        self,
        *,
        config: RegistryConfig | None = None,
        discovery: DiscoveryConfig | None = None,
        cancel: threading.Event | None = None,
    ) -> None:
        self._config = config
        self._discovery = discovery
        self._cancel = cancel
        self._lock = threading.Lock()
        self._registries: dict[Path, SharedTypeRegistry] = {}

    def get(self, root: Path) -> SharedTypeRegistry:
        key = root.resolve()
        with self._lock:
            registry = self._registries.get(key)
            if registry is None:
                registry = load_shared_registry(
                    root,
                    config=self._config,
                    discovery=self._discovery,
                    cancel=self._cancel,
                )
                self._registries[key] = registry
            return registry
