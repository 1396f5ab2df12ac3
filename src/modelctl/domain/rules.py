"""Per-shape rule checks.

Each checker takes a typed document and writes findings into a
:class:`DiagnosticsSink`. Checkers never raise for content problems;
:func:`check_file` is the single entry point that parses, classifies,
dispatches, and runs the abbreviation heuristic.

INVARIANT: Malformed YAML produces exactly one Error for the file and
stops that file's checks. It never affects any other file.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Any, Protocol, TypeVar

from pydantic import BaseModel, ValidationError

from modelctl.domain.classifier import classify, classify_name
from modelctl.domain.diagnostics import DiagnosticsSink
from modelctl.domain.documents import parse_document
from modelctl.domain.errors import DocumentParseError
from modelctl.domain.models import (
    AttributeTypeDefinition,
    AttributeTypesDocument,
    AttributeUsage,
    Behaviour,
    EnumDefinition,
    FolderMetadata,
    ModelDefinition,
    Scenario,
    ValidationProfilesDocument,
)
from modelctl.domain.naming import (
    DEFAULT_ABBREVIATION_ALLOWLIST,
    find_abbreviations,
    is_lower_camel,
    is_upper_camel,
)
from modelctl.domain.types import DocumentKind

DEFAULT_STALENESS_DAYS = 90

_SEMVER_RE = re.compile(
    r"^\d+\.\d+\.\d+(?:-[0-9A-Za-z.-]+)?(?:\+[0-9A-Za-z.-]+)?$",
)


class TypeLookup(Protocol):
    """Read-only view of the shared type registry used by the checks."""

    @property
    def available(self) -> bool: ...

    def __contains__(self, name: object) -> bool: ...

    def get(self, name: str) -> AttributeTypeDefinition | None: ...


@dataclass(frozen=True)
class RuleContext:
    """Run-wide inputs shared by every per-file check."""

    registry: TypeLookup
    today: date
    staleness_days: int = DEFAULT_STALENESS_DAYS
    abbreviation_allowlist: frozenset[str] = field(default=DEFAULT_ABBREVIATION_ALLOWLIST)


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def check_file(
    path: Path,
    content: str,
    ctx: RuleContext,
    sink: DiagnosticsSink,
) -> ModelDefinition | None:
    """Validate one file's content and return the entity model, if any."""
    reserved = classify_name(path.name)
    if reserved is DocumentKind.INSTRUCTIONS:
        sink.info(path, "Copilot instructions file detected.")
        return None
    if reserved is DocumentKind.DOCUMENTATION:
        sink.info(
            path,
            "User-supplied documentation (.md) detected. This file is static and not generated.",
        )
        return None

    if not content.strip():
        if reserved is DocumentKind.METADATA:
            sink.warning(path, "Metadata file is empty")
        else:
            sink.warning(path, "File is empty")
        return None

    try:
        tree = parse_document(content)
    except DocumentParseError as exc:
        sink.error(path, f"YAML parsing error: {exc}")
        return None

    if tree is None:
        sink.warning(path, "Empty YAML document")
        return None

    kind = classify(path.name, tree)
    model: ModelDefinition | None = None

    if kind is DocumentKind.ENTITY:
        entity = _load(ModelDefinition, tree, path, sink, label="Entity model")
        if entity is not None:
            check_entity(path, entity, ctx, sink)
            model = entity
    elif kind is DocumentKind.ATTRIBUTE_TYPES:
        types_doc = _load(AttributeTypesDocument, tree, path, sink, label="Attribute types")
        if types_doc is not None:
            check_attribute_types(path, types_doc.attribute_types, ctx, sink)
    elif kind is DocumentKind.ENUM:
        enum = _load(EnumDefinition, tree, path, sink, label="Enum")
        if enum is not None:
            check_enum(path, enum, sink)
    elif kind is DocumentKind.VALIDATION_PROFILES:
        profiles = _load(ValidationProfilesDocument, tree, path, sink, label="Validation profiles")
        if profiles is not None:
            check_validation_profiles(path, profiles, sink)
    elif kind is DocumentKind.METADATA:
        metadata = _load(FolderMetadata, tree, path, sink, label="Metadata")
        if metadata is not None:
            check_metadata(path, metadata, ctx, sink)
    else:
        sink.warning(path, "Unable to determine file type")

    check_abbreviations(path, content, ctx.abbreviation_allowlist, sink)
    return model


M = TypeVar("M", bound=BaseModel)


def _load(
    model_cls: type[M],
    tree: Any,
    path: Path,
    sink: DiagnosticsSink,
    *,
    label: str,
) -> M | None:
    if not isinstance(tree, Mapping):
        sink.error(path, f"{label} validation error: document must be a mapping")
        return None
    try:
        return model_cls.model_validate(tree)
    except ValidationError as exc:
        first = exc.errors()[0]
        where = ".".join(str(part) for part in first["loc"])
        detail = f"{where}: {first['msg']}" if where else first["msg"]
        sink.error(path, f"{label} validation error: {detail}")
        return None


# ---------------------------------------------------------------------------
# Entity / behaviour documents
# ---------------------------------------------------------------------------


def check_entity(
    path: Path,
    model: ModelDefinition,
    ctx: RuleContext,
    sink: DiagnosticsSink,
) -> None:
    name = model.model.strip()
    if not name:
        sink.error(path, "Model name is required")
    else:
        if not model.summary.strip():
            sink.warning(path, f"Model '{name}' should have a summary")
        if not _stem(path).lower().startswith(name.lower()):
            sink.warning(path, f"Model name '{name}' should match start of file name")

    if not model.attribute_usages and not model.behaviours:
        sink.error(path, f"Model '{name}' must define at least one attribute usage or behaviour")
    elif model.attribute_usages and model.behaviours:
        sink.warning(
            path,
            f"Model '{name}' mixes attribute usages and behaviours; "
            "move behaviours into a separate .Behaviour.yaml file",
        )

    check_attribute_usages(path, name, model.attribute_usages, ctx.registry, sink)
    check_behaviours(path, model.behaviours, sink)
    check_scenarios(path, model.scenarios, sink)


def check_attribute_usages(
    path: Path,
    model_name: str,
    usages: Iterable[AttributeUsage],
    registry: TypeLookup,
    sink: DiagnosticsSink,
) -> None:
    prefix = f"Model '{model_name}'"
    for usage in usages:
        label = usage.label
        type_name = usage.type.strip()
        if not type_name:
            sink.error(path, f"{prefix}: Attribute usage {label} type is required")
        if not usage.name.strip():
            sink.error(path, f"{prefix}: Attribute usage {label} name is required")
        if not usage.summary.strip():
            sink.error(path, f"{prefix}: Attribute usage {label} summary is required")

        if type_name and registry.available and type_name not in registry:
            sink.error(
                path,
                f"{prefix}: Attribute usage {label} type '{type_name}' "
                "is not defined in the shared type registry",
            )

        if usage.name.strip() and not is_lower_camel(usage.name):
            sink.warning(path, f"{prefix}: Attribute name '{usage.name}' should be camelCase")

        if usage.unique and not usage.required:
            sink.info(
                path,
                f"{prefix}: Attribute usage {label} is marked as unique but not required. "
                "Consider if this is intentional.",
            )


def check_behaviours(path: Path, behaviours: Iterable[Behaviour], sink: DiagnosticsSink) -> None:
    for behaviour in behaviours:
        name = behaviour.name.strip()
        if not name:
            sink.error(path, "Behaviour name is required")
        elif not is_lower_camel(name):
            sink.warning(path, f"Behaviour name '{name}' should be camelCase")
        if not behaviour.entities:
            sink.warning(path, f"Behaviour '{name}' should specify at least one entity")


def check_scenarios(path: Path, scenarios: Iterable[Scenario], sink: DiagnosticsSink) -> None:
    for scenario in scenarios:
        name = scenario.name.strip()
        if not name:
            sink.error(path, "Scenario name is required")
        for clause in ("given", "when", "then"):
            if not getattr(scenario, clause):
                sink.warning(
                    path,
                    f"Scenario '{name}' should have at least one '{clause}' condition",
                )


# ---------------------------------------------------------------------------
# Shared type documents
# ---------------------------------------------------------------------------


def check_attribute_types(
    path: Path,
    definitions: list[AttributeTypeDefinition],
    ctx: RuleContext,
    sink: DiagnosticsSink,
) -> None:
    local = {d.name: d for d in definitions if d.name.strip()}

    for definition in definitions:
        name = definition.name.strip()
        if not name:
            sink.error(path, "Attribute type name is required")
        if not definition.type.strip():
            sink.error(path, f"Attribute type '{name}' must specify a type")
        if name and not is_lower_camel(name):
            sink.warning(path, f"Attribute type name '{name}' should be camelCase")

        base = (definition.extends or "").strip()
        if not base:
            continue
        if base not in local and ctx.registry.available and base not in ctx.registry:
            sink.warning(path, f"Attribute type '{name}' extends unknown type '{base}'")
            continue
        chain = _extension_cycle(name, local, ctx.registry)
        if chain:
            sink.warning(
                path,
                f"Attribute type '{name}' has a circular extends chain: {' -> '.join(chain)}",
            )


def _extension_cycle(
    start: str,
    local: Mapping[str, AttributeTypeDefinition],
    registry: TypeLookup,
) -> list[str]:
    """Return the chain back to *start* if following ``extends`` loops, else []."""
    chain = [start]
    seen = {start}
    current = local.get(start)
    while current is not None and current.extends:
        nxt = current.extends.strip()
        chain.append(nxt)
        if nxt == start:
            return chain
        if nxt in seen:
            # Loops further down the chain are reported on their own members.
            return []
        seen.add(nxt)
        current = local.get(nxt) or registry.get(nxt)
    return []


def check_enum(path: Path, enum: EnumDefinition, sink: DiagnosticsSink) -> None:
    name = enum.enum.strip()
    if not name:
        sink.error(path, "Enum name is required")
    elif not is_upper_camel(name):
        sink.warning(path, f"Enum name '{name}' should be PascalCase")

    if not enum.items:
        sink.error(path, "Enum must have at least one item")
        return

    counts: dict[str, int] = {}
    for index, item in enumerate(enum.items, start=1):
        ident = f"'{item.name}'" if item.name.strip() else str(index)
        if not item.name.strip():
            sink.error(path, f"Enum '{name}': item {ident} name is required")
        if not item.display.strip():
            sink.error(path, f"Enum '{name}': item {ident} display is required")
        if item.value is None:
            sink.error(path, f"Enum '{name}': item {ident} value is required")
            continue
        key = str(item.value)
        counts[key] = counts.get(key, 0) + 1

    for value, seen in counts.items():
        if seen > 1:
            sink.error(path, f"Enum has duplicate value: {value}")


# ---------------------------------------------------------------------------
# Validation profiles
# ---------------------------------------------------------------------------


def check_validation_profiles(
    path: Path,
    document: ValidationProfilesDocument,
    sink: DiagnosticsSink,
) -> None:
    for profile in document.validation_profiles:
        name = profile.name.strip()
        if not name:
            sink.error(path, "Validation profile name is required")
        if not profile.claims:
            sink.warning(path, f"Validation profile '{name}' should have at least one claim")
        for index, claim in enumerate(profile.claims, start=1):
            if not claim.action.strip() or not claim.resource.strip():
                sink.error(
                    path,
                    f"Validation profile '{name}': claim {index} "
                    "must specify an action and a resource",
                )


# ---------------------------------------------------------------------------
# Folder metadata
# ---------------------------------------------------------------------------


def check_metadata(
    path: Path,
    metadata: FolderMetadata,
    ctx: RuleContext,
    sink: DiagnosticsSink,
) -> None:
    if not metadata.name.strip():
        sink.error(path, "Metadata name is required")
    if metadata.version is not None and not _SEMVER_RE.match(metadata.version.strip()):
        sink.warning(
            path,
            f"Metadata version '{metadata.version}' should be a semantic version (e.g. 1.0.0)",
        )
    check_freshness(path, metadata, ctx.today, ctx.staleness_days, sink)


def check_freshness(
    path: Path,
    metadata: FolderMetadata,
    today: date,
    threshold_days: int,
    sink: DiagnosticsSink,
) -> None:
    """Warn when ``lastReviewed`` is older than *threshold_days*.

    Shared by the metadata checker and the structure validator.
    """
    try:
        reviewed = metadata.reviewed_on()
    except ValueError:
        sink.warning(path, f"Metadata lastReviewed '{metadata.last_reviewed}' is not a valid date")
        return
    if reviewed is None:
        return
    days = (today - reviewed).days
    if days > threshold_days:
        sink.warning(
            path,
            f"Metadata has not been reviewed for {days} days (threshold: {threshold_days} days)",
        )


# ---------------------------------------------------------------------------
# Heuristics
# ---------------------------------------------------------------------------


def check_abbreviations(
    path: Path,
    content: str,
    allowlist: Iterable[str],
    sink: DiagnosticsSink,
) -> None:
    for token in find_abbreviations(content, allowlist):
        sink.info(
            path,
            f"Potential abbreviation '{token}' found - consider using full words "
            "unless domain-specific",
        )


def _stem(path: Path) -> str:
    """File name without its final extension (``Customer.Type.yaml`` -> ``Customer.Type``)."""
    return path.name.rsplit(".", 1)[0] if "." in path.name else path.name
