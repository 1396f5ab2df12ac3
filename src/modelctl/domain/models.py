"""Typed document models for the five model-file shapes.

Keys in the YAML files are camelCase (``attributeUsages``, ``lastReviewed``);
the models expose snake_case attributes through an alias generator.

Every field carries a default. Missing required fields are reported by
:mod:`modelctl.domain.rules` as diagnostics, so constructing a model from a
partial document must not fail. Explicit ``null`` values are treated as
absent for the same reason.

All models use Pydantic with frozen config for immutability.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class DocumentModel(BaseModel):
    """Base for every document model: camelCase aliases, tolerant input."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        coerce_numbers_to_str=True,
    )

    @model_validator(mode="before")
    @classmethod
    def drop_nulls(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data


# ---------------------------------------------------------------------------
# Entity / behaviour documents
# ---------------------------------------------------------------------------


class AttributeConstraints(DocumentModel):
    """Optional constraint set on an attribute type or usage."""

    min_length: int | None = None
    max_length: int | None = None
    minimum: Any = None
    maximum: Any = None
    pattern: str | None = None
    decimal_places: int | None = None
    enum: list[Any] | None = None
    nullable: bool | None = None
    unit: str | None = None
    example: Any = None


class AttributeUsage(DocumentModel):
    """A named, typed, documented field on an entity."""

    name: str = ""
    type: str = ""
    required: bool = False
    unique: bool = False
    default: Any = None
    summary: str = ""
    remarks: str | None = None
    constraints: AttributeConstraints | None = None

    @property
    def label(self) -> str:
        """Identifier used in messages, falling back to the type."""
        if self.name.strip():
            return f"'{self.name}'"
        if self.type.strip():
            return f"(type: {self.type})"
        return "(unnamed attribute)"


class Behaviour(DocumentModel):
    name: str = ""
    summary: str = ""
    remarks: str | None = None
    entities: list[str] = Field(default_factory=list)
    preconditions: list[str] = Field(default_factory=list)
    effects: list[str] = Field(default_factory=list)


class Scenario(DocumentModel):
    name: str = ""
    given: list[str] = Field(default_factory=list)
    when: list[str] = Field(default_factory=list)
    then: list[str] = Field(default_factory=list)


class ModelDefinition(DocumentModel):
    """One domain entity: attributes and/or behaviours and scenarios."""

    model: str = ""
    summary: str = ""
    remarks: str | None = None
    owned_by: str | None = None
    attribute_usages: list[AttributeUsage] = Field(default_factory=list)
    behaviours: list[Behaviour] = Field(default_factory=list)
    scenarios: list[Scenario] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Shared type documents
# ---------------------------------------------------------------------------


class AttributeTypeDefinition(DocumentModel):
    """A reusable type with a base type tag and optional constraints."""

    name: str = ""
    type: str = ""
    extends: str | None = None
    format: str | None = None
    constraints: AttributeConstraints | None = None
    summary: str = ""
    remarks: str | None = None


class AttributeTypesDocument(DocumentModel):
    """Wrapper for an ``attributeTypes:`` file."""

    attribute_types: list[AttributeTypeDefinition] = Field(default_factory=list)


class EnumItem(DocumentModel):
    name: str = ""
    display: str = ""
    value: Any = None


class EnumDefinition(DocumentModel):
    """An enumeration referenced by name like any other shared type."""

    enum: str = ""
    summary: str = ""
    remarks: str | None = None
    items: list[EnumItem] = Field(default_factory=list)

    def as_attribute_type(self) -> AttributeTypeDefinition:
        """Pseudo attribute type so enums resolve through the registry."""
        return AttributeTypeDefinition(
            name=self.enum,
            type="enum",
            summary=self.summary or f"Enum type {self.enum}",
        )


# ---------------------------------------------------------------------------
# Validation profiles
# ---------------------------------------------------------------------------


class Claim(DocumentModel):
    action: str = ""
    resource: str = ""


class AttributeRule(DocumentModel):
    required: bool | None = None
    default: Any = None


class BehaviourRule(DocumentModel):
    allowed: bool = False


class ValidationProfile(DocumentModel):
    """A named, condition-scoped override set."""

    name: str = ""
    claims: list[Claim] = Field(default_factory=list)
    attribute_rules: dict[str, AttributeRule] = Field(default_factory=dict)
    behaviour_rules: dict[str, BehaviourRule] = Field(default_factory=dict)


class ValidationProfilesDocument(DocumentModel):
    """Wrapper for a ``validationProfiles:`` file."""

    validation_profiles: list[ValidationProfile] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Folder metadata
# ---------------------------------------------------------------------------


class FolderMetadata(DocumentModel):
    """Ownership, versioning, and review information for a folder."""

    name: str = ""
    summary: str = ""
    remarks: str | None = None
    owners: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    dependencies: list[str] = Field(default_factory=list)
    version: str | None = None
    status: str | None = None
    last_reviewed: date | datetime | str | None = None

    def reviewed_on(self) -> date | None:
        """Return ``lastReviewed`` as a date.

        Raises:
            ValueError: If the value is present but not an ISO date.
        """
        value = self.last_reviewed
        if value is None:
            return None
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, date):
            return value
        text = value.strip()
        try:
            return date.fromisoformat(text)
        except ValueError:
            return datetime.fromisoformat(text).date()
