"""SchemaService — editor-facing JSON Schemas generated from the document models.

The schemas are derived from :mod:`modelctl.domain.models`, the same
models the validator parses into, so editor completion and validation
cannot drift apart.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import BaseModel

from modelctl import __version__
from modelctl.domain.models import (
    AttributeTypesDocument,
    EnumDefinition,
    FolderMetadata,
    ModelDefinition,
    ValidationProfilesDocument,
)
from modelctl.domain.types import DocumentKind
from modelctl.services.base import BaseService
from modelctl.services.result import ServiceResult
from modelctl.services.telemetry import traced

SCHEMA_MODELS: dict[DocumentKind, type[BaseModel]] = {
    DocumentKind.ENTITY: ModelDefinition,
    DocumentKind.ATTRIBUTE_TYPES: AttributeTypesDocument,
    DocumentKind.ENUM: EnumDefinition,
    DocumentKind.VALIDATION_PROFILES: ValidationProfilesDocument,
    DocumentKind.METADATA: FolderMetadata,
}

_SCHEMA_DIALECT = "https://json-schema.org/draft/2020-12/schema"


def schema_for(kind: DocumentKind | str) -> dict[str, Any]:
    """Return the JSON Schema for one document kind.

    Raises:
        KeyError: If *kind* has no schema (auxiliary or unknown kinds).
    """
    document_kind = DocumentKind(kind)
    model = SCHEMA_MODELS[document_kind]
    schema = model.model_json_schema(by_alias=True, mode="validation")
    return {
        "$schema": _SCHEMA_DIALECT,
        "$id": f"modelctl://schemas/{document_kind.value}",
        "x-modelctl-version": __version__,
        **schema,
    }


def schema_file_name(kind: DocumentKind) -> str:
    return f"{kind.value.replace('_', '-')}.schema.json"


class SchemaService(BaseService):
    """Export the document-shape schemas."""

    @traced
    def export_schemas(self, output_dir: Path | str | None = None) -> ServiceResult:
        """Generate every schema; write them to *output_dir* when given."""
        schemas = {kind.value: schema_for(kind) for kind in SCHEMA_MODELS}

        if output_dir is None:
            return ServiceResult(
                ok=True,
                op="export_schemas",
                data={"schemas": schemas, "count": len(schemas)},
            )

        target = Path(output_dir)
        try:
            target.mkdir(parents=True, exist_ok=True)
            files: list[str] = []
            for kind in SCHEMA_MODELS:
                path = target / schema_file_name(kind)
                path.write_text(
                    json.dumps(schemas[kind.value], indent=2) + "\n",
                    encoding="utf-8",
                )
                files.append(str(path))
        except OSError as exc:
            return self._failure(
                "export_schemas",
                "WRITE_FAILED",
                f"Could not write schemas to {target}: {exc}",
            )

        return ServiceResult(
            ok=True,
            op="export_schemas",
            data={"output_dir": str(target), "files": files, "count": len(files)},
        )
