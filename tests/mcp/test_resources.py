"""Tests for MCP resource implementations."""

from __future__ import annotations

import json
from typing import Any

from modelctl.config.settings import ModelctlSettings
from modelctl.mcp.resources import register_resources, schema_impl, schema_index_impl


class TestSchemaResources:
    def test_index(self) -> None:
        assert schema_index_impl() == [
            "entity",
            "attribute_types",
            "enum",
            "validation_profiles",
            "metadata",
        ]

    def test_schema(self) -> None:
        schema = schema_impl("enum")
        assert schema["$id"] == "modelctl://schemas/enum"

    def test_unknown_kind(self) -> None:
        payload = schema_impl("widget")
        assert payload["error"] == "No schema for kind 'widget'"
        assert "entity" in payload["kinds"]

    def test_auxiliary_kind(self) -> None:
        assert "error" in schema_impl("documentation")


class _RecordingServer:
    def __init__(self) -> None:
        self.resources: dict[str, Any] = {}

    def resource(self, uri: str) -> Any:
        def decorator(func: Any) -> Any:
            self.resources[uri] = func
            return func

        return decorator


class TestRegisterResources:
    def test_registers_uris(self, settings: ModelctlSettings) -> None:
        server = _RecordingServer()
        register_resources(server, settings)
        assert set(server.resources) == {"modelctl://schemas", "modelctl://schemas/{kind}"}
        index = json.loads(server.resources["modelctl://schemas"]())
        assert "metadata" in index
        entity = json.loads(server.resources["modelctl://schemas/{kind}"]("entity"))
        assert "attributeUsages" in entity["properties"]
