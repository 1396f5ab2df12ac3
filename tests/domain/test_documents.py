"""Tests for YAML parsing."""

from __future__ import annotations

from datetime import date

import pytest

from modelctl.domain.documents import parse_document, top_level_keys
from modelctl.domain.errors import DocumentParseError


class TestParseDocument:
    def test_parses_mapping(self) -> None:
        tree = parse_document("model: Customer\nattributeUsages: []\n")
        assert tree == {"model": "Customer", "attributeUsages": []}

    def test_dates_resolve_to_date(self) -> None:
        tree = parse_document("lastReviewed: 2024-01-01\n")
        assert tree["lastReviewed"] == date(2024, 1, 1)

    def test_empty_content_is_none(self) -> None:
        assert parse_document("") is None
        assert parse_document("# only a comment\n") is None

    def test_malformed_reports_line(self) -> None:
        with pytest.raises(DocumentParseError) as excinfo:
            parse_document("model: Customer\nattributeUsages: [unclosed\n")
        assert excinfo.value.line is not None
        assert "line" in str(excinfo.value)

    def test_multiple_documents_rejected(self) -> None:
        with pytest.raises(DocumentParseError, match="single YAML document"):
            parse_document("model: A\n---\nmodel: B\n")


class TestTopLevelKeys:
    def test_mapping(self) -> None:
        assert top_level_keys({"enum": "X", "items": []}) == frozenset({"enum", "items"})

    def test_non_mapping(self) -> None:
        assert top_level_keys(["a", "b"]) == frozenset()
        assert top_level_keys(None) == frozenset()
