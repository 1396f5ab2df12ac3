"""Document classification.

INVARIANT: Every file gets exactly one :class:`DocumentKind`.

Reserved file names win regardless of content. Everything else is parsed
into a generic tree and classified from its top-level key set in a fixed
priority order, so marker words inside free-text values (a summary that
mentions ``attributeTypes:``) never change the outcome.
"""

from __future__ import annotations

from pathlib import PurePath
from typing import Any

from modelctl.domain.documents import parse_document, top_level_keys
from modelctl.domain.errors import DocumentParseError
from modelctl.domain.types import DocumentKind

METADATA_FILE_NAMES = frozenset({"_meta.yaml", "_meta.yml"})
INSTRUCTIONS_FILE_NAME = "copilot-instructions.md"
DOCUMENTATION_SUFFIX = ".md"

# (required keys, any-of keys) checked in priority order.
_KEY_RULES: tuple[tuple[DocumentKind, frozenset[str], frozenset[str]], ...] = (
    (DocumentKind.ENTITY, frozenset({"model"}), frozenset({"attributeUsages", "behaviours"})),
    (DocumentKind.ATTRIBUTE_TYPES, frozenset({"attributeTypes"}), frozenset()),
    (DocumentKind.ENUM, frozenset({"enum", "items"}), frozenset()),
    (DocumentKind.VALIDATION_PROFILES, frozenset({"validationProfiles"}), frozenset()),
)


def classify_name(file_name: str) -> DocumentKind | None:
    """Classify by reserved file name, or return None when content decides."""
    name = PurePath(file_name).name
    lowered = name.lower()
    if lowered in METADATA_FILE_NAMES:
        return DocumentKind.METADATA
    if lowered == INSTRUCTIONS_FILE_NAME:
        return DocumentKind.INSTRUCTIONS
    if lowered.endswith(DOCUMENTATION_SUFFIX):
        return DocumentKind.DOCUMENTATION
    return None


def classify_tree(tree: Any) -> DocumentKind:
    """Classify an already-parsed document from its top-level keys."""
    keys = top_level_keys(tree)
    for kind, required, any_of in _KEY_RULES:
        if not required <= keys:
            continue
        if any_of and not any_of & keys:
            continue
        return kind
    return DocumentKind.UNKNOWN


def classify(file_name: str, tree: Any) -> DocumentKind:
    """Classify a parsed document, letting reserved names take precedence."""
    reserved = classify_name(file_name)
    if reserved is not None:
        return reserved
    return classify_tree(tree)


def classify_document(file_name: str, content: str) -> DocumentKind:
    """Classify raw file content.

    Content that is not well-formed YAML is ``UNKNOWN`` here; the parse
    error itself is reported by the per-file checks.
    """
    reserved = classify_name(file_name)
    if reserved is not None:
        return reserved
    try:
        tree = parse_document(content)
    except DocumentParseError:
        return DocumentKind.UNKNOWN
    return classify_tree(tree)
