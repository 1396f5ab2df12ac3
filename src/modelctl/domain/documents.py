"""YAML parsing for model documents.

Model files are read with ruamel.yaml's safe loader: comments and quote
styles are irrelevant for validation, and the safe loader resolves
``2024-01-01`` to a :class:`datetime.date` the same way editors show it.
"""

from __future__ import annotations

from typing import Any

from ruamel.yaml import YAML
from ruamel.yaml.error import MarkedYAMLError, YAMLError

from modelctl.domain.errors import DocumentParseError


def _new_yaml() -> YAML:
    """Create a fresh safe YAML loader.

    A new instance per call keeps parser state from leaking between files
    when directory groups are validated on worker threads.
    """
    return YAML(typ="safe", pure=True)


def parse_document(content: str) -> Any:
    """Parse *content* into a generic tree of dicts, lists, and scalars.

    Multi-document streams are rejected: a model file holds exactly one
    document. Empty content parses to ``None``.

    Raises:
        DocumentParseError: If the text is not well-formed YAML.
    """
    try:
        documents = list(_new_yaml().load_all(content))
    except MarkedYAMLError as exc:
        line = exc.problem_mark.line + 1 if exc.problem_mark is not None else None
        problem = exc.problem or exc.context or "invalid YAML"
        where = f" (line {line})" if line is not None else ""
        raise DocumentParseError(f"{problem}{where}", line=line) from exc
    except YAMLError as exc:
        raise DocumentParseError(str(exc)) from exc

    if not documents:
        return None
    if len(documents) > 1:
        msg = f"expected a single YAML document, found {len(documents)}"
        raise DocumentParseError(msg)
    return documents[0]


def top_level_keys(tree: Any) -> frozenset[str]:
    """Return the string keys of a mapping document (empty for anything else)."""
    if not isinstance(tree, dict):
        return frozenset()
    return frozenset(str(key) for key in tree)
