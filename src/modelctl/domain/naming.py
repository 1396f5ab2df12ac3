"""Naming-convention predicates shared by the structure and rule checks.

Pure functions with no I/O. Casing rules: a name
is lowerCamel when it starts with a lower-case letter and contains only
letters and digits; a file stem is UpperCamel when every dot-separated
segment starts with an upper-case letter and is alphanumeric.
"""

from __future__ import annotations

import re
from collections.abc import Iterable

DEFAULT_ABBREVIATION_ALLOWLIST: frozenset[str] = frozenset(
    {"ID", "URL", "URI", "API", "HTTP", "HTTPS", "JSON", "XML", "HTML", "CSS", "SQL", "UTC"}
)

_ABBREVIATION_RE = re.compile(r"\b[A-Z]{2,}\b")


def is_lower_camel(name: str) -> bool:
    """Return True for names like ``customerNumber`` or ``id``."""
    if not name:
        return False
    return name[0].islower() and name.isascii() and name.isalnum()


def is_upper_camel(name: str) -> bool:
    """Return True when every dot-separated segment is UpperCamel.

    ``Customer.Type`` and ``OrderLine`` pass; ``customer.type`` and
    ``Customer.type`` do not.
    """
    if not name:
        return False
    for segment in name.split("."):
        if not segment or not segment.isascii() or not segment.isalnum():
            return False
        if not segment[0].isupper():
            return False
    return True


def find_abbreviations(
    text: str,
    allowlist: Iterable[str] = DEFAULT_ABBREVIATION_ALLOWLIST,
) -> list[str]:
    """Return distinct all-uppercase tokens not in *allowlist*, in first-seen order."""
    allowed = {token.upper() for token in allowlist}
    seen: dict[str, None] = {}
    for match in _ABBREVIATION_RE.finditer(text):
        token = match.group(0)
        if token not in allowed:
            seen.setdefault(token, None)
    return list(seen)
