"""Config file and solution-root discovery.

Walk-up finder locates modelctl.toml, similar to how git finds .git/.
Supports the MODELCTL_CONFIG env var and --config CLI flag overrides.
"""

from __future__ import annotations

import os
from pathlib import Path

CONFIG_FILENAME = "modelctl.toml"
CONFIG_ENV_VAR = "MODELCTL_CONFIG"

_SOLUTION_GLOB = "*.sln"
_MODELS_DIR = "models"


def find_config(start: Path | None = None) -> Path | None:
    """Walk up from *start* (default: cwd) looking for modelctl.toml.

    Returns the path to the config file, or None if not found.
    Checks MODELCTL_CONFIG env var first.
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        p = Path(env_path)
        if p.is_file():
            return p
        return None

    current = (start or Path.cwd()).resolve()
    while True:
        candidate = current / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break
        current = parent
    return None


def find_solution_root(start: Path) -> Path:
    """Walk up from *start* to the directory that anchors a model tree.

    A directory qualifies when it holds ``modelctl.toml``, a ``*.sln``
    file, or a ``models`` folder. Falls back to *start* itself (or its
    parent, for a file) when nothing matches.
    """
    origin = start.resolve()
    if origin.is_file() or not origin.exists():
        origin = origin.parent

    current = origin
    while True:
        if (current / CONFIG_FILENAME).is_file():
            return current
        if (current / _MODELS_DIR).is_dir():
            return current
        if any(current.glob(_SOLUTION_GLOB)):
            return current
        parent = current.parent
        if parent == current:
            return origin
        current = parent
