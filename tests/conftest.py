"""Shared pytest fixtures for modelctl tests.

``model_tree`` builds a small but complete model hierarchy in ``tmp_path``
that validates with no findings at all; tests then add or break files to
trigger exactly the finding they are about.
"""

from __future__ import annotations

import textwrap
from collections.abc import Generator
from datetime import UTC, datetime
from pathlib import Path

import pytest
from click.testing import CliRunner
from samples import (
    ATTRIBUTE_TYPES_YAML,
    BEHAVIOUR_YAML,
    ENTITY_YAML,
    ENUM_YAML,
    WriteFile,
    metadata_yaml,
)

from modelctl.config.settings import ModelctlSettings
from modelctl.services.telemetry import disable_telemetry


@pytest.fixture(autouse=True)
def _reset_telemetry() -> Generator[None]:
    """Telemetry is a context variable; keep -v runs from leaking into other tests."""
    yield
    disable_telemetry()


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def settings(tmp_path: Path) -> ModelctlSettings:
    """Default settings rooted at the temp directory."""
    return ModelctlSettings.from_cli(project_root=tmp_path)


@pytest.fixture
def write_file(tmp_path: Path) -> WriteFile:
    """Return a helper that writes dedented text relative to ``tmp_path``."""

    def _write(relative: Path | str, content: str) -> Path:
        path = tmp_path / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(textwrap.dedent(content), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def model_tree(tmp_path: Path, write_file: WriteFile) -> Path:
    """A clean model hierarchy that validates with zero findings."""
    today = datetime.now(UTC).date().isoformat()
    write_file("models/Shared/AttributeTypes/Common.Type.yaml", ATTRIBUTE_TYPES_YAML)
    write_file("models/Shared/Enums/CustomerStatus.yaml", ENUM_YAML)
    write_file("models/Business/CustomerManagement/_meta.yaml", metadata_yaml(today))
    write_file("models/Business/CustomerManagement/Customer.Type.yaml", ENTITY_YAML)
    write_file("models/Business/CustomerManagement/Customer.Behaviour.yaml", BEHAVIOUR_YAML)
    return tmp_path


@pytest.fixture
def _isolated_project(model_tree: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to the model tree so CLI commands run against it.

    Use via ``@pytest.mark.usefixtures("_isolated_project")`` on command
    test classes.
    """
    monkeypatch.delenv("MODELCTL_CONFIG", raising=False)
    monkeypatch.chdir(model_tree)
