"""Tests for ModelctlSettings — unified settings with TOML source."""

from pathlib import Path

import click
import pytest

from modelctl.config.settings import ModelctlSettings


@pytest.fixture(autouse=True)
def _no_config_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("MODELCTL_CONFIG", raising=False)


class TestSettingsDefaults:
    def test_all_defaults(self, tmp_path: Path) -> None:
        settings = ModelctlSettings.from_cli(project_root=tmp_path)
        assert settings.project_root == tmp_path
        assert settings.json_output is False
        assert settings.discovery.model_dirs == ["models", "src/models"]
        assert settings.registry.shared_folder == "Shared"
        assert settings.validation.staleness_days == 90
        assert settings.validation.workers == 1
        assert settings.mcp.transport == "stdio"

    def test_frozen(self, tmp_path: Path) -> None:
        settings = ModelctlSettings.from_cli(project_root=tmp_path)
        with pytest.raises(Exception):
            settings.quiet = True  # type: ignore[misc]

    def test_allowed_abbreviations_merge_extras(self, tmp_path: Path) -> None:
        (tmp_path / "modelctl.toml").write_text(
            '[validation]\nextra_abbreviations = ["sku", "VAT"]\n', encoding="utf-8"
        )
        settings = ModelctlSettings.from_cli(project_root=tmp_path)
        allowed = settings.validation.allowed_abbreviations
        assert {"SKU", "VAT", "ID"} <= allowed


class TestTomlSource:
    def test_loads_from_toml(self, tmp_path: Path) -> None:
        (tmp_path / "modelctl.toml").write_text(
            '[registry]\nshared_folder = "Common"\n[validation]\nstaleness_days = 30\n',
            encoding="utf-8",
        )
        settings = ModelctlSettings.from_cli(project_root=tmp_path)
        assert settings.registry.shared_folder == "Common"
        assert settings.registry.enum_folder == "Enums"
        assert settings.validation.staleness_days == 30
        assert settings.config_path == tmp_path / "modelctl.toml"

    def test_project_root_from_config_location(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        (tmp_path / "modelctl.toml").write_text("", encoding="utf-8")
        nested = tmp_path / "models" / "Sales"
        nested.mkdir(parents=True)
        monkeypatch.chdir(nested)
        settings = ModelctlSettings.from_cli()
        assert settings.project_root == tmp_path.resolve()

    def test_explicit_config_path(self, tmp_path: Path) -> None:
        custom = tmp_path / "custom" / "my.toml"
        custom.parent.mkdir(parents=True)
        custom.write_text("[mcp]\nenabled = false\n", encoding="utf-8")
        settings = ModelctlSettings.from_cli(config_path=str(custom), project_root=tmp_path)
        assert settings.mcp.enabled is False
        assert settings.config_path == custom

    def test_missing_explicit_config(self, tmp_path: Path) -> None:
        with pytest.raises(click.ClickException, match="Config file not found"):
            ModelctlSettings.from_cli(config_path=str(tmp_path / "missing.toml"))

    def test_invalid_toml(self, tmp_path: Path) -> None:
        (tmp_path / "modelctl.toml").write_text("[validation\n", encoding="utf-8")
        with pytest.raises(click.ClickException, match="Invalid TOML"):
            ModelctlSettings.from_cli(project_root=tmp_path)

    def test_out_of_range_value_rejected(self, tmp_path: Path) -> None:
        (tmp_path / "modelctl.toml").write_text(
            "[validation]\nworkers = 0\n", encoding="utf-8"
        )
        with pytest.raises(Exception):
            ModelctlSettings.from_cli(project_root=tmp_path)


class TestPriority:
    def test_env_overrides_toml(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "modelctl.toml").write_text(
            "[validation]\nstaleness_days = 30\n", encoding="utf-8"
        )
        monkeypatch.setenv("MODELCTL_VALIDATION__STALENESS_DAYS", "14")
        settings = ModelctlSettings.from_cli(project_root=tmp_path)
        assert settings.validation.staleness_days == 14

    def test_cli_flags_override(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MODELCTL_QUIET", "false")
        settings = ModelctlSettings.from_cli(project_root=tmp_path, quiet=True, json_output=True)
        assert settings.quiet is True
        assert settings.json_output is True
