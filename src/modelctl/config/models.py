"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, modelctl.toml only contains
overrides. A repository following the standard ``models/`` layout needs no
config file at all.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from modelctl.domain.naming import DEFAULT_ABBREVIATION_ALLOWLIST


class DiscoveryConfig(BaseModel):
    """[discovery] section."""

    model_config = {"frozen": True}

    model_dirs: list[str] = Field(default_factory=lambda: ["models", "src/models"])
    skip_dirs: list[str] = Field(
        default_factory=lambda: [
            "bin",
            "obj",
            "node_modules",
            ".git",
            ".venv",
            "__pycache__",
            "build",
            "dist",
        ]
    )
    extensions: list[str] = Field(default_factory=lambda: [".yaml", ".yml"])


class RegistryConfig(BaseModel):
    """[registry] section — where shared types and enums live."""

    model_config = {"frozen": True}

    shared_folder: str = "Shared"
    type_folder: str = "AttributeTypes"
    enum_folder: str = "Enums"


class ValidationConfig(BaseModel):
    """[validation] section."""

    model_config = {"frozen": True}

    staleness_days: int = Field(default=90, ge=0)
    abbreviation_allowlist: list[str] = Field(
        default_factory=lambda: sorted(DEFAULT_ABBREVIATION_ALLOWLIST)
    )
    extra_abbreviations: list[str] = Field(default_factory=list)
    workers: int = Field(default=1, ge=1)

    @property
    def allowed_abbreviations(self) -> frozenset[str]:
        """The allow-list merged with project-specific additions."""
        return frozenset(
            token.upper() for token in [*self.abbreviation_allowlist, *self.extra_abbreviations]
        )


class McpConfig(BaseModel):
    """[mcp] section."""

    model_config = {"frozen": True}

    enabled: bool = True
    transport: str = "stdio"
