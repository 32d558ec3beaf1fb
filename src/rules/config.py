from __future__ import annotations

from typing import TYPE_CHECKING

import orjson
from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from contract.errors import (
    ConfigNotFound,
    ConfigParseError,
    ConfigReadError,
)
from contract.models import EnforcementMode
from contract.result import Err, Ok

if TYPE_CHECKING:
    from pathlib import Path

    from contract.errors import ConfigError
    from contract.result import Result

CONFIG_FILENAME = "stratify.config.json"

WILDCARD = "*"

VALID_ENFORCEMENT_MODES: tuple[EnforcementMode, ...] = ("error", "warn", "off")

DEFAULT_ENFORCEMENT_MODE: EnforcementMode = "warn"
DEFAULT_PATTERNS: tuple[str, ...] = ("packages/**/*",)
DEFAULT_PROTOCOLS: tuple[str, ...] = ("workspace:",)
DEFAULT_IGNORE: tuple[str, ...] = ("**/node_modules/**", "**/lib/**", "**/dist/**")

_CAMEL = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class LayerDefinition(BaseModel):
    """Rules for a single architectural layer."""

    model_config = _CAMEL

    description: str | None = Field(
        default=None, description="Human-readable description of the layer"
    )
    allowed_dependencies: list[str] = Field(
        default_factory=list,
        description="Layer names this layer may depend on ('*' allows any layer)",
    )
    allowed_packages: list[str] | None = Field(
        default=None,
        description="Package names permitted to declare this layer",
    )
    allowed_packages_file: str | None = Field(
        default=None,
        description="Workspace-relative JSON file listing permitted package names",
    )

    @model_validator(mode="after")
    def _check_membership_sources(self) -> LayerDefinition:
        if self.allowed_packages is not None and self.allowed_packages_file is not None:
            msg = "allowedPackages and allowedPackagesFile are mutually exclusive"
            raise ValueError(msg)
        return self


class PartialWorkspaceConfig(BaseModel):
    """Workspace settings as written by the user; unset fields are None."""

    model_config = _CAMEL

    patterns: list[str] | None = None
    protocols: list[str] | None = None
    ignore: list[str] | None = None


class PartialEnforcementConfig(BaseModel):
    """Enforcement settings as written by the user; unset fields are None."""

    model_config = _CAMEL

    mode: EnforcementMode | None = None


class LayerConfig(BaseModel):
    """A schema-validated configuration before defaults are applied."""

    model_config = _CAMEL

    layers: dict[str, LayerDefinition]
    workspaces: PartialWorkspaceConfig | None = None
    enforcement: PartialEnforcementConfig | None = None


class WorkspaceConfig(BaseModel):
    """Package discovery settings."""

    model_config = _CAMEL

    patterns: list[str] = Field(
        default_factory=lambda: list(DEFAULT_PATTERNS),
        description="Glob patterns for package directories",
    )
    protocols: list[str] = Field(
        default_factory=lambda: list(DEFAULT_PROTOCOLS),
        description="Version prefixes that mark internal dependencies",
    )
    ignore: list[str] = Field(
        default_factory=lambda: list(DEFAULT_IGNORE),
        description="Glob patterns excluded from discovery",
    )


class EnforcementConfig(BaseModel):
    """Run-wide enforcement settings."""

    model_config = _CAMEL

    mode: EnforcementMode = Field(
        default=DEFAULT_ENFORCEMENT_MODE,
        description="error fails the run, warn only reports, off skips validation",
    )


class StratifyConfig(BaseModel):
    """Fully resolved configuration consumed by the validation engine."""

    model_config = _CAMEL

    layers: dict[str, LayerDefinition]
    workspaces: WorkspaceConfig = Field(default_factory=WorkspaceConfig)
    enforcement: EnforcementConfig = Field(default_factory=EnforcementConfig)

    def with_mode(self, mode: EnforcementMode) -> StratifyConfig:
        """Return a copy with the enforcement mode replaced."""
        enforcement = self.enforcement.model_copy(update={"mode": mode})
        return self.model_copy(update={"enforcement": enforcement})


def load_config(
    root: Path, config_path: str | Path = CONFIG_FILENAME
) -> Result[StratifyConfig, ConfigError]:
    """Load a config file relative to ``root``, validate it and apply defaults."""
    from rules.defaults import apply_defaults
    from rules.schema import validate_config_schema

    full_path = (root / config_path).resolve()

    try:
        content = full_path.read_bytes()
    except FileNotFoundError:
        return Err(
            ConfigNotFound(
                message=f"Config file not found: {full_path}",
                path=str(full_path),
            )
        )
    except OSError as exc:
        return Err(ConfigReadError(message=str(exc), path=str(full_path), cause=exc))

    try:
        raw = orjson.loads(content)
    except orjson.JSONDecodeError as exc:
        return Err(ConfigParseError(message=str(exc), path=str(full_path), cause=exc))

    validated = validate_config_schema(raw)
    if isinstance(validated, Err):
        return validated

    return Ok(apply_defaults(validated.value))


__all__ = [
    "CONFIG_FILENAME",
    "DEFAULT_ENFORCEMENT_MODE",
    "DEFAULT_IGNORE",
    "DEFAULT_PATTERNS",
    "DEFAULT_PROTOCOLS",
    "VALID_ENFORCEMENT_MODES",
    "WILDCARD",
    "EnforcementConfig",
    "LayerConfig",
    "LayerDefinition",
    "PartialEnforcementConfig",
    "PartialWorkspaceConfig",
    "StratifyConfig",
    "WorkspaceConfig",
    "load_config",
]
