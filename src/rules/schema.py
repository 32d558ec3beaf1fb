"""Shape validation for raw, JSON-decoded stratify configuration.

Structural problems at the top level (root, ``layers``, ``enforcement``,
``workspaces``) fail immediately. Layer definitions are checked one by one and
every failing layer is reported together, so a user sees all of them in a
single pass.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from contract.errors import ConfigValidationError
from contract.result import Err, Ok
from rules.config import (
    VALID_ENFORCEMENT_MODES,
    LayerConfig,
    LayerDefinition,
    PartialEnforcementConfig,
    PartialWorkspaceConfig,
)

if TYPE_CHECKING:
    from contract.result import Result

_WORKSPACE_LIST_FIELDS = ("patterns", "protocols", "ignore")


def _is_string_list(value: Any) -> bool:
    return isinstance(value, list) and all(isinstance(item, str) for item in value)


def _invalid(message: str) -> Err[ConfigValidationError]:
    return Err(ConfigValidationError(message=message))


def validate_config_schema(raw: Any) -> Result[LayerConfig, ConfigValidationError]:
    """Validate that a decoded JSON value has the shape of a layer config."""
    if not isinstance(raw, dict):
        return _invalid("Config must be a JSON object")

    layers_raw = raw.get("layers")
    if not isinstance(layers_raw, dict):
        return _invalid('Config must have a "layers" object')

    layers: dict[str, LayerDefinition] = {}
    errors: list[str] = []
    for layer_name, layer_raw in layers_raw.items():
        result = validate_layer_definition(layer_name, layer_raw)
        if isinstance(result, Err):
            errors.append(result.error.message)
        else:
            layers[layer_name] = result.value

    if errors:
        return Err(
            ConfigValidationError(
                message="Invalid layer definitions",
                details=tuple(errors),
            )
        )

    enforcement: PartialEnforcementConfig | None = None
    if "enforcement" in raw:
        enforcement_raw = raw["enforcement"]
        if not isinstance(enforcement_raw, dict):
            return _invalid('"enforcement" field must be an object if defined')

        mode = enforcement_raw.get("mode")
        if "mode" in enforcement_raw and mode not in VALID_ENFORCEMENT_MODES:
            return _invalid(
                f'Invalid enforcement mode: "{mode}". '
                'Must be "error", "warn", or "off"'
            )
        enforcement = PartialEnforcementConfig(mode=mode)

    workspaces: PartialWorkspaceConfig | None = None
    if "workspaces" in raw:
        workspaces_raw = raw["workspaces"]
        if not isinstance(workspaces_raw, dict):
            return _invalid('"workspaces" must be an object')

        provided: dict[str, list[str]] = {}
        for field_name in _WORKSPACE_LIST_FIELDS:
            if field_name not in workspaces_raw:
                continue
            value = workspaces_raw[field_name]
            if not _is_string_list(value):
                return _invalid(
                    f'"workspaces.{field_name}" must be an array of strings'
                )
            provided[field_name] = list(value)
        workspaces = PartialWorkspaceConfig(**provided)

    return Ok(
        LayerConfig(layers=layers, enforcement=enforcement, workspaces=workspaces)
    )


def validate_layer_definition(
    name: str, raw: Any
) -> Result[LayerDefinition, ConfigValidationError]:
    """Validate a single layer definition, reporting its first problem."""
    if not isinstance(raw, dict):
        return _invalid(f'Layer "{name}" must be an object')

    allowed_dependencies = raw.get("allowedDependencies")
    if not isinstance(allowed_dependencies, list):
        return _invalid(f'Layer "{name}" must have an "allowedDependencies" array')
    if not _is_string_list(allowed_dependencies):
        return _invalid(
            f'Layer "{name}" "allowedDependencies" must be an array of strings'
        )

    has_packages = "allowedPackages" in raw
    has_packages_file = "allowedPackagesFile" in raw
    if has_packages and has_packages_file:
        return _invalid(
            f'Layer "{name}" cannot define both "allowedPackages" and '
            '"allowedPackagesFile"'
        )

    allowed_packages = raw.get("allowedPackages")
    if has_packages and (
        not _is_string_list(allowed_packages) or not allowed_packages
    ):
        return _invalid(
            f'Layer "{name}" "allowedPackages" must be a non-empty array of strings'
        )

    allowed_packages_file = raw.get("allowedPackagesFile")
    if has_packages_file and (
        not isinstance(allowed_packages_file, str)
        or not allowed_packages_file.strip()
    ):
        return _invalid(
            f'Layer "{name}" "allowedPackagesFile" must be a non-empty string'
        )

    description = raw.get("description")
    return Ok(
        LayerDefinition(
            description=description if isinstance(description, str) else None,
            allowed_dependencies=list(allowed_dependencies),
            allowed_packages=list(allowed_packages) if has_packages else None,
            allowed_packages_file=allowed_packages_file if has_packages_file else None,
        )
    )


__all__ = ["validate_config_schema", "validate_layer_definition"]
