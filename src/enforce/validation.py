"""Layer rule validation for discovered packages.

Rules are applied per package in a fixed order, and the first failing rule
ends the checks for that package:

1. the package declares a layer (``missing-layer``)
2. the layer is defined in the config (``unknown-layer``)
3. the package is on the layer's allowlist, if any
   (``unauthorized-layer-member``)
4. every internal dependency targets an allowed layer
   (``invalid-dependency``, one violation per offending dependency)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from contract.models import Violation, ViolationDetails, ViolationType
from rules.layers import (
    has_required_layer,
    is_dependency_allowed,
    is_known_layer,
    is_package_allowed_in_layer,
)

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence, Set

    from contract.models import Package
    from rules.config import StratifyConfig

INLINE_ALLOWLIST_SOURCE = "allowedPackages in config"


def validate_packages(
    packages: Sequence[Package],
    config: StratifyConfig,
    allowed_packages_by_layer: Mapping[str, Set[str]] | None = None,
) -> list[Violation]:
    """Validate all packages against the layer configuration.

    Violations are returned in package order; dependency violations of one
    package follow its dependency order.
    """
    allowed_by_layer = allowed_packages_by_layer or {}
    package_index = {package.name: package for package in packages}

    violations: list[Violation] = []
    for package in packages:
        violations.extend(
            _check_package(package, config, allowed_by_layer, package_index)
        )
    return violations


def _check_package(
    package: Package,
    config: StratifyConfig,
    allowed_by_layer: Mapping[str, Set[str]],
    package_index: Mapping[str, Package],
) -> tuple[Violation, ...]:
    if not has_required_layer(package):
        return (_missing_layer(package, config),)

    layer = package.layer or ""

    if not is_known_layer(layer, config.layers):
        return (_unknown_layer(package, layer, config),)

    if not is_package_allowed_in_layer(package.name, allowed_by_layer.get(layer)):
        return (_unauthorized_member(package, layer, config),)

    allowed_dependencies = config.layers[layer].allowed_dependencies
    found: list[Violation] = []
    for dependency_name in package.dependencies:
        dependency = package_index.get(dependency_name)
        # Not discovered or not layered: reported (if at all) on its own entry.
        if dependency is None or not dependency.layer:
            continue
        if not is_dependency_allowed(layer, dependency.layer, allowed_dependencies):
            found.append(
                _invalid_dependency(package, layer, dependency, allowed_dependencies)
            )
    return tuple(found)


def _layer_names(config: StratifyConfig) -> str:
    return ", ".join(config.layers)


def _missing_layer(package: Package, config: StratifyConfig) -> Violation:
    return Violation(
        type=ViolationType.MISSING_LAYER,
        package=package.name,
        message=(
            f'Package "{package.name}" is missing the required "layer" field '
            "in package.json"
        ),
        detailed_message="\n".join(
            [
                f'Missing Layer: package "{package.name}" does not declare a layer.',
                f"  Location: {package.path}",
                f"  Valid layers: {_layer_names(config)}",
                '  Fix: add a "layer" field to package.json naming one of the '
                "valid layers.",
            ]
        ),
    )


def _unknown_layer(package: Package, layer: str, config: StratifyConfig) -> Violation:
    valid_layers = _layer_names(config)
    return Violation(
        type=ViolationType.UNKNOWN_LAYER,
        package=package.name,
        message=(
            f'Package "{package.name}" has unknown layer "{layer}". '
            f"Valid layers: {valid_layers}"
        ),
        detailed_message="\n".join(
            [
                f'Unknown Layer: package "{package.name}" declares layer "{layer}", '
                "which is not defined in the layer config.",
                f"  Location: {package.path}",
                f"  Valid layers: {valid_layers}",
                f'  Fix: change "layer" in package.json to a valid layer, or add '
                f'"{layer}" to the "layers" section of the config.',
            ]
        ),
    )


def _unauthorized_member(
    package: Package, layer: str, config: StratifyConfig
) -> Violation:
    allowlist_file = config.layers[layer].allowed_packages_file
    source = allowlist_file if allowlist_file is not None else INLINE_ALLOWLIST_SOURCE
    return Violation(
        type=ViolationType.UNAUTHORIZED_LAYER_MEMBER,
        package=package.name,
        message=f'Package "{package.name}" is not allowed in layer "{layer}"',
        detailed_message="\n".join(
            [
                f'Unauthorized Layer Member: package "{package.name}" declares '
                f'layer "{layer}" but is not on its allowed package list.',
                f"  Location: {package.path}",
                f"  Allowed packages source: {source}",
                f'  Fix: add "{package.name}" to {source}, or move the package '
                "to another layer.",
            ]
        ),
        details=ViolationDetails(from_layer=layer, allowed_packages_source=source),
    )


def _invalid_dependency(
    package: Package,
    layer: str,
    dependency: Package,
    allowed_dependencies: list[str],
) -> Violation:
    to_layer = dependency.layer or ""
    allowed = ", ".join(allowed_dependencies) or "(no layers)"
    return Violation(
        type=ViolationType.INVALID_DEPENDENCY,
        package=package.name,
        message=(
            f'Layer violation: "{package.name}" ({layer}) cannot depend on '
            f'"{dependency.name}" ({to_layer})'
        ),
        detailed_message="\n".join(
            [
                f'Invalid Dependency: "{package.name}" ({layer}) depends on '
                f'"{dependency.name}" ({to_layer}).',
                f"  Location: {package.path}",
                f'  Layer "{layer}" may only depend on: {allowed}',
                f'  Fix: remove the dependency on "{dependency.name}", or add '
                f'"{to_layer}" to allowedDependencies of layer "{layer}".',
            ]
        ),
        details=ViolationDetails(
            from_layer=layer,
            to_package=dependency.name,
            to_layer=to_layer,
            allowed_layers=list(allowed_dependencies),
        ),
    )


__all__ = ["INLINE_ALLOWLIST_SOURCE", "validate_packages"]
