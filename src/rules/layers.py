"""Layer membership and dependency predicates."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rules.config import WILDCARD

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence, Set

    from contract.models import Package
    from rules.config import LayerDefinition


def has_required_layer(package: Package) -> bool:
    """Return True when the package declares a non-empty layer."""
    return package.layer is not None and package.layer != ""


def is_known_layer(layer_name: str, layers: Mapping[str, LayerDefinition]) -> bool:
    return layer_name in layers


def is_dependency_allowed(
    from_layer: str,
    to_layer: str,
    allowed_dependencies: Sequence[str],
) -> bool:
    """Check if ``from_layer`` may depend on ``to_layer``.

    The ``*`` token allows any target. Other entries are compared by exact,
    case-sensitive equality; no glob matching is applied.
    """
    return WILDCARD in allowed_dependencies or to_layer in allowed_dependencies


def is_package_allowed_in_layer(
    package_name: str, allowed_packages: Set[str] | None
) -> bool:
    """Check a package against a layer's membership allowlist.

    ``None`` means the layer is unrestricted. An empty set admits nobody.
    """
    if allowed_packages is None:
        return True
    return package_name in allowed_packages


__all__ = [
    "has_required_layer",
    "is_dependency_allowed",
    "is_known_layer",
    "is_package_allowed_in_layer",
]
