"""Membership allowlists: inline ``allowedPackages`` and allowlist files."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import orjson

from contract.errors import (
    ConfigNotFound,
    ConfigParseError,
    ConfigReadError,
    ConfigValidationError,
)
from contract.result import Err, Ok

if TYPE_CHECKING:
    from pathlib import Path

    from contract.errors import ConfigError
    from contract.result import Result
    from rules.config import StratifyConfig

logger = logging.getLogger(__name__)


def validate_allowlist_content(
    parsed: Any, file_path: str
) -> Result[frozenset[str], ConfigValidationError]:
    """Check that decoded allowlist content is a non-empty array of names."""
    if not isinstance(parsed, list):
        return Err(
            ConfigValidationError(
                message=f'Allowed-packages file "{file_path}" must contain a JSON array'
            )
        )

    if not parsed:
        return Err(
            ConfigValidationError(
                message=(
                    f'Allowed-packages file "{file_path}" must contain at least '
                    "one package name"
                )
            )
        )

    if not all(isinstance(item, str) for item in parsed):
        return Err(
            ConfigValidationError(
                message=f'Allowed-packages file "{file_path}" must contain only strings'
            )
        )

    if any(not item.strip() for item in parsed):
        return Err(
            ConfigValidationError(
                message=(
                    f'Allowed-packages file "{file_path}" must not contain empty '
                    "package names"
                )
            )
        )

    return Ok(frozenset(parsed))


def load_allowed_packages(
    root: Path, file_path: str
) -> Result[frozenset[str], ConfigError]:
    """Read and validate an allowlist file relative to the workspace root."""
    full_path = (root / file_path).resolve()

    try:
        content = full_path.read_bytes()
    except FileNotFoundError:
        return Err(
            ConfigNotFound(
                message=f"Allowed-packages file not found: {full_path}",
                path=str(full_path),
            )
        )
    except OSError as exc:
        return Err(ConfigReadError(message=str(exc), path=str(full_path), cause=exc))

    try:
        parsed = orjson.loads(content)
    except orjson.JSONDecodeError as exc:
        return Err(ConfigParseError(message=str(exc), path=str(full_path), cause=exc))

    return validate_allowlist_content(parsed, file_path)


def resolve_allowed_packages(
    config: StratifyConfig, root: Path
) -> Result[dict[str, frozenset[str]], ConfigError]:
    """Build the layer -> allowed package names index for restricted layers.

    Layers without ``allowedPackages`` or ``allowedPackagesFile`` are left
    out, which makes them unrestricted.
    """
    allowed: dict[str, frozenset[str]] = {}

    for layer_name, layer_def in config.layers.items():
        if layer_def.allowed_packages is not None:
            allowed[layer_name] = frozenset(layer_def.allowed_packages)
            continue

        if layer_def.allowed_packages_file is None:
            continue

        result = load_allowed_packages(root, layer_def.allowed_packages_file)
        if isinstance(result, Err):
            return result
        logger.debug(
            "Loaded %d allowed packages for layer %s from %s",
            len(result.value),
            layer_name,
            layer_def.allowed_packages_file,
        )
        allowed[layer_name] = result.value

    return Ok(allowed)


__all__ = [
    "load_allowed_packages",
    "resolve_allowed_packages",
    "validate_allowlist_content",
]
