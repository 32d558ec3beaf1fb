"""Stable data contract for stratify.

This module exposes the value types exchanged between discovery, the rule
engine, report builders and callers of the library API.
"""

from contract.errors import (
    ConfigError,
    ConfigNotFound,
    ConfigParseError,
    ConfigReadError,
    ConfigValidationError,
    DiscoveryError,
    GlobFailed,
    LayerError,
    PackageParseError,
    StratifyError,
    format_layer_error,
)
from contract.result import Err, Ok, Result, is_err, is_ok


def __getattr__(name: str) -> object:
    if name in {
        "EnforcementMode",
        "Package",
        "Violation",
        "ViolationDetails",
        "ViolationType",
    }:
        from contract.models import (
            EnforcementMode,
            Package,
            Violation,
            ViolationDetails,
            ViolationType,
        )

        return {
            "EnforcementMode": EnforcementMode,
            "Package": Package,
            "Violation": Violation,
            "ViolationDetails": ViolationDetails,
            "ViolationType": ViolationType,
        }[name]

    msg = f"module 'contract' has no attribute {name!r}"
    raise AttributeError(msg)


__all__ = [
    "ConfigError",
    "ConfigNotFound",
    "ConfigParseError",
    "ConfigReadError",
    "ConfigValidationError",
    "DiscoveryError",
    "EnforcementMode",
    "Err",
    "GlobFailed",
    "LayerError",
    "Ok",
    "Package",
    "PackageParseError",
    "Result",
    "StratifyError",
    "Violation",
    "ViolationDetails",
    "ViolationType",
    "format_layer_error",
    "is_err",
    "is_ok",
]
