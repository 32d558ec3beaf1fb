"""Layer enforcement: validation engine, reports and the library API."""

from enforce.api import (
    EnforceOptions,
    EnforceOutcome,
    ValidateLayersResult,
    enforce_layers,
    format_results,
    validate_config,
    validate_layers,
)
from enforce.formatters import format_console, format_json
from enforce.report import ValidationReport, build_report
from enforce.validation import validate_packages

__all__ = [
    "EnforceOptions",
    "EnforceOutcome",
    "ValidateLayersResult",
    "ValidationReport",
    "build_report",
    "enforce_layers",
    "format_console",
    "format_json",
    "format_results",
    "validate_config",
    "validate_layers",
    "validate_packages",
]
