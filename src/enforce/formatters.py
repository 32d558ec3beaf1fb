"""Console and JSON renderings of a validation report."""

from __future__ import annotations

from typing import TYPE_CHECKING

import orjson

from contract.models import ViolationType

if TYPE_CHECKING:
    from contract.models import EnforcementMode
    from enforce.report import ValidationReport

TYPE_LABELS: dict[ViolationType, str] = {
    ViolationType.MISSING_LAYER: "Missing Layer",
    ViolationType.UNKNOWN_LAYER: "Unknown Layer",
    ViolationType.UNAUTHORIZED_LAYER_MEMBER: "Unauthorized Layer Member",
    ViolationType.INVALID_DEPENDENCY: "Invalid Dependency",
}


def format_duration(ms: float) -> str:
    if ms < 1000:
        return f"{ms:.0f}ms"
    return f"{ms / 1000:.2f}s"


def format_console(report: ValidationReport, mode: EnforcementMode) -> str:
    """Render a plain-text report grouped by violation type."""
    duration = format_duration(report.duration)

    if not report.violations:
        return "\n".join(
            [
                "All packages comply with layer rules!",
                "",
                f"Completed in {duration}",
            ]
        )

    lines = [f"Found {report.violation_count} layer violations:", ""]
    for kind, violations in report.violations_by_type.items():
        lines.append(f"  {TYPE_LABELS[kind]} ({len(violations)}):")
        lines.extend(f"    - {violation.message}" for violation in violations)
        lines.append("")

    lines.append(f"Completed in {duration}")

    if mode == "warn":
        lines.extend(["", "Enforcement mode: warn - not failing build"])

    return "\n".join(lines)


def format_json(report: ValidationReport) -> str:
    """Serialize the report as indented JSON."""
    return orjson.dumps(report.to_dict(), option=orjson.OPT_INDENT_2).decode("utf-8")


__all__ = ["TYPE_LABELS", "format_console", "format_duration", "format_json"]
