"""Report assembly for validation runs."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence

    from contract.models import Violation, ViolationType


@dataclass(frozen=True)
class ValidationReport:
    violations: tuple[Violation, ...]
    total_packages: int
    duration: float
    violations_by_type: dict[ViolationType, tuple[Violation, ...]] = field(
        default_factory=dict
    )

    @property
    def violation_count(self) -> int:
        return len(self.violations)

    def to_dict(self) -> dict[str, object]:
        return {
            "violations": [violation.to_dict() for violation in self.violations],
            "totalPackages": self.total_packages,
            "violationCount": self.violation_count,
            "duration": self.duration,
        }


def build_report(
    violations: Sequence[Violation],
    *,
    total_packages: int,
    duration: float,
) -> ValidationReport:
    """Group violations by type and attach run metadata.

    Types without violations do not appear in ``violations_by_type``.
    """
    grouped: dict[ViolationType, list[Violation]] = {}
    for violation in violations:
        grouped.setdefault(violation.type, []).append(violation)

    return ValidationReport(
        violations=tuple(violations),
        total_packages=total_packages,
        duration=duration,
        violations_by_type={kind: tuple(items) for kind, items in grouped.items()},
    )


__all__ = ["ValidationReport", "build_report"]
