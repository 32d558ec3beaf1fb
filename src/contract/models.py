"""Package and violation models shared between discovery, rules and reports."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

EnforcementMode = Literal["error", "warn", "off"]


class ViolationType(str, Enum):
    """Kinds of layer rule violations."""

    MISSING_LAYER = "missing-layer"
    UNKNOWN_LAYER = "unknown-layer"
    UNAUTHORIZED_LAYER_MEMBER = "unauthorized-layer-member"
    INVALID_DEPENDENCY = "invalid-dependency"


@dataclass(frozen=True)
class Package:
    """A discovered workspace package.

    ``dependencies`` holds internal dependency names in declaration order;
    ``path`` is only used in diagnostics.
    """

    name: str
    path: str
    layer: str | None = None
    dependencies: tuple[str, ...] = field(default_factory=tuple)


class ViolationDetails(BaseModel):
    """Structured context attached to dependency and membership violations."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True
    )

    from_layer: str | None = None
    to_package: str | None = None
    to_layer: str | None = None
    allowed_layers: list[str] | None = None
    allowed_packages_source: str | None = None


class Violation(BaseModel):
    """A single layer rule violation for one package."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True
    )

    type: ViolationType
    package: str
    message: str = Field(description="Short single-line description")
    detailed_message: str = Field(
        description="Multi-line description with location and remediation"
    )
    details: ViolationDetails | None = None

    def to_dict(self) -> dict[str, object]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


__all__ = [
    "EnforcementMode",
    "Package",
    "Violation",
    "ViolationDetails",
    "ViolationType",
]
