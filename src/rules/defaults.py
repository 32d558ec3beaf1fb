"""Default resolution for validated configuration."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rules.config import EnforcementConfig, StratifyConfig, WorkspaceConfig

if TYPE_CHECKING:
    from pydantic import BaseModel

    from rules.config import LayerConfig


def _provided_fields(partial: BaseModel | None) -> dict[str, object]:
    if partial is None:
        return {}
    return partial.model_dump(exclude_none=True)


def apply_defaults(config: LayerConfig) -> StratifyConfig:
    """Overlay user-provided fields on the built-in defaults.

    Merging is per field: providing only ``workspaces.patterns`` keeps the
    default protocols and ignore patterns.
    """
    return StratifyConfig(
        layers=dict(config.layers),
        workspaces=WorkspaceConfig(**_provided_fields(config.workspaces)),
        enforcement=EnforcementConfig(**_provided_fields(config.enforcement)),
    )


__all__ = ["apply_defaults"]
