"""Layer configuration, schema validation and rule predicates for stratify."""

from rules.config import (
    CONFIG_FILENAME,
    EnforcementConfig,
    LayerConfig,
    LayerDefinition,
    StratifyConfig,
    WorkspaceConfig,
    load_config,
)
from rules.defaults import apply_defaults
from rules.layers import (
    has_required_layer,
    is_dependency_allowed,
    is_known_layer,
    is_package_allowed_in_layer,
)
from rules.schema import validate_config_schema, validate_layer_definition

__all__ = [
    "CONFIG_FILENAME",
    "EnforcementConfig",
    "LayerConfig",
    "LayerDefinition",
    "StratifyConfig",
    "WorkspaceConfig",
    "apply_defaults",
    "has_required_layer",
    "is_dependency_allowed",
    "is_known_layer",
    "is_package_allowed_in_layer",
    "load_config",
    "validate_config_schema",
    "validate_layer_definition",
]
