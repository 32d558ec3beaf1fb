"""Library entry points: load config, discover packages, validate, report."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any, Literal

from contract.errors import StratifyError
from contract.result import Err, Ok
from enforce.formatters import format_console, format_json
from enforce.report import build_report
from enforce.validation import validate_packages
from rules.allowlist import resolve_allowed_packages
from rules.config import CONFIG_FILENAME, LayerConfig, StratifyConfig, load_config
from rules.defaults import apply_defaults
from rules.schema import validate_config_schema
from scan.packages import discover_packages

if TYPE_CHECKING:
    from contract.errors import ConfigValidationError, LayerError
    from contract.models import EnforcementMode, Package, Violation
    from contract.result import Result
    from scan.packages import DiscoveryWarning

logger = logging.getLogger(__name__)

OutputFormat = Literal["console", "json"]


@dataclass(frozen=True)
class EnforceOptions:
    """Options for a validation run.

    ``config`` skips file loading: a ``LayerConfig`` gets defaults applied, a
    ``StratifyConfig`` is used as is. ``mode`` overrides the configured
    enforcement mode.
    """

    workspace_root: Path | str = "."
    config_path: str = CONFIG_FILENAME
    config: LayerConfig | StratifyConfig | None = None
    mode: EnforcementMode | None = None
    respect_gitignore: bool = False


@dataclass(frozen=True)
class EnforceOutcome:
    config: StratifyConfig
    packages: tuple[Package, ...] = field(default_factory=tuple)
    violations: tuple[Violation, ...] = field(default_factory=tuple)
    warnings: tuple[DiscoveryWarning, ...] = field(default_factory=tuple)
    duration: float = 0.0

    @property
    def total_packages(self) -> int:
        return len(self.packages)


@dataclass(frozen=True)
class ValidateLayersResult:
    violations: tuple[Violation, ...]
    total_packages: int
    duration: float


def _elapsed_ms(start: float) -> float:
    return (time.perf_counter() - start) * 1000


def _resolve_config(
    options: EnforceOptions, workspace_root: Path
) -> Result[StratifyConfig, LayerError]:
    if isinstance(options.config, StratifyConfig):
        return Ok(options.config)
    if isinstance(options.config, LayerConfig):
        return Ok(apply_defaults(options.config))
    return load_config(workspace_root, options.config_path)


def enforce_layers(
    options: EnforceOptions | None = None,
) -> Result[EnforceOutcome, LayerError]:
    """Run the full pipeline and return its outcome or the first error."""
    options = options or EnforceOptions()
    start = time.perf_counter()
    workspace_root = Path(options.workspace_root).expanduser().resolve()

    resolved = _resolve_config(options, workspace_root)
    if isinstance(resolved, Err):
        return resolved
    config = resolved.value
    if options.mode is not None:
        config = config.with_mode(options.mode)

    logger.info(
        "Loaded config with %d layers (mode: %s)",
        len(config.layers),
        config.enforcement.mode,
    )

    if config.enforcement.mode == "off":
        logger.info("Enforcement is off; skipping discovery and validation")
        return Ok(EnforceOutcome(config=config, duration=_elapsed_ms(start)))

    discovered = discover_packages(
        workspace_root,
        config.workspaces,
        respect_gitignore=options.respect_gitignore,
    )
    if isinstance(discovered, Err):
        return discovered
    packages = discovered.value.packages
    logger.info("Discovered %d packages", len(packages))

    allowed = resolve_allowed_packages(config, workspace_root)
    if isinstance(allowed, Err):
        return allowed

    violations = validate_packages(packages, config, allowed.value)

    return Ok(
        EnforceOutcome(
            config=config,
            packages=packages,
            violations=tuple(violations),
            warnings=discovered.value.warnings,
            duration=_elapsed_ms(start),
        )
    )


def validate_layers(options: EnforceOptions | None = None) -> ValidateLayersResult:
    """Run the full pipeline, raising StratifyError on any failure."""
    result = enforce_layers(options)
    if isinstance(result, Err):
        raise StratifyError(result.error)

    outcome = result.value
    return ValidateLayersResult(
        violations=outcome.violations,
        total_packages=outcome.total_packages,
        duration=outcome.duration,
    )


def validate_config(raw: Any) -> Result[StratifyConfig, ConfigValidationError]:
    """Validate a decoded config value and apply defaults."""
    validated = validate_config_schema(raw)
    if isinstance(validated, Err):
        return validated
    return Ok(apply_defaults(validated.value))


def format_results(
    outcome: EnforceOutcome,
    output_format: OutputFormat = "console",
    mode: EnforcementMode | None = None,
) -> str:
    """Render an outcome as console text or JSON."""
    report = build_report(
        outcome.violations,
        total_packages=outcome.total_packages,
        duration=outcome.duration,
    )
    if output_format == "json":
        return format_json(report)
    return format_console(report, mode or outcome.config.enforcement.mode)


__all__ = [
    "EnforceOptions",
    "EnforceOutcome",
    "OutputFormat",
    "ValidateLayersResult",
    "enforce_layers",
    "format_results",
    "validate_config",
    "validate_layers",
]
