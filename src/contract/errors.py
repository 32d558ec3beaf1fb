"""Error values produced by config loading, validation and package discovery.

Every variant is a frozen dataclass with a fixed ``type`` tag. Pipeline stages
return them inside :class:`contract.result.Err`; only the outer API converts
them into :class:`StratifyError` exceptions.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar, Union


@dataclass(frozen=True)
class ConfigNotFound:
    message: str
    path: str

    type: ClassVar[str] = "config-not-found"


@dataclass(frozen=True)
class ConfigReadError:
    message: str
    path: str
    cause: BaseException | None = field(default=None, compare=False)

    type: ClassVar[str] = "config-read-error"


@dataclass(frozen=True)
class ConfigParseError:
    message: str
    path: str
    cause: BaseException | None = field(default=None, compare=False)

    type: ClassVar[str] = "config-parse-error"


@dataclass(frozen=True)
class ConfigValidationError:
    message: str
    details: tuple[str, ...] | None = None

    type: ClassVar[str] = "config-validation-error"


@dataclass(frozen=True)
class GlobFailed:
    message: str
    pattern: str
    cause: BaseException | None = field(default=None, compare=False)

    type: ClassVar[str] = "glob-failed"


@dataclass(frozen=True)
class PackageParseError:
    message: str
    path: str
    cause: BaseException | None = field(default=None, compare=False)

    type: ClassVar[str] = "package-parse-error"


ConfigError = Union[
    ConfigNotFound, ConfigReadError, ConfigParseError, ConfigValidationError
]
DiscoveryError = Union[GlobFailed, PackageParseError]
LayerError = Union[ConfigError, DiscoveryError]


def format_layer_error(error: LayerError) -> str:
    """Format any error value into a human-readable string."""
    if isinstance(error, ConfigNotFound):
        return f"Config file not found: {error.path}"
    if isinstance(error, ConfigReadError):
        return f"Failed to read config file ({error.path}): {error.message}"
    if isinstance(error, ConfigParseError):
        return f"Invalid JSON in config file ({error.path}): {error.message}"
    if isinstance(error, ConfigValidationError):
        if error.details:
            lines = "\n".join(f"  - {detail}" for detail in error.details)
            return f"Config validation failed:\n{lines}"
        return f"Config validation failed: {error.message}"
    if isinstance(error, GlobFailed):
        return f"Glob pattern failed ({error.pattern}): {error.message}"
    if isinstance(error, PackageParseError):
        return f"Failed to parse package at {error.path}: {error.message}"

    msg = f"Unhandled error variant: {error!r}"
    raise AssertionError(msg)


class StratifyError(Exception):
    """Raised by the throwing API entry points when a pipeline stage fails.

    Carries the ``type`` tag of the underlying error value, the validation
    ``details`` when present, and chains the original ``cause``.
    """

    def __init__(self, error: LayerError) -> None:
        super().__init__(format_layer_error(error))
        self.error = error
        self.type = error.type
        self.message = str(self)
        self.details: tuple[str, ...] | None = (
            error.details if isinstance(error, ConfigValidationError) else None
        )
        cause = getattr(error, "cause", None)
        if cause is not None:
            self.__cause__ = cause


__all__ = [
    "ConfigError",
    "ConfigNotFound",
    "ConfigParseError",
    "ConfigReadError",
    "ConfigValidationError",
    "DiscoveryError",
    "GlobFailed",
    "LayerError",
    "PackageParseError",
    "StratifyError",
    "format_layer_error",
]
