"""Workspace package discovery for stratify."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from fnmatch import fnmatch
from typing import TYPE_CHECKING, Any, cast

import orjson
from gitignore_parser import parse_gitignore  # type: ignore[import-untyped]

from contract.errors import GlobFailed, PackageParseError
from contract.models import Package
from contract.result import Err, Ok
from rules.config import DEFAULT_PROTOCOLS

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence
    from pathlib import Path

    from contract.result import Result
    from rules.config import WorkspaceConfig

logger = logging.getLogger(__name__)

MANIFEST_FILENAME = "package.json"

_DEPENDENCY_FIELDS = ("dependencies", "devDependencies", "peerDependencies")


@dataclass(frozen=True)
class DiscoveryWarning:
    """A manifest that was found but could not be turned into a Package."""

    path: str
    message: str


@dataclass(frozen=True)
class DiscoveryResult:
    packages: tuple[Package, ...] = field(default_factory=tuple)
    warnings: tuple[DiscoveryWarning, ...] = field(default_factory=tuple)


def extract_workspace_dependencies(
    dependencies: Mapping[str, Any] | None = None,
    dev_dependencies: Mapping[str, Any] | None = None,
    peer_dependencies: Mapping[str, Any] | None = None,
    protocols: Sequence[str] = DEFAULT_PROTOCOLS,
) -> tuple[str, ...]:
    """Return names of dependencies whose version uses a workspace protocol.

    The three maps are merged in order; a name keeps the position of its
    first occurrence and the version of its last.
    """
    merged: dict[str, Any] = {}
    for section in (dependencies, dev_dependencies, peer_dependencies):
        if isinstance(section, Mapping):
            merged.update(section)

    prefixes = tuple(protocols)
    return tuple(
        name
        for name, version in merged.items()
        if isinstance(version, str) and version.startswith(prefixes)
    )


def parse_package_json(
    content: Any,
    relative_path: str,
    protocols: Sequence[str] = DEFAULT_PROTOCOLS,
) -> Result[Package, PackageParseError]:
    """Convert a decoded package.json into a Package."""
    if not isinstance(content, dict):
        return Err(
            PackageParseError(
                message=(
                    f'Invalid package.json at "{relative_path}": '
                    "must be a JSON object"
                ),
                path=relative_path,
            )
        )

    name = content.get("name")
    if not isinstance(name, str) or not name.strip():
        return Err(
            PackageParseError(
                message=(
                    f'Invalid package.json at "{relative_path}": '
                    'missing or invalid "name" field'
                ),
                path=relative_path,
            )
        )

    layer = content.get("layer")
    dependencies = extract_workspace_dependencies(
        *(content.get(section) for section in _DEPENDENCY_FIELDS),
        protocols=protocols,
    )
    return Ok(
        Package(
            name=name,
            path=relative_path,
            layer=layer if isinstance(layer, str) else None,
            dependencies=dependencies,
        )
    )


def _is_within_root(path: Path, root: Path) -> bool:
    """Return True when the resolved path stays within the resolved root."""
    try:
        root_resolved = root.resolve()
        path_resolved = path.resolve()
    except OSError:
        return False

    try:
        path_resolved.relative_to(root_resolved)
    except ValueError:
        return False

    return True


def _build_gitignore_matcher(root: Path) -> Callable[[str], bool] | None:
    gitignore_path = root.resolve() / ".gitignore"
    if gitignore_path.is_file():
        return cast("Callable[[str], bool]", parse_gitignore(gitignore_path))
    return None


def _has_hidden_segment(rel_parts: Sequence[str]) -> bool:
    return any(part.startswith(".") for part in rel_parts)


def _matches_ignore(rel_path_str: str, ignore_patterns: Sequence[str]) -> bool:
    """Match a root-relative path against ignore globs.

    A leading ``**/`` also matches zero directories, so ``**/dist/**``
    covers ``dist/`` at the workspace root.
    """
    for pattern in ignore_patterns:
        if fnmatch(rel_path_str, pattern):
            return True
        if pattern.startswith("**/") and fnmatch(rel_path_str, pattern[3:]):
            return True
    return False


def _is_gitignored(
    path: Path, root: Path, gitignore_matches: Callable[[str], bool]
) -> bool:
    """Return True when the file or a directory between it and root is ignored."""
    root_resolved = root.resolve()
    candidate = path.resolve()
    while candidate != root_resolved and candidate.is_relative_to(root_resolved):
        if gitignore_matches(str(candidate)):
            return True
        candidate = candidate.parent
    return False


def _should_include_manifest(
    path: Path,
    root: Path,
    ignore_patterns: Sequence[str],
    gitignore_matches: Callable[[str], bool] | None,
) -> bool:
    if not path.is_file() or not _is_within_root(path, root):
        return False

    rel_path = path.relative_to(root)
    if _has_hidden_segment(rel_path.parts):
        return False

    if _matches_ignore(rel_path.as_posix(), ignore_patterns):
        return False

    return gitignore_matches is None or not _is_gitignored(
        path, root, gitignore_matches
    )


def find_manifests(
    root: Path,
    workspaces: WorkspaceConfig,
    *,
    respect_gitignore: bool = False,
) -> Result[list[Path], GlobFailed]:
    """Glob ``<pattern>/package.json`` for every workspace pattern.

    Results keep pattern order, are sorted within each pattern, and each
    manifest appears once.
    """
    gitignore_matches = _build_gitignore_matcher(root) if respect_gitignore else None

    seen: set[Path] = set()
    manifests: list[Path] = []
    for pattern in workspaces.patterns:
        try:
            matches = sorted(
                root.glob(f"{pattern}/{MANIFEST_FILENAME}"),
                key=lambda p: p.relative_to(root).as_posix(),
            )
        except (ValueError, NotImplementedError, OSError) as exc:
            return Err(GlobFailed(message=str(exc), pattern=pattern, cause=exc))

        for path in matches:
            if path in seen:
                continue
            seen.add(path)
            if _should_include_manifest(
                path, root, workspaces.ignore, gitignore_matches
            ):
                manifests.append(path)

        logger.debug("Pattern %s matched %d manifests", pattern, len(matches))

    return Ok(manifests)


def discover_packages(
    root: Path,
    workspaces: WorkspaceConfig,
    *,
    respect_gitignore: bool = False,
) -> Result[DiscoveryResult, GlobFailed]:
    """Discover workspace packages under ``root``.

    A glob failure aborts discovery. Manifests that cannot be read or parsed
    are skipped and reported as warnings.
    """
    found = find_manifests(root, workspaces, respect_gitignore=respect_gitignore)
    if isinstance(found, Err):
        return found

    packages: list[Package] = []
    warnings: list[DiscoveryWarning] = []
    for path in found.value:
        relative_path = path.relative_to(root).as_posix()
        try:
            content = orjson.loads(path.read_bytes())
        except (OSError, orjson.JSONDecodeError) as exc:
            warnings.append(DiscoveryWarning(path=str(path), message=str(exc)))
            continue

        parsed = parse_package_json(content, relative_path, workspaces.protocols)
        if isinstance(parsed, Err):
            warnings.append(
                DiscoveryWarning(path=str(path), message=parsed.error.message)
            )
            continue
        packages.append(parsed.value)

    for warning in warnings:
        logger.debug("Skipping %s: %s", warning.path, warning.message)

    return Ok(DiscoveryResult(packages=tuple(packages), warnings=tuple(warnings)))


__all__ = [
    "MANIFEST_FILENAME",
    "DiscoveryResult",
    "DiscoveryWarning",
    "discover_packages",
    "extract_workspace_dependencies",
    "find_manifests",
    "parse_package_json",
]
