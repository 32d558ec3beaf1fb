"""Command-line interface for stratify."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from contract.errors import format_layer_error
from contract.result import Err
from enforce.api import EnforceOptions, enforce_layers, format_results
from rules.config import CONFIG_FILENAME, VALID_ENFORCEMENT_MODES, load_config
from utils import configure_logging

logger = logging.getLogger(__name__)


def _add_common_paths(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "root",
        nargs="?",
        default=".",
        help="Workspace root (default: .)",
    )
    parser.add_argument(
        "-c",
        "--config",
        default=CONFIG_FILENAME,
        help=f"Path to the layer config, relative to root (default: {CONFIG_FILENAME})",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Log progress to stderr (-vv for debug output)",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="stratify",
        description="Enforce package layering rules in monorepos",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    validate_parser = subparsers.add_parser(
        "validate", help="Validate packages against layer rules"
    )
    _add_common_paths(validate_parser)
    validate_parser.add_argument(
        "-m",
        "--mode",
        choices=VALID_ENFORCEMENT_MODES,
        default=None,
        help="Override the configured enforcement mode",
    )
    validate_parser.add_argument(
        "--format",
        choices=("console", "json"),
        default="console",
        help="Report format (default: console)",
    )
    validate_parser.add_argument(
        "--respect-gitignore",
        action="store_true",
        help="Skip packages ignored by the root .gitignore",
    )

    check_parser = subparsers.add_parser(
        "check-config", help="Validate the layer config file only"
    )
    _add_common_paths(check_parser)

    return parser


def _log_level(verbosity: int) -> int | None:
    if verbosity >= 2:
        return logging.DEBUG
    if verbosity == 1:
        return logging.INFO
    return None


def _handle_validate(args: argparse.Namespace, root: Path) -> int:
    options = EnforceOptions(
        workspace_root=root,
        config_path=args.config,
        mode=args.mode,
        respect_gitignore=args.respect_gitignore,
    )
    result = enforce_layers(options)
    if isinstance(result, Err):
        sys.stderr.write(f"error: {format_layer_error(result.error)}\n")
        return 1

    outcome = result.value
    for warning in outcome.warnings:
        sys.stderr.write(f"warning: {warning.path}: {warning.message}\n")

    mode = outcome.config.enforcement.mode
    sys.stdout.write(format_results(outcome, args.format, mode) + "\n")

    if mode == "error" and outcome.violations:
        return 1
    return 0


def _handle_check_config(args: argparse.Namespace, root: Path) -> int:
    result = load_config(root, args.config)
    if isinstance(result, Err):
        sys.stderr.write(f"error: {format_layer_error(result.error)}\n")
        return 1

    config = result.value
    sys.stdout.write(
        f"Config OK: {len(config.layers)} layers "
        f"(mode: {config.enforcement.mode})\n"
    )
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(_log_level(args.verbose))
    root = Path(args.root).expanduser().resolve()
    logger.info("Root: %s", root)
    logger.info("Config: %s", root / args.config)

    if args.command == "validate":
        return _handle_validate(args, root)

    if args.command == "check-config":
        return _handle_check_config(args, root)

    raise AssertionError


if __name__ == "__main__":
    raise SystemExit(main())
