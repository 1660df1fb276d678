#!/usr/bin/env python3
"""Command line entry point for merging resource files during a build."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from resources_merge.exceptions import ResourcesMergeError
from resources_merge.logging_config import add_logging_args, configure_logging
from resources_merge.registry import list_strategies
from resources_merge.runner import (
    DEFAULT_BUILD_ROOT,
    load_config,
    resolve_build_root,
    run_merge,
    skip_requested,
)

logger = logging.getLogger("resources_merge")

COMMAND_RUN = "run"
COMMAND_LIST = "list-strategies"


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Merge resource files into combined targets.")
    sub = parser.add_subparsers(dest="command")

    run = sub.add_parser(COMMAND_RUN, help="Run the configured merge strategies.")
    run.add_argument("--config", required=True, help="YAML file with the merge strategies.")
    run.add_argument(
        "--build-root",
        default=DEFAULT_BUILD_ROOT,
        help=f"Build output directory relative paths resolve against (default: {DEFAULT_BUILD_ROOT}).",
    )
    run.add_argument(
        "--skip",
        action="store_true",
        help="Skip the execution (also RESOURCES_MERGE_SKIP=true).",
    )
    run.add_argument("--json", action="store_true", help="Print merge reports as JSON.")
    add_logging_args(run)

    sub.add_parser(COMMAND_LIST, help="List registered merge strategies.")
    return parser


def _run(args: argparse.Namespace) -> int:
    configure_logging(level=args.log_level, fmt=args.log_format)
    if skip_requested(args.skip):
        logger.info("Skipping the execution.")
        return 0
    try:
        build_root = resolve_build_root(args.build_root)
        strategies = load_config(Path(args.config), build_root=build_root)
        reports = run_merge(strategies, build_root=build_root)
    except ResourcesMergeError as exc:
        logger.error("%s", exc.message, extra=exc.as_log_fields())
        return 1
    if args.json:
        print(json.dumps([report.to_dict() for report in reports], indent=2, ensure_ascii=False))
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    if args.command == COMMAND_RUN:
        return _run(args)
    if args.command == COMMAND_LIST:
        for name in list_strategies():
            print(name)
        return 0
    parser.print_help()
    return 1


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
