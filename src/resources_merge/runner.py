"""Run configured merge strategies one after another."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

from resources_merge.config_validator import read_yaml
from resources_merge.exceptions import ConfigurationError
from resources_merge.logging_config import LogContext
from resources_merge.registry import build_strategy, get_strategy, load_implementation
from resources_merge.strategy import MergeContext, MergeReport, MergeStrategy

logger = logging.getLogger(__name__)

CONFIG_SCHEMA = "merge_config"
SKIP_ENV_VAR = "RESOURCES_MERGE_SKIP"
DEFAULT_BUILD_ROOT = "target"

NamedStrategy = tuple[str, MergeStrategy]


def skip_requested(flag: bool = False, environ: Mapping[str, str] | None = None) -> bool:
    if flag:
        return True
    value = (environ if environ is not None else os.environ).get(SKIP_ENV_VAR, "")
    return value.strip().lower() in {"1", "true", "yes", "on"}


def resolve_build_root(value: str | os.PathLike[str] | None) -> Path:
    """Resolve the build root to an absolute directory, creating it if needed."""
    root = Path(value or DEFAULT_BUILD_ROOT).expanduser().absolute()
    try:
        root.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise ConfigurationError(
            f"Cannot create directory: {root}",
            context={"build_root": str(root), "error": str(exc)},
        ) from exc
    return root


def load_strategies(data: Mapping[str, Any], *, build_root: Path) -> list[NamedStrategy]:
    """Build strategies from a configuration document.

    ``default_strategies`` entries configure the built-in regex strategy.
    ``custom_strategies`` entries name a registered strategy (``strategy``)
    or an importable factory (``implementation``), with ``options`` passed
    through to the factory.
    """
    strategies: list[NamedStrategy] = []
    for idx, entry in enumerate(data.get("default_strategies") or []):
        name = str(entry.get("name") or f"default[{idx}]")
        strategies.append((name, get_strategy("regex", entry, build_root=build_root)))
    for idx, entry in enumerate(data.get("custom_strategies") or []):
        options = entry.get("options") or {}
        if entry.get("implementation"):
            name = str(entry.get("name") or entry["implementation"])
            factory = load_implementation(str(entry["implementation"]))
            strategies.append((name, build_strategy(factory, options, build_root=build_root)))
        elif entry.get("strategy"):
            name = str(entry.get("name") or f"{entry['strategy']}[{idx}]")
            strategies.append((name, get_strategy(str(entry["strategy"]), options, build_root=build_root)))
        else:
            raise ConfigurationError(
                f"custom_strategies[{idx}] requires 'strategy' or 'implementation'",
                context={"index": idx},
            )
    return strategies


def load_config(path: Path, *, build_root: Path) -> list[NamedStrategy]:
    if not path.is_file():
        raise ConfigurationError(f"Config file not found: {path}", context={"path": str(path)})
    data = read_yaml(path, schema_name=CONFIG_SCHEMA)
    return load_strategies(data, build_root=build_root)


def run_merge(
    strategies: Sequence[NamedStrategy],
    *,
    build_root: Path,
    skip: bool = False,
) -> list[MergeReport]:
    """Run ``strategies`` in order; the first error stops the run."""
    if skip:
        logger.info("Skipping the execution.")
        return []
    if not strategies:
        raise ConfigurationError("Require at least one default or custom strategy")

    reports: list[MergeReport] = []
    for name, strategy in strategies:
        with LogContext(strategy=name):
            logger.debug("Running merge strategy '%s'", name)
            report = strategy.merge(MergeContext(build_root=build_root, name=name))
            logger.info(
                "Strategy '%s' merged %d resources into %d targets",
                name,
                report.total_merged,
                len(report.targets),
            )
        reports.append(report)
    return reports
