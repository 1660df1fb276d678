"""Merge strategies.

A strategy is anything with a ``merge(context) -> MergeReport`` method.
``RegexMergeStrategy`` is the built-in one: scan the origin directory,
resolve each filename to a target, group by target, then append each
group into its target file and delete the consumed originals.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Iterator, Mapping
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from resources_merge.config import MergeConfiguration
from resources_merge.deleter import Deleter
from resources_merge.grouping import MergeGroup, aggregate
from resources_merge.resolver import TargetResolver
from resources_merge.scanner import SourceFile, scan_files
from resources_merge.writer import MergeWriter

logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True)
class MergeContext:
    build_root: Path
    name: str = "default"


@dataclasses.dataclass
class MergeReport:
    strategy: str
    targets: dict[Path, int] = dataclasses.field(default_factory=dict)
    deleted: int = 0

    @property
    def total_merged(self) -> int:
        return sum(self.targets.values())

    def to_dict(self) -> dict[str, Any]:
        return {
            "strategy": self.strategy,
            "targets": {str(path): count for path, count in self.targets.items()},
            "total_merged": self.total_merged,
            "deleted": self.deleted,
        }


@runtime_checkable
class MergeStrategy(Protocol):
    def merge(self, context: MergeContext) -> MergeReport: ...


class RegexMergeStrategy:
    """Merge files whose names match ``config.pattern``."""

    def __init__(self, config: MergeConfiguration, *, deleter: Deleter | None = None) -> None:
        self.config = config
        self.resolver = TargetResolver(config.compiled_pattern, config.target_filename)
        self.deleter = deleter or Deleter(
            enabled=config.delete_after_merge,
            retry=config.retry_delete,
            delays=config.delete_delays,
        )

    @classmethod
    def from_options(cls, options: Mapping[str, Any], *, build_root: Path) -> RegexMergeStrategy:
        return cls(MergeConfiguration.from_mapping(options, build_root=build_root))

    def _resolved(self, files: list[SourceFile]) -> Iterator[tuple[SourceFile, str]]:
        for file in files:
            target = self.resolver.resolve(file)
            if target is not None:
                yield file, target

    def groups(self) -> dict[str, MergeGroup]:
        files = scan_files(self.config.origin_dir, self.config.exclude_files)
        return aggregate(self._resolved(files))

    def merge(self, context: MergeContext) -> MergeReport:
        report = MergeReport(strategy=context.name)
        groups = self.groups()
        if not groups:
            logger.info("No resources matched '%s' under '%s'", self.config.pattern, self.config.origin_dir)
            return report
        deleted_before = self.deleter.deleted
        writer = MergeWriter(self.config, self.deleter)
        for target_filename, group in groups.items():
            target, merged = writer.write(target_filename, group)
            report.targets[target] = merged
        report.deleted = self.deleter.deleted - deleted_before
        return report
