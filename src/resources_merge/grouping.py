from __future__ import annotations

import dataclasses
from collections.abc import Iterable
from pathlib import Path

from resources_merge.scanner import SourceFile


def common_prefix(a: tuple[str, ...], b: tuple[str, ...]) -> tuple[str, ...]:
    """Longest shared leading run of path components."""
    idx = 0
    limit = min(len(a), len(b))
    while idx < limit and a[idx] == b[idx]:
        idx += 1
    return a[:idx]


@dataclasses.dataclass(frozen=True)
class MergeGroup:
    """Files merged into one target filename plus their common root."""

    common_root: tuple[str, ...]
    files: tuple[SourceFile, ...]

    @classmethod
    def of(cls, file: SourceFile) -> MergeGroup:
        return cls(common_root=file.parts[:-1], files=(file,))

    @staticmethod
    def combine(a: MergeGroup, b: MergeGroup) -> MergeGroup:
        # Member order follows the fold; the writer sorts before appending.
        return MergeGroup(
            common_root=common_prefix(a.common_root, b.common_root),
            files=a.files + b.files,
        )

    @property
    def common_root_path(self) -> Path | None:
        if not self.common_root:
            return None
        return Path(*self.common_root)


def aggregate(pairs: Iterable[tuple[SourceFile, str]]) -> dict[str, MergeGroup]:
    """Fold (file, target filename) pairs into one group per target filename."""
    groups: dict[str, MergeGroup] = {}
    for file, target in pairs:
        seed = MergeGroup.of(file)
        existing = groups.get(target)
        groups[target] = seed if existing is None else MergeGroup.combine(existing, seed)
    return groups
