"""Immutable configuration for one merge strategy execution."""

from __future__ import annotations

import dataclasses
import os
import re
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

from resources_merge.exceptions import ConfigurationError

DEFAULT_ORIGIN_DIR = "classes"
DEFAULT_MERGE_DIR = "generated-resources"
DEFAULT_NEWLINE_COUNT = 2
DEFAULT_DELETE_DELAYS = (0.05, 0.25, 0.75)

SORT_BY_NAME = "name"
SORT_BY_PATH = "path"
SORT_BY_NONE = "none"
SORT_CHOICES = (SORT_BY_NAME, SORT_BY_PATH, SORT_BY_NONE)


def resolve_dir(build_root: Path, value: str | os.PathLike[str] | None, default: str | None = None) -> Path:
    """Resolve ``value`` against ``build_root`` unless it is already absolute."""
    raw = value if value else default
    if not raw:
        raise ConfigurationError("Cannot resolve an empty directory", context={"build_root": str(build_root)})
    path = Path(raw).expanduser()
    if not path.is_absolute():
        path = build_root / path
    return path.absolute()


@dataclasses.dataclass(frozen=True)
class MergeConfiguration:
    pattern: str
    origin_dir: Path
    default_merge_dir: Path
    exclude_files: frozenset[str] = frozenset()
    merge_dir: Path | None = None
    target_filename: str | None = None
    newline_count: int = DEFAULT_NEWLINE_COUNT
    comment_format: str | None = None
    delete_after_merge: bool = True
    retry_delete: bool = True
    use_common_root: bool = True
    sort_by: str = SORT_BY_NAME
    line_separator: str = os.linesep
    delete_delays: tuple[float, ...] = DEFAULT_DELETE_DELAYS

    def __post_init__(self) -> None:
        if not self.pattern:
            raise ConfigurationError("pattern cannot be empty")
        try:
            re.compile(self.pattern)
        except re.error as exc:
            raise ConfigurationError(
                f"Invalid pattern '{self.pattern}': {exc}",
                context={"pattern": self.pattern},
            ) from exc
        if self.comment_format:
            try:
                self.comment_format % "filename"
            except (TypeError, ValueError) as exc:
                raise ConfigurationError(
                    f"comment_format must take exactly one '%s' placeholder: {exc}",
                    context={"comment_format": self.comment_format},
                ) from exc
        if self.sort_by not in SORT_CHOICES:
            raise ConfigurationError(
                f"Unknown sort_by '{self.sort_by}'. Available: {', '.join(SORT_CHOICES)}",
                context={"sort_by": self.sort_by},
            )
        if any(delay < 0 for delay in self.delete_delays):
            raise ConfigurationError(
                "delete_delays must not be negative",
                context={"delete_delays": list(self.delete_delays)},
            )

    @property
    def compiled_pattern(self) -> re.Pattern[str]:
        return re.compile(self.pattern)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], *, build_root: Path) -> MergeConfiguration:
        """Build a configuration from a strategy entry of the YAML document.

        Relative ``origin_dir``/``merge_dir`` values are resolved against
        ``build_root``. A missing ``merge_dir`` leaves the choice to the
        writer: the common root of each group when ``use_common_root`` is
        set, otherwise ``<build_root>/generated-resources``.
        """
        build_root = Path(build_root).absolute()
        merge_dir_value = data.get("merge_dir")
        return cls(
            pattern=str(data.get("pattern") or ""),
            origin_dir=resolve_dir(build_root, data.get("origin_dir"), DEFAULT_ORIGIN_DIR),
            default_merge_dir=resolve_dir(build_root, DEFAULT_MERGE_DIR),
            exclude_files=_as_frozenset(data.get("exclude_files")),
            merge_dir=resolve_dir(build_root, merge_dir_value) if merge_dir_value else None,
            target_filename=data.get("target_filename") or None,
            newline_count=int(data.get("newline_count", DEFAULT_NEWLINE_COUNT)),
            comment_format=data.get("comment_format") or None,
            delete_after_merge=bool(data.get("delete_after_merge", True)),
            retry_delete=bool(data.get("retry_delete", True)),
            use_common_root=bool(data.get("use_common_root", True)),
            sort_by=str(data.get("sort_by", SORT_BY_NAME)),
            line_separator=str(data.get("line_separator", os.linesep)),
        )


def _as_frozenset(values: Iterable[str] | None) -> frozenset[str]:
    if not values:
        return frozenset()
    if isinstance(values, str):
        return frozenset([values])
    return frozenset(str(value) for value in values)
