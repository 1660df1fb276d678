from __future__ import annotations

import dataclasses
import logging
import os
from collections.abc import Iterable
from pathlib import Path

from resources_merge.exceptions import DiscoveryError

logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True)
class SourceFile:
    """A scanned resource file and its path components (root to filename)."""

    path: Path
    parts: tuple[str, ...]

    @classmethod
    def from_path(cls, path: str | os.PathLike[str]) -> SourceFile:
        absolute = Path(path).absolute()
        return cls(path=absolute, parts=absolute.parts)

    @property
    def name(self) -> str:
        return self.path.name


def _raise_walk_error(exc: OSError) -> None:
    raise exc


def scan_files(origin_dir: Path, exclude_files: Iterable[str] = ()) -> list[SourceFile]:
    """List regular files below ``origin_dir``, skipping excluded filenames."""
    excluded = frozenset(exclude_files)
    if not origin_dir.is_dir():
        raise DiscoveryError(
            f"Cannot list files by directory: {origin_dir}",
            context={"origin_dir": str(origin_dir)},
        )
    files: list[SourceFile] = []
    try:
        for dirpath, _dirnames, filenames in os.walk(origin_dir, onerror=_raise_walk_error):
            for filename in filenames:
                path = Path(dirpath) / filename
                if not path.is_file():
                    continue
                if filename in excluded:
                    logger.debug("Ignoring excluded file '%s'", path)
                    continue
                files.append(SourceFile.from_path(path))
    except OSError as exc:
        raise DiscoveryError(
            f"Cannot list files by directory: {origin_dir}",
            context={"origin_dir": str(origin_dir), "error": str(exc)},
        ) from exc
    logger.debug("Scanned %d files under '%s'", len(files), origin_dir)
    return files
