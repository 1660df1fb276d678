from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path

from resources_merge.config import SORT_BY_NAME, SORT_BY_PATH, MergeConfiguration
from resources_merge.deleter import Deleter
from resources_merge.exceptions import WriteError
from resources_merge.grouping import MergeGroup
from resources_merge.scanner import SourceFile

logger = logging.getLogger(__name__)


def order_members(files: tuple[SourceFile, ...], sort_by: str) -> list[SourceFile]:
    if sort_by == SORT_BY_NAME:
        return sorted(files, key=lambda f: (f.name, str(f.path)))
    if sort_by == SORT_BY_PATH:
        return sorted(files, key=lambda f: str(f.path))
    return list(files)


def _is_same_file(a: Path, b: Path) -> bool:
    try:
        return os.path.samefile(a, b)
    except FileNotFoundError:
        return False


class MergeWriter:
    def __init__(self, config: MergeConfiguration, deleter: Deleter) -> None:
        self.config = config
        self.deleter = deleter

    def output_dir(self, group: MergeGroup) -> Path:
        if self.config.merge_dir is not None:
            return self.config.merge_dir
        if self.config.use_common_root:
            root = group.common_root_path
            if root is not None:
                return root
        return self.config.default_merge_dir

    def write(self, target_filename: str, group: MergeGroup) -> tuple[Path, int]:
        """Append every member of ``group`` to its target file.

        Returns the target path and the number of members appended. A member
        that is the target file itself is skipped and never deleted.
        """
        out_dir = self.output_dir(group)
        try:
            out_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise WriteError(
                f"Cannot create resource output directory: {out_dir}",
                context={"dir": str(out_dir), "error": str(exc)},
            ) from exc

        target = out_dir / target_filename
        separator = self.config.line_separator.encode("utf-8") * max(self.config.newline_count, 0)
        merged = 0
        try:
            initial_length = target.stat().st_size if target.is_file() else 0
            with target.open("ab") as out:
                for index, member in enumerate(order_members(group.files, self.config.sort_by)):
                    if _is_same_file(target, member.path):
                        logger.debug("Skipping resource '%s' same as target '%s'", member.path, target)
                        continue
                    logger.debug("Merging resource '%s' into target '%s'", member.path, target)
                    if separator and (initial_length > 0 or index > 0):
                        out.write(separator)
                    if self.config.comment_format:
                        out.write((self.config.comment_format % member.name).encode("utf-8", "surrogateescape"))
                    with member.path.open("rb") as src:
                        shutil.copyfileobj(src, out)
                    out.flush()
                    merged += 1
                    self.deleter.delete(member.path)
        except (OSError, UnicodeError) as exc:
            raise WriteError(
                f"Cannot write resource file: {target}",
                context={"target": str(target), "error": str(exc)},
            ) from exc
        logger.info("Merged %d resources into target '%s'", merged, target)
        return target, merged
