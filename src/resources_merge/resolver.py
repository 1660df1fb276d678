"""Filename pattern matching to target filenames.

The pattern must match the whole filename (``re.fullmatch``) and is
case-sensitive. Without a static target filename, the target is the
concatenation of every capturing group's match in group order; groups that
did not take part in the match contribute nothing. For example, with
``.*(message)(_.*)?(\\.properties)`` the file ``biz1_message_en.properties``
resolves to ``message_en.properties`` and ``base_message.properties`` to
``message.properties``.

Nested capturing groups would contribute their text twice. Patterns are
expected not to nest groups; use ``(?:...)`` or ``exclude_files`` instead.
"""

from __future__ import annotations

import logging
import re

from resources_merge.exceptions import ConfigurationError
from resources_merge.scanner import SourceFile

logger = logging.getLogger(__name__)


class TargetResolver:
    def __init__(self, pattern: str | re.Pattern[str], target_filename: str | None = None) -> None:
        self.pattern = re.compile(pattern) if isinstance(pattern, str) else pattern
        self.target_filename = target_filename or None
        if self.target_filename is None and self.pattern.groups <= 0:
            raise ConfigurationError(
                "Cannot resolve merge target filename: "
                "pattern requires a capturing group or a target_filename",
                context={"pattern": self.pattern.pattern},
            )

    def resolve(self, file: SourceFile) -> str | None:
        """Return the target filename for ``file`` or ``None`` when it does not match."""
        match = self.pattern.fullmatch(file.name)
        if match is None:
            logger.debug("Ignoring mismatched file '%s'", file.path)
            return None
        logger.debug("Resolving file '%s'", file.path)
        if self.target_filename is not None:
            return self.target_filename
        target = "".join(match.groups(default=""))
        if not target:
            raise ConfigurationError(
                f"Cannot resolve merge target filename: filename '{file.path}' matched "
                f"pattern '{self.pattern.pattern}', but all capturing groups are empty; "
                "edit the pattern or exclude this file",
                context={"path": str(file.path), "pattern": self.pattern.pattern},
            )
        return target
