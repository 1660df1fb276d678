from __future__ import annotations

import gc
import logging
import sys
import time
from collections.abc import Callable, Sequence
from pathlib import Path

from resources_merge.config import DEFAULT_DELETE_DELAYS
from resources_merge.exceptions import DeleteError

logger = logging.getLogger(__name__)

ON_WINDOWS = sys.platform.startswith("win")


def release_file_handles() -> None:
    """Ask the runtime to close unreferenced file objects still holding locks."""
    gc.collect()


def _noop() -> None:
    return None


def default_release_handles() -> Callable[[], None]:
    return release_file_handles if ON_WINDOWS else _noop


class Deleter:
    """Delete merged source files, retrying with backoff when asked to.

    Windows refuses to unlink files another handle still has open, so a
    failed first attempt is followed by ``release_handles`` and one retry
    after each delay in ``delays``.
    """

    def __init__(
        self,
        *,
        enabled: bool = True,
        retry: bool = True,
        delays: Sequence[float] = DEFAULT_DELETE_DELAYS,
        sleep: Callable[[float], None] = time.sleep,
        release_handles: Callable[[], None] | None = None,
    ) -> None:
        self.enabled = enabled
        self.retry = retry
        self.delays = tuple(delays)
        self.sleep = sleep
        self.release_handles = release_handles or default_release_handles()
        self.deleted = 0

    def delete(self, path: Path) -> bool:
        """Delete ``path``; return True when a file was removed or already gone."""
        if not self.enabled:
            return False
        if self._attempt(path):
            self.deleted += 1
            return True

        attempts = 1
        if self.retry:
            self.release_handles()
            for delay in self.delays:
                self.sleep(delay)
                attempts += 1
                if self._attempt(path):
                    logger.debug("Deleted '%s' after %d attempts", path, attempts)
                    self.deleted += 1
                    return True

        raise DeleteError(
            f"Cannot delete resource after being merged: {path}",
            path=str(path),
            attempts=attempts,
        )

    @staticmethod
    def _attempt(path: Path) -> bool:
        try:
            path.unlink()
            return True
        except FileNotFoundError:
            return True
        except OSError as exc:
            logger.debug("Delete attempt failed for '%s': %s", path, exc)
        return not path.exists()
