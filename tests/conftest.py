"""
Shared pytest fixtures for resources-merge tests.

Provides common helpers for:
- Building origin directory trees
- Merge configurations rooted in a temporary build directory
- Fake sleeping for deletion retries
"""

from __future__ import annotations

import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

SRC_ROOT = Path(__file__).resolve().parents[1] / "src"
if SRC_ROOT.is_dir():
    sys.path.insert(0, str(SRC_ROOT))

from resources_merge.config import MergeConfiguration  # noqa: E402
from resources_merge.logging_config import clear_log_context  # noqa: E402


# =============================================================================
# File system fixtures
# =============================================================================


def write_files(root: Path, files: dict[str, str | bytes]) -> dict[str, Path]:
    """Create ``files`` (relative path -> content) under ``root``."""
    created: dict[str, Path] = {}
    for rel, content in files.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_text(content, encoding="utf-8")
        created[rel] = path
    return created


@pytest.fixture
def build_root(tmp_path: Path) -> Path:
    root = tmp_path / "target"
    root.mkdir()
    return root


@pytest.fixture
def origin_dir(build_root: Path) -> Path:
    origin = build_root / "classes"
    origin.mkdir()
    return origin


@pytest.fixture
def make_files(origin_dir: Path) -> Callable[[dict[str, str | bytes]], dict[str, Path]]:
    def _make(files: dict[str, str | bytes]) -> dict[str, Path]:
        return write_files(origin_dir, files)

    return _make


@pytest.fixture
def make_config(build_root: Path) -> Callable[..., MergeConfiguration]:
    """Build a MergeConfiguration from options, with a fixed line separator."""

    def _make(**options: Any) -> MergeConfiguration:
        options.setdefault("line_separator", "\n")
        return MergeConfiguration.from_mapping(options, build_root=build_root)

    return _make


# =============================================================================
# Deletion fixtures
# =============================================================================


class FakeSleep:
    """Records requested delays without waiting."""

    def __init__(self) -> None:
        self.calls: list[float] = []

    def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


@pytest.fixture
def fake_sleep() -> FakeSleep:
    return FakeSleep()


@pytest.fixture(autouse=True)
def reset_log_context_fixture():
    clear_log_context()
    yield
    clear_log_context()
