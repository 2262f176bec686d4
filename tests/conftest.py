"""Shared fixtures and helpers for tests."""

from __future__ import annotations

import fnmatch
from collections.abc import Callable
from pathlib import Path, PurePosixPath

import pytest

from omt_analysis.config import Settings
from omt_analysis.fs.local import LocalFileSystem

_REPO_ROOT = Path(__file__).parent.parent


# ---------------------------------------------------------------------------
# Auto-marker: tag tests as "unit" or "integration" based on directory
# ---------------------------------------------------------------------------


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        test_path = Path(str(item.fspath))
        rel = test_path.relative_to(_REPO_ROOT / "tests")
        parts = rel.parts
        if parts and parts[0] == "integration":
            item.add_marker(pytest.mark.integration)
        else:
            item.add_marker(pytest.mark.unit)


# ---------------------------------------------------------------------------
# In-memory filesystem
# ---------------------------------------------------------------------------


class InMemoryFileSystem:
    """Dict-backed ``FileSystemPort`` that records every read."""

    def __init__(self, files: dict[str, str] | None = None) -> None:
        self.files: dict[str, str] = dict(files or {})
        self.reads: list[str] = []
        self.globs: list[tuple[str, str]] = []

    async def read_text(self, path: str) -> str:
        self.reads.append(path)
        if path not in self.files:
            raise FileNotFoundError(path)
        return self.files[path]

    async def glob(self, root: str, pattern: str) -> list[str]:
        self.globs.append((root, pattern))
        name_pattern = pattern.rsplit("/", 1)[-1]
        prefix = root.rstrip("/") + "/"
        return sorted(
            path
            for path in self.files
            if path.startswith(prefix) and fnmatch.fnmatch(PurePosixPath(path).name, name_pattern)
        )


# ---------------------------------------------------------------------------
# Shared unit-test fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def local_fs() -> LocalFileSystem:
    return LocalFileSystem()


@pytest.fixture
def settings() -> Settings:
    return Settings(debounce_seconds=0.02)


@pytest.fixture
def write_file(tmp_path: Path) -> Callable[[str, str], Path]:
    """Write ``text`` to ``tmp_path / relative`` and return the path."""

    def _write(relative: str, text: str) -> Path:
        path = tmp_path / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return path

    return _write

