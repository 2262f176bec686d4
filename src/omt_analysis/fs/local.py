from __future__ import annotations

import asyncio
from pathlib import Path


class LocalFileSystem:
    """Read and glob files on the local disk without blocking the event loop.

    Implements the ``FileSystemPort`` protocol.
    """

    async def read_text(self, path: str) -> str:
        return await asyncio.to_thread(_read_text, Path(path))

    async def glob(self, root: str, pattern: str) -> list[str]:
        return await asyncio.to_thread(_glob, Path(root), pattern)


def _read_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except UnicodeDecodeError:
        return path.read_bytes().decode("utf-8", errors="replace")


def _glob(root: Path, pattern: str) -> list[str]:
    if not root.is_dir():
        return []
    return sorted(str(p) for p in root.glob(pattern) if p.is_file())
