from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Iterable
from pathlib import Path

from watchfiles import Change, awatch

from omt_analysis.core.ports.watcher import FileChangeCallback
from omt_analysis.models import FileChange, FileChangeKind

logger = logging.getLogger(__name__)

_CHANGE_KINDS: dict[Change, FileChangeKind] = {
    Change.added: FileChangeKind.CREATED,
    Change.modified: FileChangeKind.CHANGED,
    Change.deleted: FileChangeKind.DELETED,
}


def _is_supported_file(path: Path) -> bool:
    return path.suffix == ".omt" or (path.name.startswith("tsconfig") and path.suffix == ".json")


def to_file_changes(changes: Iterable[tuple[Change, str]]) -> set[FileChange]:
    return {
        FileChange(path=p, kind=_CHANGE_KINDS[change]) for change, p in changes if _is_supported_file(Path(p))
    }


class WatchfilesWatcher:
    """Watch workspace folders for OMT and alias-config changes and trigger a callback.

    Implements the ``FileWatcherPort`` protocol.
    """

    def __init__(
        self,
        directories: Iterable[str | Path],
        on_change: FileChangeCallback,
    ) -> None:
        self._directories = [Path(d) for d in directories]
        self._on_change = on_change
        self._task: asyncio.Task[None] | None = None

    async def start(self) -> None:
        if self._task is not None:
            return
        self._task = asyncio.create_task(self._watch())
        logger.info("Watcher started for %s", ", ".join(str(d) for d in self._directories))

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None
        logger.info("Watcher stopped")

    async def _watch(self) -> None:
        async for changes in awatch(*self._directories):
            file_changes = to_file_changes(changes)
            if file_changes:
                logger.info("Detected changes in %d file(s)", len(file_changes))
                try:
                    await self._on_change(file_changes)
                except Exception:
                    logger.exception("Error in watcher callback")
