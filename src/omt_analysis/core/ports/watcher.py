from collections.abc import Callable, Coroutine
from typing import Any, Protocol

from omt_analysis.models import FileChange

FileChangeCallback = Callable[[set[FileChange]], Coroutine[Any, Any, None]]


class FileWatcherPort(Protocol):
    """Delivers batches of OMT and alias-config changes to a ``FileChangeCallback``."""

    async def start(self) -> None: ...

    async def stop(self) -> None: ...
