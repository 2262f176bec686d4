from __future__ import annotations

import asyncio
import contextlib
import logging

from omt_analysis.core.aliases import uri_to_path
from omt_analysis.core.analysis import DocumentAnalyzer
from omt_analysis.core.ports.filesystem import FileSystemPort
from omt_analysis.errors import MalformedDocument, SymbolRangeError
from omt_analysis.models import DocumentAnalysis

logger = logging.getLogger(__name__)


class DocumentIndex:
    """Per-document cache of the last analysis, recomputed after edits settle.

    Each ``invalidate`` replaces the pending recompute of that document only.
    Until the recompute finishes, ``get`` keeps serving the previous analysis.
    """

    def __init__(self, analyzer: DocumentAnalyzer, fs: FileSystemPort, quiet_period: float = 0.3) -> None:
        self._analyzer = analyzer
        self._fs = fs
        self._quiet_period = quiet_period
        self._cache: dict[str, DocumentAnalysis] = {}
        self._texts: dict[str, str] = {}
        self._pending: dict[str, asyncio.Task[None]] = {}
        self._errors: dict[str, SymbolRangeError] = {}

    async def get(self, uri: str) -> DocumentAnalysis:
        key = uri_to_path(uri)
        cached = self._cache.get(key)
        if cached is not None:
            return cached

        text = self._texts.get(key)
        if text is None:
            text = await self._fs.read_text(key)
        analysis = await self._compute(key, text)
        return self._cache.setdefault(key, analysis)

    def cached(self, uri: str) -> DocumentAnalysis | None:
        return self._cache.get(uri_to_path(uri))

    async def open(self, uri: str, text: str) -> DocumentAnalysis:
        key = uri_to_path(uri)
        self._cancel_pending(key)
        self._texts[key] = text
        self._cache.pop(key, None)
        return await self.get(key)

    def invalidate(self, uri: str, new_text: str) -> None:
        key = uri_to_path(uri)
        self._texts[key] = new_text
        self._cancel_pending(key)
        self._pending[key] = asyncio.create_task(self._recompute_later(key, new_text))

    def close(self, uri: str) -> None:
        key = uri_to_path(uri)
        self._cancel_pending(key)
        self._texts.pop(key, None)
        self._cache.pop(key, None)
        self._errors.pop(key, None)

    def last_error(self, uri: str) -> SymbolRangeError | None:
        return self._errors.get(uri_to_path(uri))

    async def wait_settled(self, uri: str) -> None:
        key = uri_to_path(uri)
        while (task := self._pending.get(key)) is not None:
            await asyncio.wait({task})
            if self._pending.get(key) is task:
                del self._pending[key]

    async def dispose(self) -> None:
        tasks = list(self._pending.values())
        self._pending.clear()
        for task in tasks:
            task.cancel()
        for task in tasks:
            with contextlib.suppress(asyncio.CancelledError):
                await task

    def _cancel_pending(self, key: str) -> None:
        pending = self._pending.pop(key, None)
        if pending is not None:
            pending.cancel()

    async def _recompute_later(self, key: str, text: str) -> None:
        await asyncio.sleep(self._quiet_period)
        try:
            analysis = await self._compute(key, text)
        except SymbolRangeError as exc:
            logger.error("Keeping previous analysis of %s: %s", key, exc)
            self._errors[key] = exc
        else:
            self._cache[key] = analysis
            self._errors.pop(key, None)
        finally:
            if self._pending.get(key) is asyncio.current_task():
                del self._pending[key]

    async def _compute(self, key: str, text: str) -> DocumentAnalysis:
        try:
            return await self._analyzer.analyze(key, text)
        except MalformedDocument as exc:
            logger.warning("%s", exc)
            return DocumentAnalysis()
