"""Workspace-wide registry of declared modules.

Modules are keyed by name. Folder scans and single-file events may interleave
at await points; every mutation of the name map happens between awaits, so
concurrent writers converge to last-write-wins.
"""

from __future__ import annotations

import asyncio
import logging
import os

from omt_analysis.config import Settings
from omt_analysis.core.aliases import uri_to_path
from omt_analysis.core.module_parser import check_file, check_text
from omt_analysis.core.ports.filesystem import FileSystemPort
from omt_analysis.errors import DuplicateFolder, UnknownFolder
from omt_analysis.models import CheckFileResult, OmtModule

logger = logging.getLogger(__name__)


class ModuleRegistry:
    def __init__(self, fs: FileSystemPort, settings: Settings | None = None) -> None:
        self._fs = fs
        self._settings = settings or Settings()
        self._folders: list[str] = []
        self._modules: dict[str, OmtModule] = {}

    @property
    def watched_folders(self) -> list[str]:
        return list(self._folders)

    @property
    def watched_modules(self) -> list[OmtModule]:
        return list(self._modules.values())

    def is_module_file(self, path: str) -> bool:
        return path.endswith(".omt") and not self._settings.is_excluded(path)

    async def add_folder(self, folder_uri: str) -> None:
        """Register a folder and scan it for module declarations.

        Raises ``DuplicateFolder`` if the folder is already registered.
        """
        folder_path = uri_to_path(folder_uri)
        if folder_path in self._folders:
            logger.error("Workspace folder %s was already added", folder_uri)
            raise DuplicateFolder(folder_uri)
        self._folders.append(folder_path)
        await self._scan_folder(folder_path)

    def remove_folder(self, folder_uri: str) -> None:
        """Deregister a folder and drop every module located inside it.

        Raises ``UnknownFolder`` if the folder was never registered.
        """
        folder_path = uri_to_path(folder_uri)
        if folder_path not in self._folders:
            logger.error("Workspace folder %s was already removed", folder_uri)
            raise UnknownFolder(folder_uri)
        self._folders.remove(folder_path)
        prefix = folder_path.rstrip("/\\") + os.sep
        for name, module in list(self._modules.items()):
            if module.uri.startswith(prefix):
                del self._modules[name]

    async def scan_all(self) -> None:
        await asyncio.gather(*(self._scan_folder(path) for path in self._folders))

    async def on_file_changed(self, uri: str, text: str | None = None) -> None:
        path = uri_to_path(uri)
        if text is None:
            try:
                result = await check_file(self._fs, path)
            except OSError as exc:
                logger.error("Failed reading %s: %s", path, exc)
                return
        else:
            result = check_text(path, text)
        self.check_for_changes(result)

    async def on_file_created(self, uri: str, text: str | None = None) -> None:
        await self.on_file_changed(uri, text)

    def on_file_deleted(self, uri: str) -> None:
        path = uri_to_path(uri)
        for name, module in list(self._modules.items()):
            if module.uri == path:
                del self._modules[name]

    def check_for_changes(self, result: CheckFileResult) -> None:
        if result.module_name is None:
            # the file no longer declares a module
            self.on_file_deleted(result.path)
            return

        existing = self._modules.get(result.module_name)
        if existing is None or existing.uri != result.path:
            # drop entries left behind under the file's previous name
            self.on_file_deleted(result.path)

        if existing is not None and existing.uri != result.path:
            logger.warning(
                "There is another module named '%s' found at %s. Will now replace with %s",
                existing.name,
                existing.uri,
                result.path,
            )
        self._modules[result.module_name] = OmtModule(name=result.module_name, uri=result.path)

    def get_module_path(self, name: str) -> str | None:
        module = self._modules.get(name)
        return module.uri if module else None

    async def _scan_folder(self, folder_path: str) -> None:
        try:
            found = await self._fs.glob(folder_path, self._settings.omt_glob)
        except OSError as exc:
            logger.error("Failed scanning %s: %s", folder_path, exc)
            return
        paths = [p for p in found if self.is_module_file(p)]
        logger.debug("Scanning %d file(s) in %s", len(paths), folder_path)
        await asyncio.gather(*(self._scan_file(path) for path in paths))

    async def _scan_file(self, path: str) -> None:
        try:
            result = await check_file(self._fs, path)
        except OSError as exc:
            logger.error("Failed reading %s: %s", path, exc)
            return
        self.check_for_changes(result)
