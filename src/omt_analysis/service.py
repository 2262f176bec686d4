"""Entry points called by a protocol layer (language server, CLI, ...).

``OmtLanguageService`` owns one instance of each component and routes
workspace, document and file-system events to them.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from omt_analysis.config import Settings
from omt_analysis.core.aliases import AliasConfigProvider, uri_to_path
from omt_analysis.core.analysis import DocumentAnalyzer
from omt_analysis.core.position import position_in_range
from omt_analysis.core.ports.filesystem import FileSystemPort
from omt_analysis.core.references import ReferenceResolver, render_hover
from omt_analysis.fs.local import LocalFileSystem
from omt_analysis.index.document_index import DocumentIndex
from omt_analysis.models import (
    Definition,
    DocumentLink,
    FileChange,
    FileChangeKind,
    LinkData,
    Location,
    Position,
    Usage,
)
from omt_analysis.workspace.registry import ModuleRegistry

logger = logging.getLogger(__name__)


class OmtLanguageService:
    def __init__(self, fs: FileSystemPort | None = None, settings: Settings | None = None) -> None:
        self.settings = settings or Settings()
        self.fs = fs or LocalFileSystem()
        self.aliases = AliasConfigProvider(self.fs, self.settings)
        self.analyzer = DocumentAnalyzer(self.aliases)
        self.registry = ModuleRegistry(self.fs, self.settings)
        self.index = DocumentIndex(self.analyzer, self.fs, self.settings.debounce_seconds)
        self.references = ReferenceResolver(self.analyzer, self.registry, self.fs)

    # -- workspace lifecycle --

    async def initialize(self, folders: Iterable[str]) -> None:
        folders = list(folders)
        await self.aliases.discover(folders)
        for folder in folders:
            await self.registry.add_folder(folder)

    async def change_workspace_folders(self, added: Iterable[str], removed: Iterable[str]) -> None:
        for folder in removed:
            self.registry.remove_folder(folder)
        for folder in added:
            await self.registry.add_folder(folder)
        await self.aliases.discover(self.registry.watched_folders)

    async def handle_file_changes(self, changes: Iterable[FileChange]) -> None:
        configs_changed = False
        for change in changes:
            if self.aliases.is_config_file(change.path):
                configs_changed = True
                continue
            if not self.registry.is_module_file(change.path):
                continue
            if change.kind is FileChangeKind.DELETED:
                self.registry.on_file_deleted(change.path)
            elif change.kind is FileChangeKind.CREATED:
                await self.registry.on_file_created(change.path)
            else:
                await self.registry.on_file_changed(change.path)
        if configs_changed:
            await self.aliases.discover(self.registry.watched_folders)

    # -- open documents --

    async def open_document(self, uri: str, text: str) -> None:
        await self.registry.on_file_changed(uri, text)
        await self.index.open(uri, text)

    async def change_document(self, uri: str, text: str) -> None:
        await self.registry.on_file_changed(uri, text)
        self.index.invalidate(uri, text)

    def close_document(self, uri: str) -> None:
        self.index.close(uri)

    # -- requests --

    async def document_links(self, uri: str, text: str) -> list[DocumentLink]:
        return await self.analyzer.links(uri_to_path(uri), text)

    def resolve_link(self, data: LinkData | dict | None) -> str | None:
        if data is None:
            return None
        if isinstance(data, dict):
            try:
                data = LinkData.model_validate(data)
            except ValueError:
                logger.debug("Ignoring link data %r", data)
                return None
        return self.registry.get_module_path(data.declared_import.module)

    async def usage_at(self, uri: str, position: Position) -> Usage | None:
        analysis = await self.index.get(uri)
        for usage in analysis.usages:
            if position_in_range(position, usage.range):
                return usage
        return None

    async def definitions_at(self, uri: str, position: Position) -> list[Definition]:
        usage = await self.usage_at(uri, position)
        if usage is None:
            return []
        analysis = await self.index.get(uri)
        return await self.references.find_definitions(usage.name, analysis, uri)

    async def definition(self, uri: str, position: Position) -> list[Location]:
        usage = await self.usage_at(uri, position)
        if usage is None:
            return []
        return await self.references.resolve(usage, await self.index.get(uri), uri)

    async def hover(self, uri: str, position: Position) -> str | None:
        definitions = await self.definitions_at(uri, position)
        if len(definitions) != 1:
            return None
        return render_hover(definitions[0])

    async def dispose(self) -> None:
        await self.index.dispose()
