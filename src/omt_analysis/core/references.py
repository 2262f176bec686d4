"""Resolve symbol usages to their definitions, following imports across files."""

from __future__ import annotations

import logging
from typing import Protocol

from omt_analysis.core.aliases import uri_to_path
from omt_analysis.core.analysis import DocumentAnalyzer
from omt_analysis.core.ports.filesystem import FileSystemPort
from omt_analysis.errors import OmtAnalysisError
from omt_analysis.models import Definition, ExtractionResult, Import, Location, Usage

logger = logging.getLogger(__name__)


class ModuleLookup(Protocol):
    def get_module_path(self, name: str) -> str | None: ...


class ReferenceResolver:
    def __init__(self, analyzer: DocumentAnalyzer, modules: ModuleLookup, fs: FileSystemPort) -> None:
        self._analyzer = analyzer
        self._modules = modules
        self._fs = fs

    async def resolve(self, usage: Usage, analysis: ExtractionResult, document_uri: str) -> list[Location]:
        return [d.location for d in await self.find_definitions(usage.name, analysis, document_uri)]

    async def find_definitions(self, name: str, analysis: ExtractionResult, document_uri: str) -> list[Definition]:
        """Collect every definition of ``name`` visible from the document.

        Each file is searched at most once per call, so import cycles terminate.
        """
        document_path = uri_to_path(document_uri)
        return await self._search(name, analysis, document_path, {document_path})

    async def _search(
        self,
        name: str,
        analysis: ExtractionResult,
        document_path: str,
        visited: set[str],
    ) -> list[Definition]:
        definitions = [
            Definition(location=Location(uri=document_path, range=symbol.range), symbol=symbol)
            for symbol in analysis.declared_symbols
            if symbol.name == name
        ]
        for imported in analysis.imports:
            if imported.name != name:
                continue
            target = self._import_target(imported)
            if target is None or target in visited:
                continue
            visited.add(target)
            imported_analysis = await self._load(target)
            if imported_analysis is not None:
                definitions.extend(await self._search(name, imported_analysis, target, visited))
        return definitions

    def _import_target(self, imported: Import) -> str | None:
        if imported.resolved_url is not None:
            return imported.resolved_url
        if imported.module_name is not None:
            target = self._modules.get_module_path(imported.module_name)
            if target is None:
                logger.debug("Module %s is not registered", imported.module_name)
            return target
        return None

    async def _load(self, path: str) -> ExtractionResult | None:
        try:
            text = await self._fs.read_text(path)
            return await self._analyzer.extract(path, text)
        except (OSError, OmtAnalysisError) as exc:
            logger.warning("Skipping imported file %s: %s", path, exc)
            return None


def render_hover(definition: Definition) -> str:
    return f"{definition.symbol.name}({', '.join(definition.symbol.parameters)})"
