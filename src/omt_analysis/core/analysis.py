from omt_analysis.core.aliases import AliasConfigProvider
from omt_analysis.core.extract import extract_symbols
from omt_analysis.core.links import find_document_links
from omt_analysis.models import DocumentAnalysis, DocumentLink, ExtractionResult


class DocumentAnalyzer:
    """Runs alias discovery and extraction for one document text."""

    def __init__(self, aliases: AliasConfigProvider) -> None:
        self._aliases = aliases

    async def extract(self, uri: str, text: str) -> ExtractionResult:
        shorthands = await self._aliases.shorthands_for(uri)
        return extract_symbols(text, uri, shorthands)

    async def links(self, uri: str, text: str) -> list[DocumentLink]:
        shorthands = await self._aliases.shorthands_for(uri)
        return find_document_links(text, uri, shorthands)

    async def analyze(self, uri: str, text: str) -> DocumentAnalysis:
        shorthands = await self._aliases.shorthands_for(uri)
        extraction = extract_symbols(text, uri, shorthands)
        return DocumentAnalysis(
            imports=extraction.imports,
            declared_symbols=extraction.declared_symbols,
            usages=extraction.usages,
            links=find_document_links(text, uri, shorthands),
        )
