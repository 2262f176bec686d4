"""Error kinds raised by the analysis core.

Per-file problems (a bad config, an unreadable import) are caught close to
where they happen; integrity problems inside one document's extraction are
raised to the caller.
"""

from __future__ import annotations


class OmtAnalysisError(Exception):
    """Base class for all analysis errors."""


class MalformedDocument(OmtAnalysisError, ValueError):
    """Raised when the YAML structure of a document cannot be parsed."""

    def __init__(self, uri: str, reason: str) -> None:
        self.uri = uri
        self.reason = reason
        super().__init__(f"Malformed document {uri}: {reason}")


class ConfigParseError(OmtAnalysisError):
    """Raised when a path-alias configuration file is unreadable or malformed."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot read alias configuration {path}: {reason}")


class SymbolRangeError(OmtAnalysisError):
    """A declared name could not be located exactly once in the raw text."""

    def __init__(self, pattern: str, count: int) -> None:
        self.pattern = pattern
        self.count = count
        super().__init__(f"{count} results found for {pattern}, expected only one.")


class RangeNotFound(SymbolRangeError):
    pass


class RangeAmbiguous(SymbolRangeError):
    pass


class DuplicateFolder(OmtAnalysisError):
    def __init__(self, folder: str) -> None:
        self.folder = folder
        super().__init__(f"Workspace folder {folder} was already added")


class UnknownFolder(OmtAnalysisError):
    def __init__(self, folder: str) -> None:
        self.folder = folder
        super().__init__(f"Workspace folder {folder} is not registered")
