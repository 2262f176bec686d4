from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Position(BaseModel):
    model_config = ConfigDict(frozen=True)

    line: int
    character: int


class Range(BaseModel):
    model_config = ConfigDict(frozen=True)

    start: Position
    end: Position

    @classmethod
    def on_line(cls, line: int, start: int, end: int) -> "Range":
        return cls(start=Position(line=line, character=start), end=Position(line=line, character=end))


class Import(BaseModel):
    name: str
    declared_url: str
    resolved_url: str | None = None
    module_name: str | None = None


class DeclaredSymbol(BaseModel):
    name: str
    range: Range
    parameters: list[str] = Field(default_factory=list)


class Usage(BaseModel):
    name: str
    range: Range


class DeclaredImportData(BaseModel):
    module: str


class LinkData(BaseModel):
    declared_import: DeclaredImportData


class DocumentLink(BaseModel):
    range: Range
    target: str | None = None
    data: LinkData | None = None


class ExtractionResult(BaseModel):
    imports: list[Import] = Field(default_factory=list)
    declared_symbols: list[DeclaredSymbol] = Field(default_factory=list)
    usages: list[Usage] = Field(default_factory=list)


class DocumentAnalysis(ExtractionResult):
    links: list[DocumentLink] = Field(default_factory=list)


class OmtModule(BaseModel):
    name: str
    uri: str


class CheckFileResult(BaseModel):
    path: str
    module_name: str | None = None

    @property
    def is_module(self) -> bool:
        return self.module_name is not None


class Location(BaseModel):
    uri: str
    range: Range


class Definition(BaseModel):
    location: Location
    symbol: DeclaredSymbol


class FileChangeKind(str, Enum):
    CREATED = "created"
    CHANGED = "changed"
    DELETED = "deleted"


class FileChange(BaseModel):
    model_config = ConfigDict(frozen=True)

    path: str
    kind: FileChangeKind
