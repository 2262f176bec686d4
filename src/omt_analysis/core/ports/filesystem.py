from typing import Protocol


class FileSystemPort(Protocol):
    async def read_text(self, path: str) -> str: ...

    async def glob(self, root: str, pattern: str) -> list[str]: ...
