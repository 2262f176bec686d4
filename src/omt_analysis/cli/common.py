import asyncio
from collections.abc import Coroutine, Sequence
from pathlib import Path
from typing import Annotated, Any

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from omt_analysis.errors import OmtAnalysisError
from omt_analysis.models import Range
from omt_analysis.service import OmtLanguageService

console = Console()


def render_table(title: str, headers: Sequence[str], rows: Sequence[Sequence[Any]]) -> None:
    table = Table(title=title, show_lines=False)
    for h in headers:
        table.add_column(h)
    for row in rows:
        table.add_row(*(str(v) for v in row))
    console.print(table)
    console.print(f"({len(rows)} rows)")


def format_range(range_: Range) -> str:
    return f"{range_.start.line}:{range_.start.character}-{range_.end.line}:{range_.end.character}"


def resolve_workspace(file: Path, workspace: list[Path] | None) -> list[str]:
    if workspace:
        return [str(w.resolve()) for w in workspace]
    return [str(file.resolve().parent)]


async def open_service(file: Path, workspace: list[Path] | None) -> tuple[OmtLanguageService, str]:
    """Create a service over the workspace and open ``file`` in it."""
    service = OmtLanguageService()
    await service.initialize(resolve_workspace(file, workspace))
    path = str(file.resolve())
    await service.open_document(path, file.read_text(encoding="utf-8"))
    return service, path


WorkspaceOption = Annotated[
    list[Path] | None,
    typer.Option("--workspace", "-w", help="Workspace folder (repeatable). Defaults to the file's folder."),
]


def run_async(coro: Coroutine[Any, Any, None]) -> None:
    try:
        asyncio.run(coro)
    except OmtAnalysisError as exc:
        console.print(f"[red]Error:[/red] {escape(str(exc))}")
        raise typer.Exit(1) from exc
