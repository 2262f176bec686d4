from pathlib import Path
from typing import Annotated

import typer

from omt_analysis.cli.common import WorkspaceOption, console, format_range, open_service, render_table, run_async
from omt_analysis.models import Position

_FileArgument = Annotated[Path, typer.Argument(help="Path to an .omt file.", exists=True, dir_okay=False)]
_LineArgument = Annotated[int, typer.Argument(help="Zero-based line.")]
_CharacterArgument = Annotated[int, typer.Argument(help="Zero-based character.")]


def definition(
    file: _FileArgument,
    line: _LineArgument,
    character: _CharacterArgument,
    workspace: WorkspaceOption = None,
) -> None:
    """Find the definition(s) of the symbol at a position."""

    async def _run() -> None:
        service, path = await open_service(file, workspace)
        try:
            locations = await service.definition(path, Position(line=line, character=character))
        finally:
            await service.dispose()
        if not locations:
            console.print("[yellow]No definition found[/yellow]")
            return
        render_table("Definitions", ["uri", "range"], [(loc.uri, format_range(loc.range)) for loc in locations])

    run_async(_run())


def hover(
    file: _FileArgument,
    line: _LineArgument,
    character: _CharacterArgument,
    workspace: WorkspaceOption = None,
) -> None:
    """Show the signature of the symbol at a position."""

    async def _run() -> None:
        service, path = await open_service(file, workspace)
        try:
            text = await service.hover(path, Position(line=line, character=character))
        finally:
            await service.dispose()
        console.print(text if text else "[yellow]Nothing to show[/yellow]")

    run_async(_run())
