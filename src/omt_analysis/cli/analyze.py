from pathlib import Path
from typing import Annotated

import typer

from omt_analysis.cli.common import WorkspaceOption, console, format_range, open_service, render_table, run_async
from omt_analysis.models import DocumentLink


def analyze(
    file: Annotated[Path, typer.Argument(help="Path to an .omt file.", exists=True, dir_okay=False)],
    workspace: WorkspaceOption = None,
) -> None:
    """Show imports, declared symbols, usages and links of a document."""

    async def _run() -> None:
        service, path = await open_service(file, workspace)
        try:
            analysis = await service.index.get(path)
        finally:
            await service.dispose()

        render_table(
            "Imports",
            ["name", "declared", "resolved"],
            [(i.name, i.declared_url, i.resolved_url or f"module:{i.module_name}") for i in analysis.imports],
        )
        render_table(
            "Declared symbols",
            ["name", "range", "parameters"],
            [(s.name, format_range(s.range), ", ".join(s.parameters)) for s in analysis.declared_symbols],
        )
        render_table("Usages", ["name", "range"], [(u.name, format_range(u.range)) for u in analysis.usages])
        _render_links(analysis.links)

    run_async(_run())


def links(
    file: Annotated[Path, typer.Argument(help="Path to an .omt file.", exists=True, dir_okay=False)],
    workspace: WorkspaceOption = None,
) -> None:
    """List the document links of the import block, resolving declared modules."""

    async def _run() -> None:
        service, path = await open_service(file, workspace)
        try:
            found = await service.document_links(path, file.read_text(encoding="utf-8"))
            for link in found:
                if link.target is None:
                    link.target = service.resolve_link(link.data)
        finally:
            await service.dispose()
        _render_links(found)

    run_async(_run())


def _render_links(found: list[DocumentLink]) -> None:
    if not found:
        console.print("[yellow]No links found[/yellow]")
        return
    render_table(
        "Links",
        ["range", "target", "module"],
        [
            (format_range(link.range), link.target or "-", link.data.declared_import.module if link.data else "")
            for link in found
        ],
    )
