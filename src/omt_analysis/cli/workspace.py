import asyncio
import contextlib
from pathlib import Path
from typing import Annotated

import typer

from omt_analysis.cli.common import console, render_table, run_async
from omt_analysis.core.ports.watcher import FileWatcherPort
from omt_analysis.models import FileChange
from omt_analysis.service import OmtLanguageService
from omt_analysis.watcher.watchfiles_adapter import WatchfilesWatcher

workspace_app = typer.Typer(help="Inspect workspace modules.")

_FoldersArgument = Annotated[
    list[Path], typer.Argument(help="Workspace folders to scan.", exists=True, file_okay=False)
]


@workspace_app.command("modules")
def modules(folders: _FoldersArgument) -> None:
    """Scan folders and list every declared module."""

    async def _run() -> None:
        service = OmtLanguageService()
        await service.initialize(str(f.resolve()) for f in folders)
        rows = sorted((m.name, m.uri) for m in service.registry.watched_modules)
        render_table("Modules", ["name", "uri"], rows)

    run_async(_run())


@workspace_app.command("watch")
def watch(folders: _FoldersArgument) -> None:
    """Keep the module registry current while files change, until interrupted."""

    async def _run() -> None:
        service = OmtLanguageService()
        roots = [str(f.resolve()) for f in folders]
        await service.initialize(roots)
        console.print(f"[green]Watching[/green] {len(service.registry.watched_modules)} module(s)")

        async def _on_change(changes: set[FileChange]) -> None:
            await service.handle_file_changes(sorted(changes, key=lambda c: c.path))
            for change in sorted(changes, key=lambda c: c.path):
                console.print(f"{change.kind.value:>8} {change.path}")
            console.print(f"[green]{len(service.registry.watched_modules)}[/green] module(s) registered")

        watcher: FileWatcherPort = WatchfilesWatcher(roots, _on_change)
        await watcher.start()
        try:
            await asyncio.Event().wait()
        finally:
            await watcher.stop()
            await service.dispose()

    with contextlib.suppress(KeyboardInterrupt):
        asyncio.run(_run())
