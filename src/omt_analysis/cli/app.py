import logging
from typing import Annotated

import typer
from rich.logging import RichHandler

from omt_analysis.cli.analyze import analyze, links
from omt_analysis.cli.navigate import definition, hover
from omt_analysis.cli.workspace import workspace_app

app = typer.Typer(
    name="omt-analysis",
    help="Inspect OMT documents and the modules of a workspace.",
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)


@app.callback()
def configure(
    log_level: Annotated[str, typer.Option(help="Logging level (debug, info, warning, error).")] = "warning",
) -> None:
    logging.basicConfig(
        level=log_level.upper(),
        format="%(message)s",
        handlers=[RichHandler(show_path=False)],
    )


app.command("analyze")(analyze)
app.command("links")(links)
app.command("definition")(definition)
app.command("hover")(hover)
app.add_typer(workspace_app, name="workspace")


def main() -> None:
    app()
