"""CLI entrypoint: Typer app definition and command registration"""

from typing import Annotated

import typer

from mdblog.cli.commands import (
    build_cmd, commit_cmd, diff_cmd, export_cmd, extract_cmd, history_cmd, init_cmd, lint_cmd, terms_cmd,
)
from mdblog.logging_setup import configure_logging


app = typer.Typer(name="mdblog", no_args_is_help=True, help="Blog front-matter checks, revision history and catalog")


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log pipeline progress")] = False,
    ):
    configure_logging("DEBUG" if verbose else None)


app.command(name="lint")(lint_cmd)
app.command(name="extract")(extract_cmd)
app.command(name="commit")(commit_cmd)
app.command(name="export")(export_cmd)
app.command(name="build")(build_cmd)
app.command(name="terms")(terms_cmd)
app.command(name="history")(history_cmd)
app.command(name="diff")(diff_cmd)
app.command(name="init")(init_cmd)
