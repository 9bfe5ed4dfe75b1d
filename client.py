"""jt: log Jira work from plain-language descriptions."""
import logging

import typer

from jtw import __version__
from jtw.commands import registrars
from jtw.commands.interactive import run_interactive
from jtw.config import LOG_LEVEL
from jtw.runtime import Runtime, guarded

app = typer.Typer(help="AI-powered Jira time logging CLI.")


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(False, "--version", help="Show the version and exit."),
) -> None:
    if version:
        typer.echo(__version__)
        raise typer.Exit()
    if ctx.obj is None:
        ctx.obj = Runtime()
    if ctx.invoked_subcommand is None:
        guarded(run_interactive)(ctx.obj)


for register in registrars:
    register(app)


def main() -> None:
    logging.basicConfig(level=LOG_LEVEL, format="%(levelname)s %(name)s: %(message)s")
    app()


if __name__ == "__main__":
    main()
