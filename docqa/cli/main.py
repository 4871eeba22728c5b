"""docqa CLI entry point."""

import typer

from docqa.cli.estimate import estimate
from docqa.cli.run import run

app = typer.Typer(
    name="docqa",
    help="Answer a question about a local documents folder with retrieval-augmented generation.",
)

app.command(name="run")(run)
app.command(name="estimate")(estimate)


@app.callback(invoke_without_command=True)
def default(ctx: typer.Context):
    """With no subcommand, do a full run using settings defaults."""
    if ctx.invoked_subcommand is None:
        run()


if __name__ == "__main__":
    app()
