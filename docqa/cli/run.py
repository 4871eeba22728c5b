"""CLI command for the full load -> cost -> index -> answer run."""

import logging
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.panel import Panel

from config.settings import MissingCredentialsError, get_settings
from docqa.vectorstore.index_manager import remove_index
from docqa.workflow.graph import run_workflow

console = Console()
app = typer.Typer()

logger = logging.getLogger(__name__)


@app.command()
def run(
    documents: Annotated[
        Optional[str],
        typer.Option("--documents", "-d", help="Documents directory (default from settings)"),
    ] = None,
    question: Annotated[
        Optional[str],
        typer.Option("--question", "-q", help="Question to ask (default from settings)"),
    ] = None,
    rebuild: Annotated[
        bool,
        typer.Option("--rebuild", help="Delete the persisted index and build a new one"),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose logging"),
    ] = False,
):
    """Load documents, check the embedding cost, index them and answer the question."""
    if verbose:
        logging.basicConfig(level=logging.INFO)
    else:
        logging.basicConfig(level=logging.WARNING)

    settings = get_settings()
    overrides = {}
    if documents is not None:
        overrides["docqa_documents_path"] = documents
    if question is not None:
        overrides["docqa_question"] = question
    if overrides:
        settings = settings.model_copy(update=overrides)

    if rebuild and remove_index(settings.index_path):
        console.print(f"Removed existing index at {settings.index_path}")

    try:
        result = run_workflow(settings, notify=console.print)
    except MissingCredentialsError as e:
        console.print(
            f"[bold red]{', '.join(e.missing)} not set.[/bold red]\n"
            "Add the key(s) to your environment or to a .env file."
        )
        raise typer.Exit(1)

    if result.get("skipped"):
        return

    answer = result["answer"]
    sources = "\n".join(f"  - {s}" for s in answer.sources)
    body = f"{answer.text}\n\nSources:\n{sources}" if sources else answer.text

    console.print()
    console.print(Panel(body, title=answer.question, border_style="green", padding=(1, 2)))
