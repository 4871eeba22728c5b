"""CLI command that reports the embedding cost without indexing."""

import logging
from typing import Annotated, Optional

import typer
from rich.console import Console

from config.settings import get_settings
from docqa.ingestion.cost import cost_for_tokens, count_tokens
from docqa.ingestion.loaders import DirectoryLoader

console = Console()
app = typer.Typer()


@app.command()
def estimate(
    documents: Annotated[
        Optional[str],
        typer.Option("--documents", "-d", help="Documents directory (default from settings)"),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose logging"),
    ] = False,
):
    """Estimate what embedding the documents would cost."""
    if verbose:
        logging.basicConfig(level=logging.INFO)
    else:
        logging.basicConfig(level=logging.WARNING)

    settings = get_settings()
    loader = DirectoryLoader(documents or settings.documents_path)

    with console.status("[bold green]Loading docs..."):
        docs = loader.load()

    token_count = count_tokens(docs, model_name=settings.docqa_tokenizer_model)
    cost = cost_for_tokens(token_count, settings.docqa_rate_per_1k_tokens)
    within = cost <= settings.docqa_cost_ceiling

    console.print("[bold]docqa cost estimate[/bold]")
    console.print(f"  Directory: {loader.path}")
    console.print(f"  Documents: {len(docs)}")
    console.print(f"  Tokens: {token_count}")
    console.print(f"  Cost: ${cost:.6f} (rate ${settings.docqa_rate_per_1k_tokens} / 1K tokens)")
    if within:
        console.print(f"  [green]Within the ${settings.docqa_cost_ceiling:g} ceiling[/green]")
    else:
        console.print(f"  [red]Exceeds the ${settings.docqa_cost_ceiling:g} ceiling[/red]")
