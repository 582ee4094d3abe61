"""Command line interface for MemoryLens."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from memorylens.analytics.graph import build_entity_graph
from memorylens.analytics.health import analyze_health
from memorylens.analytics.tags import build_tag_index
from memorylens.config import WORKSPACE_ENV, AppConfig
from memorylens.index.indexer import ExternalIndexer
from memorylens.index.search import IndexReader
from memorylens.ingestion.notes import NoteStore
from memorylens.vocabulary import load_vocabulary
from memorylens.web.app import app as web_app


console = Console()
app = typer.Typer(help="MemoryLens - analytics for a markdown memory workspace")


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s")


def _open_store(workspace: Optional[Path]) -> NoteStore:
    config = AppConfig(workspace=workspace)
    root = config.resolve_workspace(Path.cwd())
    if not root.exists():
        raise typer.BadParameter(f"Workspace not found: {root}")
    return NoteStore(root)


def _print_json(data: object) -> None:
    console.print_json(json.dumps(data))


@app.command()
def graph(
    workspace: Path = typer.Option(None, "--workspace", "-w", help="Workspace root"),
    vocabulary: Path = typer.Option(None, "--vocabulary", help="JSON vocabulary file"),
    as_json: bool = typer.Option(False, "--json", help="Print raw JSON"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Show the co-mention entity graph."""
    _setup_logging(verbose)
    store = _open_store(workspace)
    config = AppConfig(workspace=workspace, vocabulary_path=vocabulary)
    result = build_entity_graph(store.load_corpus(), load_vocabulary(config.vocabulary_path))

    if as_json:
        _print_json(result.to_dict())
        return
    if not result.nodes:
        console.print("[yellow]No entities found.[/yellow]")
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Entity")
    table.add_column("Type")
    table.add_column("Mentions")
    for node in sorted(result.nodes, key=lambda n: (-n.count, n.id)):
        table.add_row(node.label, node.type, str(node.count))
    console.print(table)

    edges = sorted(result.edges, key=lambda e: (-e.weight, e.source, e.target))
    console.print(f"{len(result.nodes)} entities, {len(edges)} co-mentions")
    for edge in edges[:20]:
        console.print(f"  {edge.source} -- {edge.target} ({edge.weight})")


@app.command()
def tags(
    workspace: Path = typer.Option(None, "--workspace", "-w", help="Workspace root"),
    limit: int = typer.Option(AppConfig().tag_limit, help="Number of tags to display"),
    as_json: bool = typer.Option(False, "--json", help="Print raw JSON"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """List the most widely used heading and bold-text tags."""
    _setup_logging(verbose)
    store = _open_store(workspace)
    entries = build_tag_index(store.load_corpus(), limit=limit)

    if as_json:
        _print_json([entry.to_dict() for entry in entries])
        return
    if not entries:
        console.print("[yellow]No tags found.[/yellow]")
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Tag")
    table.add_column("Files")
    table.add_column("Paths")
    for entry in entries:
        table.add_row(entry.tag, str(entry.count), ", ".join(entry.files)[:180])
    console.print(table)


@app.command()
def health(
    workspace: Path = typer.Option(None, "--workspace", "-w", help="Workspace root"),
    as_json: bool = typer.Option(False, "--json", help="Print raw JSON"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Summarise activity, stale notes and coverage gaps."""
    _setup_logging(verbose)
    config = AppConfig(workspace=workspace)
    store = _open_store(workspace)
    summary = analyze_health(
        store.list_notes(),
        stale_after_days=config.stale_after_days,
        window_days=config.coverage_window_days,
    )

    if as_json:
        _print_json(summary.to_dict())
        return

    console.print(f"Files: [bold]{summary.file_count}[/bold]")
    console.print(f"Daily notes: {len(summary.heatmap)} ({summary.daily_total_size} bytes)")
    console.print(f"MEMORY.md: {summary.memory_md_size} bytes")
    console.print(f"Distillation ratio: {summary.distillation_ratio:.2f}")
    console.print(
        f"Coverage gaps (last {config.coverage_window_days} days): {len(summary.coverage_gaps)}"
    )

    if summary.stale_files:
        table = Table(show_header=True, header_style="bold magenta")
        table.add_column("Stale note")
        table.add_column("Days since update")
        for item in summary.stale_files:
            table.add_row(item.path, str(item.days_since_update))
        console.print(table)


@app.command()
def search(
    query: str = typer.Argument(..., help="Query text"),
    db: Path = typer.Option(None, "--db", help="Index database path"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Run a full-text search against the memory index."""
    _setup_logging(verbose)
    config = AppConfig(index_db=db)
    if not Path(config.index_db).exists():
        raise typer.BadParameter(f"Database not found: {config.index_db}")

    results = IndexReader(config.index_db).search(query)
    if not results:
        console.print("[yellow]No matches found.[/yellow]")
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("File")
    table.add_column("Snippet")
    for result in results:
        table.add_row(result.file, result.chunk.replace("\n", " ")[:180])
    console.print(table)


@app.command()
def status(
    db: Path = typer.Option(None, "--db", help="Index database path"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Show index status."""
    _setup_logging(verbose)
    config = AppConfig(index_db=db)
    console.print(IndexReader(config.index_db).status().raw)


@app.command()
def reindex(
    binary: Optional[str] = typer.Option(None, "--bin", help="Indexer executable"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Run the external indexer over the workspace."""
    _setup_logging(verbose)
    config = AppConfig(indexer_bin=binary)
    result = ExternalIndexer(config.indexer_bin or "openclaw").reindex()
    if result.output:
        console.print(result.output)
    if not result.success:
        console.print("[red]Indexing failed.[/red]")
        raise typer.Exit(code=1)


@app.command()
def web(
    host: str = typer.Option("127.0.0.1", help="Host interface"),
    port: int = typer.Option(8000, help="Server port"),
    workspace: Path = typer.Option(None, "--workspace", "-w", help="Workspace root"),
) -> None:
    """Start the HTTP API."""
    try:
        import uvicorn
    except ImportError as exc:  # pragma: no cover - defensive
        raise typer.BadParameter(
            "uvicorn is not installed. Install the web extras with \"python -m pip install '.[web]'\""
        ) from exc

    if workspace is not None:
        os.environ[WORKSPACE_ENV] = str(workspace.expanduser().resolve())

    config = AppConfig()
    console.print(
        f"Starting web interface on http://{host}:{port} "
        f"(workspace: {config.resolve_workspace(Path.cwd())})"
    )
    uvicorn.run(
        web_app,
        host=host,
        port=port,
        reload=False,
        log_level="info",
    )
