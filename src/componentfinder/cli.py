"""Command line interface for ComponentFinder."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from componentfinder.config import AppConfig
from componentfinder.engine import QueryEngine, QueryError
from componentfinder.errors import CorpusUnavailable
from componentfinder.watcher import CorpusWatcher

EXIT_OK = 0
EXIT_NOT_FOUND = 1
EXIT_CORPUS_UNAVAILABLE = 2
EXIT_BAD_QUERY = 3

ERROR_EXIT_CODES = {
    "unknown_framework": EXIT_NOT_FOUND,
    "not_found": EXIT_NOT_FOUND,
    "malformed_path": EXIT_BAD_QUERY,
    "empty_query": EXIT_BAD_QUERY,
    "cancelled": EXIT_BAD_QUERY,
    "catalog_not_ready": EXIT_CORPUS_UNAVAILABLE,
    "corpus_unavailable": EXIT_CORPUS_UNAVAILABLE,
}

console = Console()
app = typer.Typer(help="ComponentFinder - lookup and search for frontend component snippets")

CorpusOption = typer.Option(None, "--corpus", "-c", help="Corpus root directory")
VerboseOption = typer.Option(False, "--verbose", "-v", help="Verbose logging")


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s")


def _build_config(corpus: Path | None, page_size: int | None = None) -> AppConfig:
    defaults = AppConfig()
    return AppConfig(
        corpus_root=corpus if corpus is not None else defaults.corpus_root,
        page_size=page_size if page_size is not None else defaults.page_size,
    )


def _load_engine(corpus: Path | None, page_size: int | None = None) -> QueryEngine:
    config = _build_config(corpus, page_size)
    engine = QueryEngine(config.resolve_corpus_root(Path.cwd()), page_size=config.page_size)
    try:
        engine.load()
    except CorpusUnavailable as exc:
        console.print(f"[red]{escape(str(exc))}[/red]")
        raise typer.Exit(code=EXIT_CORPUS_UNAVAILABLE) from exc
    return engine


def _start_watcher(engine: QueryEngine, watch: bool) -> CorpusWatcher | None:
    """Start a watcher when --watch or COMPONENTFINDER_WATCH asks for one."""
    config = AppConfig(watch=watch or None)
    if not config.watch:
        return None
    watcher = CorpusWatcher(engine, interval=config.watch_interval)
    watcher.start()
    return watcher


def _fail(error: QueryError) -> None:
    console.print(f"[red]{escape(error.message)}[/red]")
    if error.suggestions:
        console.print("Did you mean:")
        for suggestion in error.suggestions:
            console.print(f"  - {escape(suggestion)}")
    raise typer.Exit(code=ERROR_EXIT_CODES.get(error.kind, EXIT_NOT_FOUND))


def _print_component(result, raw: bool) -> None:
    if not result.ok:
        _fail(result.error)
    record, info = result.value.record, result.value.info
    if not raw:
        console.print(f"[bold]{escape(record.path)}[/bold]  ({escape(record.source_path)})")
        console.print(f"Framework: {escape(info.display_name)}")
        if info.dependencies:
            console.print(f"Dependencies: {escape(info.dependencies)}")
        console.print()
    # Content may contain rich markup characters, so bypass the console.
    typer.echo(record.content, nl=not record.content.endswith("\n"))


@app.command()
def frameworks(
    corpus: Optional[Path] = CorpusOption,
    verbose: bool = VerboseOption,
) -> None:
    """List frameworks and their component counts."""
    _setup_logging(verbose)
    engine = _load_engine(corpus)
    result = engine.list_frameworks()
    if not result.ok:
        _fail(result.error)
    if not result.value:
        console.print("[yellow]No frameworks found.[/yellow]")
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Framework")
    table.add_column("Name")
    table.add_column("Components", justify="right")
    table.add_column("Categories")
    for summary in result.value:
        table.add_row(
            summary.name,
            summary.display_name,
            str(summary.count),
            ", ".join(summary.categories),
        )
    console.print(table)


@app.command("list")
def list_components(
    framework: str = typer.Argument(..., help="Framework ID"),
    category: Optional[str] = typer.Option(None, "--category", help="Only this category"),
    corpus: Optional[Path] = CorpusOption,
    verbose: bool = VerboseOption,
) -> None:
    """List component types and variants in a framework."""
    _setup_logging(verbose)
    engine = _load_engine(corpus)
    result = engine.list_components(framework, category)
    if not result.ok:
        _fail(result.error)
    if not result.value:
        console.print("[yellow]No components found.[/yellow]")
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Category")
    table.add_column("Type")
    table.add_column("Variant")
    table.add_column("Path")
    for descriptor in result.value:
        table.add_row(
            descriptor.category,
            descriptor.component_type,
            descriptor.variant,
            descriptor.path,
        )
    console.print(table)


@app.command()
def get(
    framework: str = typer.Argument(..., help="Framework ID"),
    category: str = typer.Argument(..., help="Category"),
    component_type: str = typer.Argument(..., help="Component type"),
    variant: str = typer.Argument(..., help="Variant"),
    raw: bool = typer.Option(False, "--raw", help="Print only the component source"),
    corpus: Optional[Path] = CorpusOption,
    verbose: bool = VerboseOption,
) -> None:
    """Print one component variant."""
    _setup_logging(verbose)
    engine = _load_engine(corpus)
    _print_component(engine.get_component_detail(framework, category, component_type, variant), raw)


@app.command()
def show(
    path: str = typer.Argument(..., help="Component path, e.g. hyperui/application/badges/1"),
    raw: bool = typer.Option(False, "--raw", help="Print only the component source"),
    corpus: Optional[Path] = CorpusOption,
    verbose: bool = VerboseOption,
) -> None:
    """Print a component by its path."""
    _setup_logging(verbose)
    engine = _load_engine(corpus)
    _print_component(engine.get_component_detail_by_path(path), raw)


@app.command()
def search(
    query: str = typer.Argument(..., help="Keywords, all of which must match"),
    framework: Optional[str] = typer.Option(None, "--framework", "-f", help="Limit to one framework"),
    limit: Optional[int] = typer.Option(None, "--limit", help="Maximum number of results"),
    timeout: Optional[float] = typer.Option(None, "--timeout", help="Give up after this many seconds"),
    corpus: Optional[Path] = CorpusOption,
    verbose: bool = VerboseOption,
) -> None:
    """Search components by keyword."""
    _setup_logging(verbose)
    engine = _load_engine(corpus, page_size=limit)
    result = engine.search_components(query, framework, timeout=timeout)
    if not result.ok:
        _fail(result.error)
    if not result.value:
        console.print("[yellow]No matches found.[/yellow]")
        return

    console.print(f"{len(result.value)} match(es)")
    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Score", justify="right")
    table.add_column("Path", no_wrap=True)
    for hit in result.value:
        table.add_row(str(hit.score), hit.path)
    console.print(table)


@app.command()
def status(
    corpus: Optional[Path] = CorpusOption,
    verbose: bool = VerboseOption,
) -> None:
    """Load the corpus and report counts and skipped files."""
    _setup_logging(verbose)
    engine = _load_engine(corpus)
    info = engine.status()
    console.print(f"Corpus: [bold]{escape(str(info.corpus_root))}[/bold]")
    console.print(f"Components: {info.record_count} in {info.framework_count} frameworks")
    if not info.warnings:
        console.print("[green]No load warnings.[/green]")
        return
    console.print(f"[yellow]{len(info.warnings)} file(s) skipped:[/yellow]")
    for warning in info.warnings:
        console.print(f"  - {escape(warning.source_path)}: {escape(warning.reason)}")


@app.command()
def serve(
    corpus: Optional[Path] = CorpusOption,
    watch: bool = typer.Option(False, "--watch", help="Reload when corpus files change"),
    verbose: bool = VerboseOption,
) -> None:
    """Run the MCP tool server over stdio."""
    from componentfinder.mcp_server import serve as serve_stdio

    _setup_logging(verbose)
    engine = _load_engine(corpus)
    watcher = _start_watcher(engine, watch)
    try:
        serve_stdio(engine)
    finally:
        if watcher is not None:
            watcher.stop(timeout=5)


@app.command()
def web(
    host: str = typer.Option("127.0.0.1", help="Host interface"),
    port: int = typer.Option(8000, help="Server port"),
    corpus: Optional[Path] = CorpusOption,
    watch: bool = typer.Option(False, "--watch", help="Reload when corpus files change"),
) -> None:
    """Start the HTTP API."""
    try:
        import uvicorn
    except ImportError as exc:  # pragma: no cover
        raise typer.BadParameter(
            "uvicorn is not installed. Install the web extras with \"python -m pip install '.[web]'\""
        ) from exc

    from componentfinder.web.app import app as web_app, configure_engine

    engine = _load_engine(corpus)
    watcher = _start_watcher(engine, watch)
    configure_engine(engine, watcher)

    console.print(
        f"Starting web interface on http://{host}:{port} "
        f"(corpus: {escape(str(engine.corpus_root))}, {engine.status().record_count} components)"
    )
    try:
        uvicorn.run(
            web_app,
            host=host,
            port=port,
            reload=False,
            log_level="info",
        )
    finally:
        if watcher is not None:
            watcher.stop(timeout=5)
