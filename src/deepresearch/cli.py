"""
deepresearch CLI - Command-line interface for deep research runs.

Commands:
- init: Write a deepresearch.toml configuration template
- run: Research a query and print or save the report
- plan: Generate and show the research plan only
"""

import asyncio
import signal
from enum import Enum
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.progress import BarColumn, Progress, SpinnerColumn, TaskProgressColumn, TextColumn
from rich.table import Table

from .config import (
    DEFAULT_CONFIG_NAME,
    DeepResearchConfig,
    create_default_config,
    load_config_or_default,
)
from .orchestrator import (
    Orchestrator,
    PlanGenerator,
    ResearchDepth,
    ResearchError,
    ResearchProgress,
    ResearchResult,
)
from .utils.logging import setup_logging


class OutputFormat(str, Enum):
    """Report output formats."""

    MARKDOWN = "markdown"
    JSON = "json"


app = typer.Typer(
    name="deepresearch",
    help="Multi-stage deep research: plan, search, analyze, compile",
    no_args_is_help=True,
    add_completion=False,
)

console = Console()
# Progress and log lines go to stderr so stdout carries only the report
status_console = Console(stderr=True)


def _load(config_path: Path, verbose: bool) -> DeepResearchConfig:
    config = load_config_or_default(config_path)
    setup_logging(
        level="DEBUG" if verbose else config.logging.level,
        log_file=config.logging.file,
        console=status_console,
    )
    return config


@app.command()
def init(
    path: Path = typer.Option(Path.cwd(), "--path", "-p", help="Project directory"),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite existing config"),
) -> None:
    """
    Write a deepresearch.toml configuration template.

    Example:
        deepresearch init
        deepresearch init --path ./research
    """
    path.mkdir(parents=True, exist_ok=True)
    config_path = path / DEFAULT_CONFIG_NAME

    if config_path.exists() and not force:
        console.print(
            f"[yellow]Warning:[/yellow] {config_path} already exists. Use --force to overwrite."
        )
        raise typer.Exit(1)

    create_default_config(config_path)

    console.print(Panel.fit(
        f"[green]✓[/green] Wrote {config_path}\n\n"
        "[dim]Next steps:[/dim]\n"
        "1. Set API keys in environment (ANTHROPIC_API_KEY, TAVILY_API_KEY, etc.)\n"
        "2. Run research: deepresearch run \"your question\"",
        title="Configuration Created",
        border_style="green",
    ))


@app.command()
def run(
    query: str = typer.Argument(..., help="Research query"),
    config: Path = typer.Option(Path(DEFAULT_CONFIG_NAME), "--config", "-c", help="Config file path"),
    depth: Optional[ResearchDepth] = typer.Option(None, "--depth", "-d", help="Research depth"),
    max_sources: Optional[int] = typer.Option(None, "--max-sources", "-s", min=0, help="Sources to keep"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write the report to a file"),
    output_format: OutputFormat = typer.Option(OutputFormat.MARKDOWN, "--format", "-f", help="Output format"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """
    Research a query and produce a structured report.

    Press Ctrl-C to cancel; the run stops after the current model or search call.

    Example:
        deepresearch run "State of solid-state batteries"
        deepresearch run "EU AI Act impact" --depth comprehensive -o report.md
    """
    try:
        settings = _load(config, verbose)
        result = asyncio.run(_run_research(settings, query, depth, max_sources))
    except ResearchError as e:
        if e.is_cancellation:
            console.print("[dim]Research cancelled.[/dim]")
        else:
            console.print(f"[red]Research failed:[/red] {e}")
        raise typer.Exit(1)
    except (ValueError, FileNotFoundError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    _emit_result(result, output, output_format)


async def _run_research(
    config: DeepResearchConfig,
    query: str,
    depth: Optional[ResearchDepth],
    max_sources: Optional[int],
) -> ResearchResult:
    """Run one research pass with a live progress bar."""
    from .providers.factory import create_completion, create_search

    completion = create_completion(config)
    search = create_search(config)
    options = config.research.to_options(depth=depth, max_sources=max_sources)

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
        TextColumn("[dim]{task.fields[sources]} sources[/dim]"),
        console=status_console,
        transient=True,
    ) as progress:
        task = progress.add_task("Starting research", total=100, sources=0)

        def on_progress(snapshot: ResearchProgress) -> None:
            progress.update(
                task,
                completed=snapshot.percent,
                description=snapshot.current_step[:70] or snapshot.status.value,
                sources=snapshot.source_count,
            )

        orchestrator = Orchestrator(
            completion,
            search,
            on_progress=on_progress,
            progress_interval=config.research.progress_interval_ms / 1000,
        )
        research_run = orchestrator.start(query, options)

        loop = asyncio.get_running_loop()
        try:
            loop.add_signal_handler(signal.SIGINT, research_run.cancel, "Cancelled by user")
        except (NotImplementedError, RuntimeError):
            pass  # Signal handlers unsupported on this platform

        try:
            return await research_run
        finally:
            try:
                loop.remove_signal_handler(signal.SIGINT)
            except (NotImplementedError, RuntimeError):
                pass


def _emit_result(result: ResearchResult, output: Optional[Path], output_format: OutputFormat) -> None:
    from .export import export_to_json, export_to_markdown

    if output_format is OutputFormat.JSON:
        text = export_to_json(result, output)
    else:
        text = export_to_markdown(result, output)

    if output:
        console.print(
            f"[green]✓[/green] Report written to {output} "
            f"({len(result.sources)} sources, {len(result.notes)} areas)"
        )
    elif output_format is OutputFormat.JSON:
        console.print_json(text)
    else:
        console.print(Markdown(result.report))
        if result.sources:
            console.print("\n[bold]Sources[/bold]")
            for i, source in enumerate(result.sources, 1):
                console.print(f"{i}. {source.title or 'Untitled Source'} [dim]{source.url}[/dim]")


@app.command()
def plan(
    query: str = typer.Argument(..., help="Research query"),
    config: Path = typer.Option(Path(DEFAULT_CONFIG_NAME), "--config", "-c", help="Config file path"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """
    Generate the research plan for a query without running it.

    Example:
        deepresearch plan "History of the transistor"
    """
    try:
        settings = _load(config, verbose)
        result = asyncio.run(_generate_plan(settings, query))
    except (ResearchError, ValueError, FileNotFoundError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    table = Table(title=f"Research Plan ({result.origin.value})")
    table.add_column("#", style="dim", width=3)
    table.add_column("Area", style="bold")
    table.add_column("Questions")

    for i, area in enumerate(result.plan.areas, 1):
        table.add_row(str(i), area.name, "\n".join(f"• {q}" for q in area.questions))

    console.print(table)


async def _generate_plan(config: DeepResearchConfig, query: str):
    from .providers.factory import create_completion

    return await PlanGenerator(create_completion(config)).generate_with_origin(query)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
