"""Main CLI entry point using Typer."""

import re
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from archmerge import __version__
from archmerge.core.config import get_settings
from archmerge.core.logging_setup import configure_logging
from archmerge.merge.engine import MergeEngine
from archmerge.merge.errors import InvalidSourceError, MergeFailed
from archmerge.merge.strategies import Strategy, discard

app = typer.Typer(
    name="archmerge",
    help="archmerge - merge directories and archives into one output tree",
    add_completion=False,
    rich_markup_mode="rich",
)

console = Console()


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold blue]archmerge[/bold blue] version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
) -> None:
    """
    archmerge - combine build outputs from several artifacts.

    Conflicting paths are resolved by discard rules or rejected when
    their contents differ.
    """
    pass


def build_strategies(patterns: list[str], literals: list[str]) -> list[Strategy]:
    """Discard strategies for literal paths first, then patterns."""
    strategies = [discard(literal) for literal in literals]
    for pattern in patterns:
        try:
            strategies.append(discard(re.compile(pattern)))
        except re.error as e:
            raise typer.BadParameter(f"Invalid pattern {pattern!r}: {e}") from e
    return strategies


@app.command()
def merge(
    sources: list[Path] = typer.Argument(..., help="Source directories or archives"),
    target: Path = typer.Option(
        ...,
        "--target",
        "-t",
        help="Output directory",
    ),
    discard_patterns: list[str] = typer.Option(
        [],
        "--discard",
        "-x",
        help="Regular expression of paths to discard (repeatable)",
    ),
    discard_paths: list[str] = typer.Option(
        [],
        "--discard-path",
        help="Exact normalized path to discard (repeatable)",
    ),
    workers: int | None = typer.Option(
        None,
        "--workers",
        "-w",
        min=1,
        max=64,
        help="Threads resolving groups",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        "-d",
        help="Enable debug mode",
    ),
) -> None:
    """
    Merge sources into a target directory.

    Example:
        archmerge merge lib/a.jar lib/b.jar classes/ -t out/ -x "META-INF/.*\\.SF$"
    """
    settings = get_settings()
    if debug:
        settings = settings.model_copy(update={"archmerge_debug": True})
    configure_logging(settings)

    engine = MergeEngine(
        strategies=build_strategies(discard_patterns, discard_paths),
        settings=settings,
        max_workers=workers,
    )

    try:
        result = engine.merge(sources, target)
    except InvalidSourceError as e:
        console.print(f"[bold red]{e}[/bold red]")
        raise typer.Exit(code=2) from e
    except MergeFailed as e:
        console.print(f"\n[bold red]Merge failed with {len(e.failures)} conflicts:[/bold red]")
        for failure in e.failures:
            console.print(f"  [red]{failure.path}[/red] ({failure.strategy}): {failure.error}")
        console.print("[dim]Use --discard or --discard-path to resolve conflicts.[/dim]")
        raise typer.Exit(code=1) from e

    table = Table(title=f"Merged into {result.target}")
    table.add_column("Strategy", style="cyan")
    table.add_column("Paths", justify="right")

    for name, count in sorted(result.strategy_counts().items()):
        table.add_row(name, str(count))

    console.print(table)
    console.print(f"[bold green]{result.entry_count} entries merged successfully[/bold green]")


@app.command()
def plan(
    sources: list[Path] = typer.Argument(..., help="Source directories or archives"),
    discard_patterns: list[str] = typer.Option(
        [],
        "--discard",
        "-x",
        help="Regular expression of paths to discard (repeatable)",
    ),
    discard_paths: list[str] = typer.Option(
        [],
        "--discard-path",
        help="Exact normalized path to discard (repeatable)",
    ),
    duplicates_only: bool = typer.Option(
        False,
        "--duplicates",
        help="Only show paths present in more than one source",
    ),
) -> None:
    """
    Show how each path would be resolved without writing anything.
    """
    configure_logging(get_settings())
    engine = MergeEngine(strategies=build_strategies(discard_patterns, discard_paths))

    try:
        plans = engine.plan(sources)
    except InvalidSourceError as e:
        console.print(f"[bold red]{e}[/bold red]")
        raise typer.Exit(code=2) from e

    table = Table(title="Merge Plan")
    table.add_column("Path", style="bold")
    table.add_column("Strategy", style="cyan")
    table.add_column("Entries", justify="right")
    table.add_column("Status")

    conflicts = 0
    for group in plans:
        if duplicates_only and group.entry_count < 2:
            continue
        status = "[red]conflict[/red]" if group.conflicting else "[green]ok[/green]"
        conflicts += group.conflicting
        table.add_row(group.path, group.strategy, str(group.entry_count), status)

    console.print(table)
    if conflicts:
        console.print(f"[bold yellow]{conflicts} conflicting paths[/bold yellow]")
    else:
        console.print("[green]No conflicts[/green]")


if __name__ == "__main__":
    app()
