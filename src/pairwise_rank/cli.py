"""CLI for Pairwise Rank."""

from __future__ import annotations

import logging
import random
from pathlib import Path
from typing import Annotated

import pydantic
import structlog
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel

from pairwise_rank import __version__
from pairwise_rank.core.config import AppConfig, load_config
from pairwise_rank.core.errors import ConfigurationError
from pairwise_rank.services.reporting import grade_distribution, render_leaderboard
from pairwise_rank.services.session import SessionController, StepResult
from pairwise_rank.services.storage import SnapshotStore

# Configure structlog
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.dev.ConsoleRenderer(),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

app = typer.Typer(
    name="pairwise-rank",
    help="Pairwise Rank - rank items by choosing the better of two",
    add_completion=False,
)
console = Console()

CHOICES_HELP = escape("[1] first  [2] second  [s] skip  [u] undo  [g] grades  [q] quit")

ConfigOption = Annotated[
    Path | None, typer.Option("--config", "-c", help="Path to config YAML file")
]
SnapshotArgument = Annotated[
    Path | None,
    typer.Argument(help="Snapshot JSON file (default: snapshot_path from config)"),
]
VerboseOption = Annotated[bool, typer.Option("--verbose", "-V", help="Verbose output")]


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"pairwise-rank v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option("--version", "-v", callback=version_callback, is_eager=True),
    ] = None,
) -> None:
    """Pairwise Rank CLI."""


def _setup_logging(verbose: bool) -> None:
    log_level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=log_level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
    )


def _load_app_config(config_path: Path | None) -> AppConfig:
    if config_path is None:
        return AppConfig()
    return load_config(config_path)


def _read_items_file(path: Path) -> list[str]:
    """Read item IDs, one per line; blank lines and '#' comments are ignored."""
    lines = path.read_text(encoding="utf-8").splitlines()
    return [line.strip() for line in lines if line.strip() and not line.strip().startswith("#")]


def _open_session(
    config: AppConfig,
    snapshot_path: Path | None,
    seed: int | None = None,
    autosave: bool = False,
) -> tuple[SessionController, SnapshotStore]:
    store = SnapshotStore(snapshot_path or Path(config.snapshot_path))
    rng_seed = seed if seed is not None else config.seed
    session = SessionController.from_snapshot(
        store.load(),
        config=config.ranking,
        rng=random.Random(rng_seed),  # noqa: S311
        on_change=store.save if autosave else None,
    )
    return session, store


def _report_error(result: StepResult) -> None:
    if result.error is None:
        return
    colour = "red" if result.error.is_fault else "yellow"
    console.print(f"[{colour}]{escape(result.error.message)}[/{colour}]")


def _print_leaderboard(session: SessionController, title: str | None = None) -> None:
    console.print(render_leaderboard(session.leaderboard(), title=title), markup=False)


def _handle_errors(e: Exception, verbose: bool = False) -> None:
    if isinstance(e, FileNotFoundError):
        console.print(f"[red]Error:[/red] {e}")
    elif isinstance(e, ConfigurationError):
        console.print(f"[red]{e}")
    elif isinstance(e, pydantic.ValidationError):
        console.print(f"[red]Invalid snapshot:[/red] {e}")
    else:
        console.print(f"[red]Unexpected error:[/red] {e}")
        if verbose:
            console.print_exception()
    raise typer.Exit(1) from e


@app.command()
def rank(
    snapshot_path: SnapshotArgument = None,
    config_path: ConfigOption = None,
    item: Annotated[
        list[str] | None, typer.Option("--item", "-i", help="Item ID to include (repeatable)")
    ] = None,
    items_file: Annotated[
        Path | None, typer.Option("--items-file", help="File with one item ID per line")
    ] = None,
    seed: Annotated[int | None, typer.Option("--seed", help="Random seed for pairing")] = None,
    verbose: VerboseOption = False,
) -> None:
    """Compare items interactively, saving the snapshot after every step.

    Args:
        snapshot_path: Snapshot JSON file to load and update.
        config_path: Optional YAML configuration.
        item: Item IDs to register before starting.
        items_file: File with item IDs to register.
        seed: Random seed for pair selection.
        verbose: Enable verbose logging.
    """
    _setup_logging(verbose)

    try:
        config = _load_app_config(config_path)
        session, store = _open_session(config, snapshot_path, seed=seed, autosave=True)

        item_ids = list(config.items) + list(item or [])
        if items_file is not None:
            item_ids.extend(_read_items_file(items_file))
        added = session.add_items(item_ids)
        if added:
            console.print(f"Registered {len(added)} new item(s)")

        if len(session.store) < 2:
            console.print("[yellow]At least two items are needed to compare.[/yellow]")
            raise typer.Exit(1)

        console.print(f"[bold]Snapshot:[/bold] {store.path}")
        console.print(f"  Items: {len(session.store)}  Decisions so far: {len(session.history)}")
        console.print(CHOICES_HELP)

        result = session.start()
        while True:
            _report_error(result)
            if result.exhausted:
                waiting = session.eligible_items()
                if waiting:
                    console.print(
                        f"[yellow]No more pairs: {escape(', '.join(waiting))} has no partner "
                        f"within {session.config.count_tolerance} comparison(s).[/yellow] "
                        "Add items or raise count_tolerance to continue."
                    )
                else:
                    console.print("[bold green]Ranking complete![/bold green]")
                break

            first, second = result.pair
            console.print(Panel(escape(f"[1] {first}\n[2] {second}"), title="Which is better?"))
            choice = typer.prompt("Choice").strip().lower()

            if choice == "1":
                result = session.decide(first)
            elif choice == "2":
                result = session.decide(second)
            elif choice == "s":
                result = session.skip()
            elif choice == "u":
                result = session.undo()
                if result.outcome is not None:
                    console.print(
                        escape(f"Undid: {result.outcome.winner} over {result.outcome.loser}")
                    )
            elif choice == "g":
                session.grade_all()
                _print_leaderboard(session)
                result = session.start()
            elif choice == "q":
                break
            else:
                console.print(
                    f"[yellow]Unknown choice {escape(repr(choice))}.[/yellow] {CHOICES_HELP}"
                )
                result = session.start()

        console.print(f"\nDecisions recorded: {len(session.history)}")
        console.print(f"Results saved to: {store.path}")

    except typer.Exit:
        raise
    except Exception as e:
        _handle_errors(e, verbose)


@app.command()
def grades(
    snapshot_path: SnapshotArgument = None,
    config_path: ConfigOption = None,
    save: Annotated[bool, typer.Option("--save", help="Write grades to the snapshot")] = False,
    verbose: VerboseOption = False,
) -> None:
    """Assign percentile grades and print the leaderboard.

    Args:
        snapshot_path: Snapshot JSON file.
        config_path: Optional YAML configuration.
        save: Persist assigned grades.
        verbose: Enable verbose logging.
    """
    _setup_logging(verbose)

    try:
        config = _load_app_config(config_path)
        session, store = _open_session(config, snapshot_path)
        if len(session.store) == 0:
            console.print("[yellow]No items in snapshot.[/yellow]")
            raise typer.Exit(1)

        session.grade_all()
        _print_leaderboard(session)

        console.print("")
        for label, count in grade_distribution(session.leaderboard(), session.grader.labels):
            console.print(f"  {label}: {count}")

        if save:
            store.save(session.snapshot())
            console.print(f"Grades saved to: {store.path}")

    except typer.Exit:
        raise
    except Exception as e:
        _handle_errors(e, verbose)


@app.command()
def leaderboard(
    snapshot_path: SnapshotArgument = None,
    config_path: ConfigOption = None,
) -> None:
    """Print the current leaderboard without regrading.

    Args:
        snapshot_path: Snapshot JSON file.
        config_path: Optional YAML configuration.
    """
    try:
        config = _load_app_config(config_path)
        session, _ = _open_session(config, snapshot_path)
        _print_leaderboard(session)
    except Exception as e:
        _handle_errors(e)


@app.command()
def reset(
    snapshot_path: SnapshotArgument = None,
    config_path: ConfigOption = None,
    yes: Annotated[bool, typer.Option("--yes", "-y", help="Skip confirmation")] = False,
) -> None:
    """Reset all ratings and clear the history.

    Args:
        snapshot_path: Snapshot JSON file.
        config_path: Optional YAML configuration.
        yes: Do not ask for confirmation.
    """
    try:
        config = _load_app_config(config_path)
        session, store = _open_session(config, snapshot_path)
        if not yes and not typer.confirm(
            f"Reset ALL ratings for {len(session.store)} item(s)? This cannot be undone."
        ):
            console.print("Aborted.")
            raise typer.Exit()

        session.reset()
        store.save(session.snapshot())
        console.print(f"[green]Reset {len(session.store)} item(s).[/green]")

    except typer.Exit:
        raise
    except Exception as e:
        _handle_errors(e)


@app.command()
def validate(
    config_path: Annotated[Path, typer.Argument(help="Path to config YAML file")],
) -> None:
    """Validate a configuration file without running.

    Args:
        config_path: Path to YAML configuration file.
    """
    try:
        config = load_config(config_path)
        console.print("[green]Configuration is valid![/green]")
        console.print(f"  Items: {len(config.items)}")
        console.print(f"  K-factor: {config.ranking.k_factor}")
        console.print(f"  Initial rating: {config.ranking.initial_rating}")
        console.print(f"  Count tolerance: {config.ranking.count_tolerance}")
        console.print(f"  Target comparisons: {config.ranking.target_comparisons}")
        console.print(f"  Grades: {', '.join(b.label for b in config.ranking.grades)}")
    except Exception as e:
        _handle_errors(e)


@app.command()
def info() -> None:
    """Show tool information and example commands."""
    console.print("[bold]Pairwise Rank[/bold]")
    console.print(f"Version: {__version__}\n")

    console.print("[bold]Example Commands:[/bold]")
    console.print("  # Start comparing a few items")
    console.print("  pairwise-rank rank ratings.json -i monet -i turner -i hokusai\n")

    console.print("  # Register items from a file, reproducible pairing")
    console.print("  pairwise-rank rank ratings.json --items-file artists.txt --seed 7\n")

    console.print("  # Assign grades and keep them")
    console.print("  pairwise-rank grades ratings.json --save\n")

    console.print("  # Start over")
    console.print("  pairwise-rank reset ratings.json --yes\n")

    console.print("  # Validate config")
    console.print("  pairwise-rank validate config.yaml")


if __name__ == "__main__":
    app()
