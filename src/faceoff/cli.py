"""CLI for Faceoff."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Annotated, TypeVar

import pydantic
import structlog
import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.logging import RichHandler

from faceoff import __version__
from faceoff.core.config import AppConfig, load_config
from faceoff.core.errors import ConfigurationError, FaceoffError
from faceoff.engine import FaceoffEngine
from faceoff.models import Category
from faceoff.services.reporting import render_profiles, render_stats

T = TypeVar("T")

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
    name="faceoff",
    help="Faceoff - vote between two profiles and rank them by win rate",
    add_completion=False,
)
console = Console()

ConfigOption = Annotated[
    Path | None,
    typer.Option("--config", "-c", help="Path to config YAML file"),
]
VerboseOption = Annotated[bool, typer.Option("--verbose", "-V", help="Verbose output")]


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"faceoff v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option("--version", "-v", callback=version_callback, is_eager=True),
    ] = None,
) -> None:
    """Faceoff CLI."""
    load_dotenv()


def _configure_logging(verbose: bool) -> None:
    log_level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
    )


def _load(config_path: Path | None) -> AppConfig:
    if config_path is None:
        return AppConfig()
    console.print(f"[bold]Loading config:[/bold] {config_path}")
    return load_config(config_path)


def _run_with_engine(
    config_path: Path | None,
    verbose: bool,
    fn: Callable[[FaceoffEngine], Awaitable[T]],
) -> T:
    """Load config, build an engine, run ``fn`` and translate failures to exit codes."""
    _configure_logging(verbose)
    try:
        config = _load(config_path)

        async def _run() -> T:
            engine = FaceoffEngine(config)
            try:
                return await fn(engine)
            finally:
                await engine.close()

        return asyncio.run(_run())

    except FileNotFoundError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from e
    except (ConfigurationError, pydantic.ValidationError) as e:
        console.print(f"[red]{e}")
        raise typer.Exit(1) from e
    except FaceoffError as e:
        console.print(f"[red]Error:[/red] {e.message}")
        raise typer.Exit(1) from e


@app.command()
def serve(
    config_path: ConfigOption = None,
    host: Annotated[str | None, typer.Option("--host", help="Bind address")] = None,
    port: Annotated[int | None, typer.Option("--port", help="Bind port")] = None,
    verbose: VerboseOption = False,
) -> None:
    """Run the HTTP API server."""
    import uvicorn

    from faceoff.api import create_app

    _configure_logging(verbose)
    try:
        config = _load(config_path)
    except FileNotFoundError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from e
    except (ConfigurationError, pydantic.ValidationError) as e:
        console.print(f"[red]{e}")
        raise typer.Exit(1) from e

    host = host or config.server.host
    port = port or config.server.port
    console.print(f"[bold green]Serving on http://{host}:{port}[/bold green]")
    console.print(f"  Database: {config.store.get_database_url()}")
    uvicorn.run(create_app(config), host=host, port=port, log_level="info")


@app.command()
def validate(config_path: Annotated[Path, typer.Argument(help="Path to config YAML file")]) -> None:
    """Validate a configuration file without running."""
    try:
        config = load_config(config_path)
        console.print("[green]Configuration is valid![/green]")
        console.print(f"  Database: {config.store.get_database_url()}")
        console.print(f"  Store timeout: {config.store.timeout_seconds}s")
        console.print(f"  Selection seed: {config.selection.seed}")
        console.print(f"  Report threshold: {config.selection.report_threshold}")
        console.print(f"  Leaderboard limit: {config.ranking.default_limit}")
        console.print(f"  Directory: {config.directory.base_url}")
        console.print(f"  Server: {config.server.host}:{config.server.port}")

    except FileNotFoundError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from e
    except ConfigurationError as e:
        console.print(f"[red]{e}")
        raise typer.Exit(1) from e
    except Exception as e:
        console.print(f"[red]Validation error:[/red] {e}")
        raise typer.Exit(1) from e


@app.command()
def leaderboard(
    config_path: ConfigOption = None,
    limit: Annotated[int | None, typer.Option("--limit", "-n", min=1)] = None,
    category: Annotated[Category | None, typer.Option("--category")] = None,
    race: Annotated[str | None, typer.Option("--race")] = None,
    bloodline: Annotated[str | None, typer.Option("--bloodline")] = None,
    verbose: VerboseOption = False,
) -> None:
    """Print the win-ratio leaderboard."""
    profiles = _run_with_engine(
        config_path,
        verbose,
        lambda engine: engine.standings.top(
            limit, category=category, race=race, bloodline=bloodline
        ),
    )
    console.print(render_profiles(profiles, "Leaderboard"), markup=False)


@app.command()
def shamelist(
    config_path: ConfigOption = None,
    limit: Annotated[int | None, typer.Option("--limit", "-n", min=1)] = None,
    verbose: VerboseOption = False,
) -> None:
    """Print the profiles with the most losses."""
    profiles = _run_with_engine(
        config_path, verbose, lambda engine: engine.standings.shame(limit)
    )
    console.print(render_profiles(profiles, "Hall of Shame"), markup=False)


@app.command()
def stats(config_path: ConfigOption = None, verbose: VerboseOption = False) -> None:
    """Print aggregate statistics."""
    result = _run_with_engine(config_path, verbose, lambda engine: engine.standings.stats())
    console.print(render_stats(result), markup=False)


@app.command()
def add(
    name: Annotated[str, typer.Argument(help="Character name")],
    category: Annotated[Category, typer.Argument(help="Pairing category")],
    config_path: ConfigOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Look up a character in the directory and add it as a profile."""
    profile = _run_with_engine(
        config_path, verbose, lambda engine: engine.ingestion.add_profile(name, category)
    )
    console.print(f"[green]{profile.name} has been added successfully[/green]")
    console.print(f"  Id: {profile.id}  Race: {profile.race}  Bloodline: {profile.bloodline}")


@app.command()
def info() -> None:
    """Show tool information and example commands."""
    console.print("[bold]Faceoff[/bold]")
    console.print(f"Version: {__version__}\n")

    console.print("[bold]Example Commands:[/bold]")
    console.print("  # Serve the API with defaults (SQLite in ./faceoff.db)")
    console.print("  uv run faceoff serve\n")

    console.print("  # Serve with a config file")
    console.print("  uv run faceoff serve --config faceoff.yaml\n")

    console.print("  # Add a profile")
    console.print("  uv run faceoff add 'Some Pilot' female\n")

    console.print("  # Top 10 Caldari")
    console.print("  uv run faceoff leaderboard --race Caldari --limit 10\n")

    console.print("  # Aggregate statistics")
    console.print("  uv run faceoff stats\n")

    console.print("  # Validate config")
    console.print("  uv run faceoff validate faceoff.yaml")


if __name__ == "__main__":
    app()
