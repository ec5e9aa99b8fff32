"""
CLI for diskache.

Commands:
    diskache set KEY VALUE [--ttl MS] - Store a value
    diskache get KEY - Print a value (exit code 1 if missing or expired)
    diskache delete KEY - Delete a value
    diskache expired KEY - Show whether a key has expired
    diskache clean - Remove every entry
    diskache stats - Show cache statistics
    diskache config - Show current configuration
    diskache version - Print version
"""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Annotated, Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from diskache import __version__
from diskache.cache import Diskache
from diskache.config import Settings, clear_settings_cache, get_settings
from diskache.exceptions import ConfigurationError, DiskacheError
from diskache.locator import EXPIRATION_TABLE_FILENAME
from diskache.logging import log_context, setup_logging
from diskache.types import NEVER_EXPIRES

app = typer.Typer(
    name="diskache",
    help="Diskache - persistent file-per-entry key-value cache",
    no_args_is_help=True,
)

console = Console()
error_console = Console(stderr=True)

DirectoryOption = Annotated[
    Optional[Path],
    typer.Option("--dir", "-d", help="Cache directory (overrides DISKACHE_CACHE_DIR)"),
]


def _get_settings_safe() -> Settings | None:
    """Get settings, returning None if configuration is invalid."""
    try:
        clear_settings_cache()
        return get_settings()
    except ValidationError:
        return None


def _load_settings() -> Settings:
    settings = _get_settings_safe()
    if settings is None:
        error_console.print(
            "[red]Error:[/red] Configuration is invalid. "
            "Run 'diskache config' to see what's wrong."
        )
        raise typer.Exit(1)
    setup_logging(log_level=settings.LOG_LEVEL, log_file=settings.LOG_FILE)
    return settings


def _open_cache(settings: Settings, directory: Path | None) -> Diskache:
    try:
        return Diskache(directory if directory is not None else settings.CACHE_DIR)
    except DiskacheError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


@app.command("set")
def set_value(
    key: Annotated[str, typer.Argument(help="Cache key")],
    value: Annotated[str, typer.Argument(help="Value to store (UTF-8)")],
    ttl: Annotated[
        Optional[int],
        typer.Option("--ttl", "-t", min=0, help="Time-to-live in milliseconds"),
    ] = None,
    directory: DirectoryOption = None,
) -> None:
    """Store a value under KEY."""
    settings = _load_settings()
    cache = _open_cache(settings, directory)
    effective_ttl = ttl if ttl is not None else settings.DEFAULT_TTL_MS

    with log_context(cache_dir=str(cache.directory), operation="set"):
        try:
            if effective_ttl is None:
                cache.set(key, value.encode("utf-8"))
            else:
                cache.set_expired(key, value.encode("utf-8"), effective_ttl)
        except (OSError, DiskacheError) as e:
            error_console.print(f"[red]Error:[/red] {e}")
            raise typer.Exit(1)

    if effective_ttl is None:
        console.print(f"[green]Stored[/green] {key}")
    else:
        console.print(f"[green]Stored[/green] {key} [dim](ttl {effective_ttl} ms)[/dim]")


@app.command("get")
def get_value(
    key: Annotated[str, typer.Argument(help="Cache key")],
    directory: DirectoryOption = None,
) -> None:
    """Print the value stored under KEY."""
    settings = _load_settings()
    cache = _open_cache(settings, directory)

    with log_context(cache_dir=str(cache.directory), operation="get"):
        data = cache.get(key)

    if data is None:
        error_console.print(f"[yellow]Not found:[/yellow] {key}")
        raise typer.Exit(1)
    console.print(data.decode("utf-8", errors="replace"), markup=False, highlight=False)


@app.command()
def delete(
    key: Annotated[str, typer.Argument(help="Cache key")],
    directory: DirectoryOption = None,
) -> None:
    """Delete the value stored under KEY."""
    settings = _load_settings()
    cache = _open_cache(settings, directory)

    with log_context(cache_dir=str(cache.directory), operation="delete"):
        ok = cache.delete(key)

    if not ok:
        error_console.print(f"[red]Error:[/red] could not delete {key}")
        raise typer.Exit(1)
    console.print(f"[green]Deleted[/green] {key}")


@app.command()
def expired(
    key: Annotated[str, typer.Argument(help="Cache key")],
    directory: DirectoryOption = None,
) -> None:
    """Show whether KEY has expired and when it expires."""
    settings = _load_settings()
    cache = _open_cache(settings, directory)

    with log_context(cache_dir=str(cache.directory), operation="expired"):
        try:
            is_expired = cache.is_expired(key)
            expires_at = cache.get_expired_time(key)
        except DiskacheError as e:
            error_console.print(f"[red]Error:[/red] {e}")
            raise typer.Exit(1)

    if expires_at is None or expires_at == NEVER_EXPIRES:
        when = "never"
    else:
        when = datetime.fromtimestamp(expires_at / 1000, tz=timezone.utc).isoformat()

    console.print(f"[bold]Expired:[/bold] {str(is_expired).lower()}")
    console.print(f"[bold]Expires at:[/bold] {when}")


@app.command()
def clean(
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Do not ask for confirmation"),
    ] = False,
    directory: DirectoryOption = None,
) -> None:
    """Remove every entry from the cache."""
    settings = _load_settings()
    cache = _open_cache(settings, directory)

    if not yes:
        typer.confirm(f"Remove everything under {cache.directory}?", abort=True)

    with log_context(cache_dir=str(cache.directory), operation="clean"):
        try:
            cache.clean()
        except (OSError, DiskacheError) as e:
            error_console.print(f"[red]Error:[/red] {e}")
            raise typer.Exit(1)

    console.print(f"[green]Cleaned[/green] {cache.directory}")


@app.command()
def stats(directory: DirectoryOption = None) -> None:
    """Show cache statistics."""
    settings = _load_settings()
    cache = _open_cache(settings, directory)
    snapshot = cache.stats()
    entries = sum(
        1
        for p in cache.directory.iterdir()
        if p.is_file() and p.name != EXPIRATION_TABLE_FILENAME
    )

    table = Table(title="Cache", show_header=True)
    table.add_column("Stat", style="cyan", no_wrap=True)
    table.add_column("Value", style="green", overflow="fold")
    table.add_row("directory", str(snapshot.directory))
    table.add_row("items (this process)", str(snapshot.items))
    table.add_row("files on disk", str(entries))
    table.add_row("expiration entries", str(len(cache.expirations.snapshot())))
    console.print(table)


@app.command()
def config() -> None:
    """Show current configuration."""
    console.print()
    console.print("[bold]Diskache Configuration[/bold]")
    console.print()

    try:
        clear_settings_cache()
        settings = get_settings()
    except ValidationError as e:
        error = ConfigurationError(
            "Configuration is invalid",
            context={"errors": [err["loc"][0] for err in e.errors() if err["loc"]]},
        )
        error_console.print(f"[red]{error}[/red]")
        error_console.print()
        error_console.print("Check the DISKACHE_* environment variables or your .env file.")
        raise typer.Exit(1)

    table = Table(title="Settings", show_header=True)
    table.add_column("Setting", style="cyan", no_wrap=True)
    table.add_column("Value", style="green", overflow="fold")

    for key, value in settings.display().items():
        display_value = str(value) if value is not None else "[dim]not set[/dim]"
        table.add_row(key, display_value)

    console.print(table)
    console.print()


@app.command()
def version() -> None:
    """Print the version number."""
    console.print(f"diskache version {__version__}")


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
