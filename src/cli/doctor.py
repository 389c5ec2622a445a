"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from adapters.rick_morty_api import RickMortyClient
from core.config import AppSettings, write_user_env_vars
from core.domain.errors import TransportError
from core.domain.models import FilterState

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


async def _check_api(settings: AppSettings) -> tuple[bool, str]:
    try:
        async with RickMortyClient(settings) as client:
            page = await client.fetch_page(FilterState(), 1)
        return True, f"{page.total_count} characters in {page.total_pages} pages"
    except TransportError as exc:
        return False, str(exc)


def _check_writable(path: Path) -> tuple[bool, str]:
    """Check that the parent directory of *path* exists or can be created."""

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        return False, str(exc)
    return True, str(path)


@app.command()
def run() -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings = AppSettings()

    table = Table(title="morty-catalog Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    table.add_row("API base_url", "OK", settings.api_base_url)
    table.add_row("HTTP timeout", "OK", f"{settings.http_timeout_seconds:g}s")
    table.add_row("Filter debounce", "OK", f"{settings.debounce_ms} ms")

    ok_api, detail_api = asyncio.run(_check_api(settings))
    table.add_row("API connectivity", "OK" if ok_api else "FAIL", detail_api)

    ok_fav, detail_fav = _check_writable(settings.resolved_favorites_path())
    table.add_row("Favorites file", "OK" if ok_fav else "FAIL", detail_fav)

    ok_state, detail_state = _check_writable(settings.resolved_state_path())
    table.add_row("Session state file", "OK" if ok_state else "FAIL", detail_state)

    _console.print(table)

    if not ok_api:
        _console.print(
            "\n[yellow]Note:[/yellow] check your network or point MORTY_CATALOG_API_BASE_URL "
            "to a reachable mirror (`doctor setup-api`)."
        )


@app.command(name="setup-api")
def setup_api() -> None:
    """Interactive API setup (stores config in the user config .env)."""

    defaults = AppSettings()
    base_url = typer.prompt("API base URL", default=defaults.api_base_url, show_default=True).strip()
    timeout = typer.prompt(
        "HTTP timeout (seconds)",
        default=str(defaults.http_timeout_seconds),
        show_default=True,
    ).strip()
    debounce = typer.prompt("Filter debounce (ms)", default=str(defaults.debounce_ms), show_default=True).strip()

    if not base_url:
        raise typer.BadParameter("base_url is required")
    try:
        if float(timeout) <= 0 or int(debounce) < 0:
            raise ValueError
    except ValueError as exc:
        raise typer.BadParameter("timeout must be > 0 and debounce >= 0") from exc

    env_path = write_user_env_vars(
        {
            "MORTY_CATALOG_API_BASE_URL": base_url,
            "MORTY_CATALOG_HTTP_TIMEOUT_SECONDS": timeout,
            "MORTY_CATALOG_DEBOUNCE_MS": debounce,
        }
    )

    _console.print(f"[green]Saved API config to:[/green] {env_path}")
