"""CLI principal (Typer + Rich).

Comandos:
- `browse`: scroll infinito interactivo sobre el motor de consultas.
- `list` / `export`: carga N páginas y las muestra o exporta (CSV/JSON).
- `show`: detalle de un personaje.
- `favorites`: favoritos locales.
- `doctor`: diagnóstico de entorno.
"""

from __future__ import annotations

import asyncio
import json
import shlex
from enum import Enum
from pathlib import Path

import typer
from pydantic import ValidationError
from rich.console import Console

from adapters.csv_exporter import export_characters_csv
from adapters.error_sink import LoggingErrorSink
from adapters.favorites_store import JsonFavoritesStore
from adapters.json_exporter import export_characters_json
from adapters.rick_morty_api import RickMortyClient
from adapters.scroll_trigger import IntersectionTrigger
from adapters.url_state import QueryStringState, build_query
from cli import doctor
from cli.ui_components import (
    build_character_panel,
    build_characters_table,
    build_status_line,
    print_banner,
)
from core.config import AppSettings
from core.domain.errors import TransportError
from core.domain.models import FilterState
from core.logging_setup import configure_logging
from core.services.query_engine import QueryEngine
from core.services.query_state import QuerySnapshot

app = typer.Typer(no_args_is_help=True, help="Browse the Rick & Morty character catalog.")
favorites_app = typer.Typer(no_args_is_help=True, help="Manage local favorite characters.")
app.add_typer(favorites_app, name="favorites")
app.add_typer(doctor.app, name="doctor")

_console = Console()

# Atajos aceptados en `browse` -> campo de FilterState.
FILTER_ALIASES: dict[str, str] = {
    "name": "name",
    "status": "status",
    "species": "species",
    "gender": "gender",
    "from": "created_start",
    "start": "created_start",
    "created_start": "created_start",
    "createdStart": "created_start",
    "to": "created_end",
    "end": "created_end",
    "created_end": "created_end",
    "createdEnd": "created_end",
}


class ExportFormat(str, Enum):
    CSV = "csv"
    JSON = "json"


def _make_client(settings: AppSettings) -> RickMortyClient:
    return RickMortyClient(settings)


def build_filter(
    *,
    name: str | None = None,
    status: str | None = None,
    species: str | None = None,
    gender: str | None = None,
    created_from: str | None = None,
    created_to: str | None = None,
) -> FilterState:
    try:
        return FilterState(
            name=name,
            status=status,
            species=species,
            gender=gender,
            created_start=created_from,
            created_end=created_to,
        )
    except ValidationError as exc:
        raise typer.BadParameter(str(exc)) from exc


def parse_filter_assignments(text: str) -> dict[str, str | None]:
    """`name="Rick Sanchez" status=` -> `{"name": "Rick Sanchez", "status": None}`.

    Se parte con reglas de shell: los valores con espacios van entre comillas.
    Comillas sin cerrar lanzan `ValueError`.
    """

    changes: dict[str, str | None] = {}
    for token in shlex.split(text):
        if "=" not in token:
            raise ValueError(f"Expected key=value, got {token!r}")
        key, value = token.split("=", 1)
        field_name = FILTER_ALIASES.get(key.strip())
        if field_name is None:
            raise ValueError(f"Unknown filter {key!r} (use: {', '.join(sorted(set(FILTER_ALIASES)))})")
        changes[field_name] = value.strip() or None
    return changes


async def collect_pages(
    *,
    settings: AppSettings,
    filter: FilterState,
    pages: int,
) -> QuerySnapshot:
    """Carga hasta `pages` páginas (0 = todas) a través del motor de consultas."""

    async with _make_client(settings) as client:
        url_state = QueryStringState(build_query(filter, 1))
        async with QueryEngine(
            client,
            url_state=url_state,
            error_sink=LoggingErrorSink(),
            debounce_ms=0,
        ) as engine:
            snapshot = await engine.start()
            while pages <= 0 or snapshot.page < pages:
                if not engine.advance_page():
                    break
                await engine.wait_idle()
                snapshot = engine.current_state()
            return snapshot


def _exit_on_error(snapshot: QuerySnapshot) -> None:
    if snapshot.last_error is None:
        return
    _console.print(f"[red]Error loading characters:[/red] {snapshot.last_error}")
    if not snapshot.items:
        raise typer.Exit(code=1)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    settings = AppSettings()
    configure_logging("DEBUG" if verbose else settings.log_level)


@app.command(name="list")
def list_characters(
    name: str | None = typer.Option(None, "--name", "-n", help="Name substring."),
    status: str | None = typer.Option(None, "--status", "-s", help="Alive, Dead or unknown."),
    species: str | None = typer.Option(None, "--species", help="Species (e.g. Human)."),
    gender: str | None = typer.Option(None, "--gender", "-g", help="Female, Male, Genderless or unknown."),
    created_from: str | None = typer.Option(None, "--created-from", help="YYYY-MM-DD (inclusive)."),
    created_to: str | None = typer.Option(None, "--created-to", help="YYYY-MM-DD (inclusive)."),
    pages: int = typer.Option(1, "--pages", "-p", min=0, help="Pages to load (0 = all)."),
    as_json: bool = typer.Option(False, "--json", help="Print JSON instead of a table."),
) -> None:
    """Load one or more pages and print them."""

    settings = AppSettings()
    filter_ = build_filter(
        name=name,
        status=status,
        species=species,
        gender=gender,
        created_from=created_from,
        created_to=created_to,
    )
    snapshot = asyncio.run(collect_pages(settings=settings, filter=filter_, pages=pages))
    _exit_on_error(snapshot)

    if as_json:
        payload = [c.model_dump(mode="json") for c in snapshot.items]
        typer.echo(json.dumps(payload, ensure_ascii=False, indent=2))
        return

    favorites = set(JsonFavoritesStore(settings.resolved_favorites_path()).ids())
    _console.print(build_characters_table(snapshot.items, favorites=favorites))
    _console.print(build_status_line(snapshot))


@app.command()
def export(
    fmt: ExportFormat = typer.Option(ExportFormat.CSV, "--format", "-f", help="csv or json."),
    output: Path | None = typer.Option(None, "--output", "-o", help="Output file."),
    name: str | None = typer.Option(None, "--name", "-n"),
    status: str | None = typer.Option(None, "--status", "-s"),
    species: str | None = typer.Option(None, "--species"),
    gender: str | None = typer.Option(None, "--gender", "-g"),
    created_from: str | None = typer.Option(None, "--created-from"),
    created_to: str | None = typer.Option(None, "--created-to"),
    pages: int = typer.Option(0, "--pages", "-p", min=0, help="Pages to load (0 = all)."),
) -> None:
    """Export the filtered catalog to CSV or JSON."""

    settings = AppSettings()
    filter_ = build_filter(
        name=name,
        status=status,
        species=species,
        gender=gender,
        created_from=created_from,
        created_to=created_to,
    )
    snapshot = asyncio.run(collect_pages(settings=settings, filter=filter_, pages=pages))
    _exit_on_error(snapshot)

    output = output or settings.export_dir / f"characters.{fmt.value}"
    if fmt is ExportFormat.JSON:
        path = export_characters_json(characters=snapshot.items, output_path=output)
    else:
        path = export_characters_csv(characters=snapshot.items, output_path=output)
    _console.print(f"[green]Exported {len(snapshot.items)} characters to:[/green] {path}")


@app.command()
def show(character_id: int = typer.Argument(..., min=1, help="Character id.")) -> None:
    """Show one character."""

    settings = AppSettings()

    async def _fetch():
        async with _make_client(settings) as client:
            return await client.get_character(character_id)

    try:
        character = asyncio.run(_fetch())
    except TransportError as exc:
        _console.print(f"[red]Error fetching character {character_id}:[/red] {exc}")
        raise typer.Exit(code=1) from exc
    if character is None:
        _console.print(f"[yellow]Character {character_id} not found.[/yellow]")
        raise typer.Exit(code=1)

    store = JsonFavoritesStore(settings.resolved_favorites_path())
    _console.print(build_character_panel(character, favorite=store.is_favorite(character.id)))


@app.command()
def browse(
    query: str | None = typer.Option(
        None,
        "--query",
        "-q",
        help="Initial query string (e.g. 'name=rick&status=alive&page=2'). Defaults to the last session.",
    ),
    no_banner: bool = typer.Option(False, "--no-banner", help="Skip the banner."),
) -> None:
    """Interactive infinite scroll.

    ENTER/m: more • f key=value…: filter • c: clear • r: retry • fav ID • q: quit
    """

    settings = AppSettings()
    if not no_banner:
        print_banner(_console)
    asyncio.run(_browse(settings=settings, query=query))


async def _browse(*, settings: AppSettings, query: str | None) -> None:
    state_path = settings.resolved_state_path()
    if query is None:
        url_state = QueryStringState.from_file(state_path)
    else:
        url_state = QueryStringState(query, state_path=state_path)
    favorites = JsonFavoritesStore(settings.resolved_favorites_path())
    trigger = IntersectionTrigger()

    async with _make_client(settings) as client:
        async with QueryEngine(
            client,
            url_state=url_state,
            error_sink=LoggingErrorSink(),
            scroll_trigger=trigger,
            debounce_ms=settings.debounce_ms,
        ) as engine:
            await engine.start()
            printed = 0
            last_filter: FilterState | None = None

            while True:
                snapshot = engine.current_state()
                fav_ids = set(favorites.ids())
                if snapshot.filter != last_filter or len(snapshot.items) < printed:
                    _console.print(build_characters_table(snapshot.items, favorites=fav_ids))
                elif len(snapshot.items) > printed:
                    _console.print(
                        build_characters_table(
                            snapshot.items[printed:],
                            start=printed,
                            favorites=fav_ids,
                            title=None,
                        )
                    )
                printed = len(snapshot.items)
                last_filter = snapshot.filter
                _console.print(build_status_line(snapshot))

                try:
                    raw = await asyncio.to_thread(_console.input, "[bold cyan]›[/bold cyan] ")
                except (EOFError, KeyboardInterrupt):
                    break

                command, _, rest = raw.strip().partition(" ")
                command = command.lower()
                if command in ("q", "quit", "exit"):
                    break
                if command in ("", "m", "more"):
                    if snapshot.has_more:
                        trigger.pulse()
                    else:
                        _console.print("[dim]No more results.[/dim]")
                elif command in ("f", "filter"):
                    try:
                        changes = parse_filter_assignments(rest)
                        engine.set_filter(**changes)
                    except ValueError as exc:
                        _console.print(f"[yellow]{exc}[/yellow]")
                        continue
                elif command in ("c", "clear"):
                    engine.reset()
                elif command in ("r", "retry"):
                    engine.refresh()
                elif command in ("fav", "favorite"):
                    try:
                        character_id = int(rest.strip())
                    except ValueError:
                        _console.print("[yellow]Usage: fav ID[/yellow]")
                        continue
                    now = favorites.toggle(character_id)
                    _console.print(f"Favorite {character_id}: {'on' if now else 'off'}")
                    continue
                else:
                    _console.print(f"[yellow]Unknown command {command!r}[/yellow]")
                    continue

                await engine.wait_idle()

    _console.print(f"[dim]Session saved:[/dim] ?{url_state.query}")


@favorites_app.command("add")
def favorites_add(character_id: int = typer.Argument(..., min=1)) -> None:
    store = JsonFavoritesStore(AppSettings().resolved_favorites_path())
    store.add(character_id)
    _console.print(f"[green]Added {character_id} to favorites.[/green]")


@favorites_app.command("remove")
def favorites_remove(character_id: int = typer.Argument(..., min=1)) -> None:
    store = JsonFavoritesStore(AppSettings().resolved_favorites_path())
    store.remove(character_id)
    _console.print(f"[green]Removed {character_id} from favorites.[/green]")


@favorites_app.command("list")
def favorites_list() -> None:
    """List favorite characters (fetched from the API)."""

    settings = AppSettings()
    ids = JsonFavoritesStore(settings.resolved_favorites_path()).ids()
    if not ids:
        _console.print("[dim]No favorites yet.[/dim]")
        return

    async def _fetch():
        async with _make_client(settings) as client:
            return await client.get_characters(ids)

    try:
        characters = asyncio.run(_fetch())
    except TransportError as exc:
        _console.print(f"[red]Error fetching favorites:[/red] {exc}")
        raise typer.Exit(code=1) from exc
    _console.print(build_characters_table(characters, favorites=set(ids), title="Favorites"))


def run() -> None:
    app()
