"""Componentes de UI para CLI (Rich).

Por qué separar componentes:
- Evita mezclar lógica de comandos con detalles visuales.
- Permite reutilizar tablas/paneles en `browse`, `list`, `show` y `favorites`.
"""

from __future__ import annotations

from typing import Iterable

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.domain.models import Character, CharacterStatus, FilterState
from core.services.query_state import QuerySnapshot, QueryStatus

_STATUS_STYLES: dict[CharacterStatus, str] = {
    CharacterStatus.ALIVE: "green",
    CharacterStatus.DEAD: "red",
    CharacterStatus.UNKNOWN: "dim",
}


def print_banner(console: Console) -> None:
    """Imprime el banner de bienvenida (solo en modo interactivo)."""

    title = Text("MORTY-CATALOG", style="bold cyan")
    subtitle = Text("Personajes • Filtros • Scroll infinito", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def status_text(status: CharacterStatus) -> Text:
    return Text(status.value, style=_STATUS_STYLES.get(status, "white"))


def build_characters_table(
    characters: Iterable[Character],
    *,
    start: int = 0,
    favorites: set[int] | None = None,
    title: str | None = "Characters",
) -> Table:
    """Tabla de personajes; `start` numera las filas cuando se añaden páginas."""

    favorites = favorites or set()
    table = Table(title=title)
    table.add_column("#", style="dim", justify="right")
    table.add_column("ID", style="cyan", justify="right", no_wrap=True)
    table.add_column("Name", style="bold white")
    table.add_column("Status")
    table.add_column("Species", style="white")
    table.add_column("Gender", style="white")
    table.add_column("Origin", style="magenta")
    table.add_column("Location", style="magenta")
    table.add_column("Created", style="dim", no_wrap=True)
    table.add_column("Ep.", justify="right")

    for offset, character in enumerate(characters, start=start + 1):
        name = character.name
        if character.id in favorites:
            name = f"★ {name}"
        table.add_row(
            str(offset),
            str(character.id),
            name,
            status_text(character.status),
            character.species,
            character.gender.value,
            character.origin.name,
            character.location.name,
            character.created.date().isoformat(),
            str(len(character.episode)),
        )
    return table


def describe_filter(filter: FilterState) -> str:
    if filter.is_empty:
        return "no filters"
    return ", ".join(f"{key}={value}" for key, value in filter.to_query().items())


def build_status_line(snapshot: QuerySnapshot) -> Text:
    text = Text()
    if snapshot.status is QueryStatus.LOADING_FIRST_PAGE:
        text.append("Loading… ", style="yellow")
    elif snapshot.status is QueryStatus.LOADING_MORE:
        text.append("Loading more… ", style="yellow")
    text.append(f"{len(snapshot.items)} shown", style="bold")
    text.append(f" / {snapshot.total_count} total", style="dim")
    text.append(f" • page {snapshot.page}/{snapshot.total_pages}", style="dim")
    text.append(f" • {describe_filter(snapshot.filter)}", style="cyan")
    if snapshot.last_error:
        text.append(f"\nError: {snapshot.last_error}", style="red")
    elif not snapshot.has_more and snapshot.items:
        text.append("\nEnd of results.", style="dim")
    return text


def build_character_panel(character: Character, *, favorite: bool = False) -> Panel:
    """Panel de detalle de un personaje (`show`)."""

    body = Text()
    body.append("Status: ")
    body.append_text(status_text(character.status))
    body.append(f"\nSpecies: {character.species}")
    if character.type:
        body.append(f" ({character.type})", style="dim")
    body.append(f"\nGender: {character.gender.value}")
    body.append(f"\nOrigin: {character.origin.name}")
    body.append(f"\nLocation: {character.location.name}")
    body.append(f"\nEpisodes: {len(character.episode)}")
    body.append(f"\nCreated: {character.created.isoformat()}", style="dim")
    if character.image:
        body.append(f"\nImage: {character.image}", style="dim")

    title = Text(f"#{character.id} {character.name}", style="bold yellow")
    if favorite:
        title.append(" ★", style="yellow")
    return Panel(body, title=title, border_style="yellow")
