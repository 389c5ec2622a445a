"""Estado del motor de consultas y su función de transición.

Todo el estado mutable (filtro, página, items, flags de carga, `has_more`,
generación) vive en un único registro inmutable, `QueryState`. Cada evento
produce un registro nuevo vía `reduce(state, event)`, así que un lector nunca
observa una actualización a medias.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Union

from core.domain.errors import SupersededResponse
from core.domain.models import Character, CollectionPage, FilterState, PageMeta
from core.services.date_range import filter_by_date_range


class QueryStatus(str, Enum):
    IDLE = "idle"
    LOADING_FIRST_PAGE = "loading_first_page"
    LOADING_MORE = "loading_more"


@dataclass(frozen=True)
class QuerySnapshot:
    """Vista de solo lectura para el consumidor (render y decisión de scroll)."""

    filter: FilterState
    items: tuple[Character, ...]
    total_count: int
    total_pages: int
    page: int
    has_more: bool
    loading_first_page: bool
    loading_more: bool
    last_error: str | None = None

    @property
    def loading(self) -> bool:
        return self.loading_first_page or self.loading_more

    @property
    def status(self) -> QueryStatus:
        if self.loading_first_page:
            return QueryStatus.LOADING_FIRST_PAGE
        if self.loading_more:
            return QueryStatus.LOADING_MORE
        return QueryStatus.IDLE

    @property
    def can_advance(self) -> bool:
        return self.has_more and not self.loading


@dataclass(frozen=True)
class QueryState:
    filter: FilterState = field(default_factory=FilterState)
    page: int = 1
    items: tuple[Character, ...] = ()
    meta: PageMeta = field(default_factory=PageMeta)
    loading_first_page: bool = False
    loading_more: bool = False
    has_more: bool = False
    generation: int = 0
    # Última página cargada con éxito; a ella se vuelve si falla un append.
    loaded_page: int = 0
    last_error: str | None = None

    @property
    def loading(self) -> bool:
        return self.loading_first_page or self.loading_more

    @property
    def can_advance(self) -> bool:
        return self.has_more and not self.loading

    def snapshot(self) -> QuerySnapshot:
        return QuerySnapshot(
            filter=self.filter,
            items=self.items,
            total_count=self.meta.total_count,
            total_pages=self.meta.total_pages,
            page=self.page,
            has_more=self.has_more,
            loading_first_page=self.loading_first_page,
            loading_more=self.loading_more,
            last_error=self.last_error,
        )


@dataclass(frozen=True)
class FilterApplied:
    """Cambio efectivo de filtro (o reset/refresh): nueva generación, página 1."""

    filter: FilterState


@dataclass(frozen=True)
class PageRequested:
    """Petición de avance de página (scroll infinito)."""


@dataclass(frozen=True)
class FetchSucceeded:
    generation: int
    append: bool
    result: CollectionPage


@dataclass(frozen=True)
class FetchFailed:
    generation: int
    append: bool
    error: str


QueryEvent = Union[FilterApplied, PageRequested, FetchSucceeded, FetchFailed]


def _cleared_loading_flag(append: bool) -> dict[str, bool]:
    return {"loading_more": False} if append else {"loading_first_page": False}


def _ensure_current(state: QueryState, generation: int) -> None:
    if generation != state.generation:
        raise SupersededResponse(generation, state.generation)


def reduce(state: QueryState, event: QueryEvent) -> QueryState:
    """Transición pura `estado + evento -> estado`.

    - `PageRequested` devuelve el mismo objeto si no se puede avanzar
      (`has_more` falso o carga en curso); el llamador lo usa para no emitir
      ninguna petición.
    - Las respuestas de otra generación lanzan `SupersededResponse` y no tocan
      el estado.
    """

    if isinstance(event, FilterApplied):
        return replace(
            state,
            filter=event.filter,
            page=1,
            items=(),
            loading_first_page=True,
            loading_more=False,
            has_more=True,
            generation=state.generation + 1,
            loaded_page=0,
            last_error=None,
        )

    if isinstance(event, PageRequested):
        if not state.can_advance:
            return state
        return replace(state, page=state.page + 1, loading_more=True, last_error=None)

    if isinstance(event, FetchSucceeded):
        _ensure_current(state, event.generation)
        filtered = filter_by_date_range(
            event.result.items,
            state.filter.created_start,
            state.filter.created_end,
        )
        items = state.items + tuple(filtered) if event.append else tuple(filtered)
        meta = event.result.meta
        return replace(
            state,
            items=items,
            meta=meta,
            has_more=state.page < meta.total_pages,
            **_cleared_loading_flag(event.append),
            loaded_page=state.page,
            last_error=None,
        )

    if isinstance(event, FetchFailed):
        _ensure_current(state, event.generation)
        if event.append:
            return replace(
                state,
                page=max(1, state.loaded_page),
                has_more=False,
                loading_more=False,
                last_error=event.error,
            )
        return replace(
            state,
            items=(),
            has_more=False,
            loading_first_page=False,
            last_error=event.error,
        )

    raise TypeError(f"Unsupported query event: {event!r}")
