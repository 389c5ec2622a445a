"""Motor de consultas incremental (filtros + scroll infinito + estado en URL).

Reconcilia tres fuentes de eventos independientes:
- ediciones de filtro (`set_filter`, con debounce),
- avances de página (`advance_page`, normalmente desde un `ScrollTrigger`),
- el estado persistido que se lee al arrancar (`UrlStateBridge`).

Todas las mutaciones pasan por `core.services.query_state.reduce` y ocurren en
el event loop de asyncio. La única suspensión es la llamada al cliente remoto;
las respuestas que llegan tarde se descartan comparando la generación con la
que se emitió la petición, y la tarea superada se cancela.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from core.domain.errors import SupersededResponse
from core.domain.models import FilterState
from core.interfaces.collection import RemoteCollectionClient
from core.interfaces.error_sink import ErrorSink
from core.interfaces.scroll_trigger import ScrollTrigger
from core.interfaces.url_state import UrlStateBridge
from core.services.debouncer import Debouncer
from core.services.query_state import (
    FetchFailed,
    FetchSucceeded,
    FilterApplied,
    PageRequested,
    QueryEvent,
    QuerySnapshot,
    QueryState,
    reduce,
)
from core.services.signal import Signal

DEFAULT_DEBOUNCE_MS = 300
# Espera máxima en `close()` a que la tarea cancelada termine.
CLOSE_TIMEOUT_S = 1.0

_logger = logging.getLogger(__name__)


class QueryEngine:
    """Dueño único del estado de la consulta de una vista/sesión.

    Los métodos síncronos (`set_filter`, `advance_page`, `reset`, `refresh`)
    deben llamarse desde el event loop en el que corre el motor.
    """

    def __init__(
        self,
        client: RemoteCollectionClient,
        *,
        url_state: UrlStateBridge | None = None,
        error_sink: ErrorSink | None = None,
        scroll_trigger: ScrollTrigger | None = None,
        debounce_ms: int = DEFAULT_DEBOUNCE_MS,
    ) -> None:
        self._client = client
        self._url_state = url_state
        self._error_sink = error_sink
        self._state = QueryState()
        self._requested: FilterState | None = None
        self._debouncer = Debouncer(self._apply_requested_filter, delay_ms=debounce_ms)
        self._task: asyncio.Task[None] | None = None
        self._closed = False

        # Emite un `QuerySnapshot` tras cada transición.
        self.state_changed = Signal()

        if scroll_trigger is not None:
            scroll_trigger.on_intersect(self.advance_page)

    async def __aenter__(self) -> "QueryEngine":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    @property
    def closed(self) -> bool:
        return self._closed

    def current_state(self) -> QuerySnapshot:
        return self._state.snapshot()

    async def start(self) -> QuerySnapshot:
        """Carga el estado inicial persistido.

        Si la página persistida es > 1, avanza página a página hasta ella
        (restaura la profundidad del scroll) y se detiene si ya no hay más.
        """

        filter_, target_page = FilterState(), 1
        if self._url_state is not None:
            try:
                filter_, target_page = self._url_state.read_initial()
            except Exception as exc:
                _logger.warning("Could not read persisted query state, starting empty: %s", exc)

        self._apply_filter(filter_)
        await self.wait_idle()
        while not self._closed and self._state.page < target_page and self.advance_page():
            await self.wait_idle()
        return self.current_state()

    def set_filter(self, new_filter: FilterState | None = None, **changes: Any) -> None:
        """Programa un cambio de filtro (con debounce).

        `new_filter` reemplaza el filtro completo; `changes` se fusionan sobre
        el último filtro solicitado. Solo la última llamada dentro de la
        ventana de debounce llega a aplicarse.
        """

        if self._closed:
            _logger.debug("set_filter ignored: engine closed")
            return
        base = new_filter if new_filter is not None else (self._requested or self._state.filter)
        if changes:
            base = base.merge(**changes)
        self._requested = base
        self._debouncer(base)

    def advance_page(self) -> bool:
        """Pide la siguiente página. Devuelve `False` si no procede."""

        if self._closed:
            return False
        new_state = reduce(self._state, PageRequested())
        if new_state is self._state:
            return False
        self._set_state(new_state)
        self._issue_fetch(append=True)
        return True

    def reset(self) -> None:
        """Vuelve al filtro vacío de inmediato (sin debounce)."""

        if self._closed:
            return
        self._debouncer.cancel()
        self._requested = None
        self._apply_filter(FilterState.empty())

    def refresh(self) -> None:
        """Recarga la primera página del filtro vigente (reintento manual)."""

        if self._closed:
            return
        self._apply_filter(self._state.filter)

    def flush(self) -> None:
        """Aplica ya cualquier edición de filtro pendiente de debounce."""

        self._debouncer.flush()

    async def wait_idle(self) -> None:
        """Espera a que no haya debounce pendiente ni petición en vuelo."""

        while not self._closed:
            if self._debouncer.pending:
                await self._debouncer.wait()
                continue
            task = self._task
            if task is None or task.done():
                return
            await asyncio.wait({task})

    async def close(self) -> None:
        """Cancela el trabajo pendiente; después no se muta más el estado."""

        if self._closed:
            return
        self._closed = True
        self._debouncer.cancel()
        task, self._task = self._task, None
        if task is not None and not task.done():
            task.cancel()
            done, _ = await asyncio.wait({task}, timeout=CLOSE_TIMEOUT_S)
            if not done:
                _logger.warning("In-flight fetch ignored cancellation; closing without waiting for it")
        self.state_changed.disconnect_all()

    # -- internals -----------------------------------------------------------

    def _apply_requested_filter(self, filter_: FilterState) -> None:
        self._requested = None
        if self._closed:
            return
        if filter_ == self._state.filter:
            _logger.debug("Filter unchanged, skipping query: %s", filter_.to_query())
            return
        self._apply_filter(filter_)

    def _apply_filter(self, filter_: FilterState) -> None:
        self._cancel_inflight()
        self._set_state(reduce(self._state, FilterApplied(filter_)))
        self._issue_fetch(append=False)

    def _cancel_inflight(self) -> None:
        task, self._task = self._task, None
        if task is not None and not task.done():
            task.cancel()

    def _issue_fetch(self, *, append: bool) -> None:
        state = self._state
        loop = asyncio.get_running_loop()
        self._task = loop.create_task(
            self._run_fetch(
                generation=state.generation,
                filter_=state.filter.remote(),
                page=state.page,
                append=append,
            )
        )

    async def _run_fetch(self, *, generation: int, filter_: FilterState, page: int, append: bool) -> None:
        _logger.debug(
            "Fetching page %s (generation=%s, append=%s, params=%s)",
            page,
            generation,
            append,
            filter_.remote_params(),
        )
        try:
            result = await self._client.fetch_page(filter_, page)
        except asyncio.CancelledError:
            _logger.debug("Fetch for generation %s page %s cancelled", generation, page)
            raise
        except Exception as exc:
            message = str(exc) or exc.__class__.__name__
            self._complete(FetchFailed(generation=generation, append=append, error=message), cause=exc)
        else:
            self._complete(FetchSucceeded(generation=generation, append=append, result=result))
        finally:
            if self._task is asyncio.current_task():
                self._task = None

    def _complete(self, event: QueryEvent, *, cause: BaseException | None = None) -> None:
        if self._closed:
            return
        try:
            new_state = reduce(self._state, event)
        except SupersededResponse as exc:
            _logger.debug("Discarding response: %s", exc)
            return
        self._set_state(new_state)
        if cause is not None:
            self._report("Error loading characters", cause)
        self._persist()

    def _set_state(self, state: QueryState) -> None:
        self._state = state
        self.state_changed.emit(state.snapshot())

    def _report(self, context: str, cause: BaseException) -> None:
        if self._error_sink is None:
            _logger.error("%s: %s", context, cause)
            return
        try:
            self._error_sink.report(context, cause)
        except Exception:
            _logger.exception("Error sink failed while reporting %r", context)

    def _persist(self) -> None:
        if self._url_state is None:
            return
        state = self._state
        try:
            self._url_state.persist(state.filter, state.page)
        except Exception as exc:
            _logger.warning("Could not persist query state (page=%s): %s", state.page, exc)
