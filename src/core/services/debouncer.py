"""Debounce de borde final sobre el event loop de asyncio.

Cada llamada reinicia la ventana de silencio; cuando vence, se ejecuta el
callback una sola vez con los argumentos de la última llamada.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable

_logger = logging.getLogger(__name__)


class Debouncer:
    """Colapsa ráfagas de llamadas en una única ejecución.

    Parameters
    ----------
    callback:
        Callable a ejecutar con los argumentos de la última llamada.
    delay_ms:
        Ventana de silencio en milisegundos. `0` ejecuta en la siguiente
        vuelta del loop.
    """

    def __init__(self, callback: Callable[..., Any], *, delay_ms: int) -> None:
        if delay_ms < 0:
            raise ValueError("delay_ms must be >= 0")
        self._callback = callback
        self._delay_s = delay_ms / 1000.0
        self._handle: asyncio.TimerHandle | None = None
        self._args: tuple[Any, ...] = ()
        self._kwargs: dict[str, Any] = {}
        self._idle = asyncio.Event()
        self._idle.set()

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def __call__(self, *args: Any, **kwargs: Any) -> None:
        loop = asyncio.get_running_loop()
        if self._handle is not None:
            self._handle.cancel()
        self._args = args
        self._kwargs = dict(kwargs)
        self._idle.clear()
        self._handle = loop.call_later(self._delay_s, self._fire)

    def flush(self) -> None:
        """Ejecuta ya la llamada pendiente, si la hay."""

        if self._handle is None:
            return
        self._handle.cancel()
        self._fire()

    def cancel(self) -> None:
        """Descarta la llamada pendiente sin ejecutarla."""

        if self._handle is not None:
            self._handle.cancel()
        self._handle = None
        self._args = ()
        self._kwargs = {}
        self._idle.set()

    async def wait(self) -> None:
        """Espera a que no quede ninguna llamada pendiente."""

        await self._idle.wait()

    def _fire(self) -> None:
        args, kwargs = self._args, self._kwargs
        self._handle = None
        self._args = ()
        self._kwargs = {}
        try:
            self._callback(*args, **kwargs)
        except Exception:
            _logger.exception("Debounced callback %r failed", self._callback)
        finally:
            if self._handle is None:
                self._idle.set()
