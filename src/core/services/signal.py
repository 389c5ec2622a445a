"""Notificación de snapshots del motor a sus consumidores.

Por qué un Signal propio y no callbacks sueltos:
- El motor no conoce a quién pinta (tabla de la CLI, tests, otra vista).
- Un consumidor que falla no debe dejar sin aviso a los demás ni romper la
  transición de estado que lo disparó.

Se usa siempre desde el event loop del motor, así que no lleva locks.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

_logger = logging.getLogger(__name__)

Handler = Callable[..., Any]


class Signal:
    """Lista ordenada de handlers sin duplicados.

    `emit` itera sobre una copia: un handler puede desconectarse (o conectar
    otro) durante la emisión sin alterar la vuelta en curso.
    """

    def __init__(self) -> None:
        # dict como conjunto ordenado
        self._handlers: dict[Handler, None] = {}

    @property
    def handler_count(self) -> int:
        return len(self._handlers)

    def connect(self, handler: Handler) -> None:
        self._handlers.setdefault(handler, None)

    def disconnect(self, handler: Handler) -> None:
        self._handlers.pop(handler, None)

    def disconnect_all(self) -> None:
        self._handlers.clear()

    def emit(self, *args: Any, **kwargs: Any) -> None:
        for handler in tuple(self._handlers):
            try:
                handler(*args, **kwargs)
            except Exception:
                _logger.exception("Signal handler %r failed", handler)
