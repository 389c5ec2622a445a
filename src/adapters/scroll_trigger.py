"""Disparador de scroll infinito.

Recibe una señal booleana "el final de la lista está en vista" y avisa a los
handlers en cada flanco falso -> verdadero. Señales repetidas o rebotes son
seguros porque `QueryEngine.advance_page` ya está protegido.
"""

from __future__ import annotations

import logging
from typing import Callable

from core.interfaces.scroll_trigger import ScrollTrigger

_logger = logging.getLogger(__name__)


class IntersectionTrigger(ScrollTrigger):
    def __init__(self) -> None:
        self._handlers: list[Callable[[], object]] = []
        self._intersecting = False

    @property
    def intersecting(self) -> bool:
        return self._intersecting

    def on_intersect(self, handler: Callable[[], object]) -> None:
        if handler not in self._handlers:
            self._handlers.append(handler)

    def update(self, intersecting: bool) -> None:
        was = self._intersecting
        self._intersecting = bool(intersecting)
        if self._intersecting and not was:
            self._fire()

    def pulse(self) -> None:
        """Entra y sale de la intersección (p.ej. el usuario pide "más")."""

        self.update(True)
        self.update(False)

    def _fire(self) -> None:
        for handler in list(self._handlers):
            try:
                handler()
            except Exception:
                _logger.exception("Scroll handler %r failed", handler)
