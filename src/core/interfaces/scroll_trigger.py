"""Contrato del disparador de scroll infinito."""

from __future__ import annotations

from typing import Callable, Protocol, runtime_checkable


@runtime_checkable
class ScrollTrigger(Protocol):
    def on_intersect(self, handler: Callable[[], object]) -> None:
        """Registra `handler`; se invoca cuando el final de la lista entra en vista.

        Puede invocarse de forma repetida: el consumidor debe ser idempotente.
        """

        ...
