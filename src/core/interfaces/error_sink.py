"""Contrato del sumidero de errores (logging/telemetría)."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class ErrorSink(Protocol):
    def report(self, context: str, cause: BaseException) -> None:
        """Registra el fallo con su causa original. Nunca lanza."""

        ...
