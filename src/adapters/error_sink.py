"""Sumidero de errores basado en `logging`."""

from __future__ import annotations

import logging

from core.interfaces.error_sink import ErrorSink


class LoggingErrorSink(ErrorSink):
    """Registra cada fallo con su traza original.

    `logging` ya absorbe los fallos de sus handlers, así que `report` no lanza.
    """

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or logging.getLogger("morty_catalog.errors")
        self.reported = 0

    def report(self, context: str, cause: BaseException) -> None:
        self.reported += 1
        self._logger.error(
            "%s: %s",
            context,
            cause,
            exc_info=(type(cause), cause, cause.__traceback__),
        )
