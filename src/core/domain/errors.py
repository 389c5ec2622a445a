"""Taxonomía de errores del Core.

- `TransportError`: fallo de red/HTTP/payload del cliente remoto.
- `SupersededResponse`: respuesta de una generación anterior; descarte interno.
- `PersistenceError`: fallo al persistir el estado (query string); no fatal.
"""

from __future__ import annotations


class CatalogError(Exception):
    """Base de los errores propios del proyecto."""


class TransportError(CatalogError):
    """La llamada al catálogo remoto falló (red, timeout, HTTP o payload)."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class SupersededResponse(CatalogError):
    """Una respuesta llegó para una generación que ya no es la vigente."""

    def __init__(self, generation: int, current: int) -> None:
        super().__init__(f"response for generation {generation} superseded by generation {current}")
        self.generation = generation
        self.current = current


class PersistenceError(CatalogError):
    """No se pudo persistir el estado de filtros/página."""
