"""Contrato del catálogo remoto.

Por qué Protocol:
- El motor solo necesita `fetch_page`; el adaptador httpx, un doble de test o
  un cliente en memoria son intercambiables.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from core.domain.models import CollectionPage, FilterState


@runtime_checkable
class RemoteCollectionClient(Protocol):
    """Contrato mínimo de una colección paginada remota.

    Reglas de diseño:
    - `fetch_page` es asíncrono porque hace I/O (HTTP).
    - `page` empieza en 1.
    - Los fallos se señalan con `core.domain.errors.TransportError`.
    """

    async def fetch_page(self, filter: FilterState, page: int) -> CollectionPage:
        """Devuelve la página `page` para los campos no vacíos de `filter`."""

        ...
