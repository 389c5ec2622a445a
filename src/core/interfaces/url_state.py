"""Contrato del estado persistido (query string de la URL)."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from core.domain.models import FilterState


@runtime_checkable
class UrlStateBridge(Protocol):
    def read_initial(self) -> tuple[FilterState, int]:
        """Filtro y página ya parseados desde la representación persistida."""

        ...

    def persist(self, filter: FilterState, page: int) -> None:
        """Best-effort; puede fallar y el motor lo tolera."""

        ...
