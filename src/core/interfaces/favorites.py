"""Contrato del almacén local de favoritos."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class FavoritesStore(Protocol):
    def ids(self) -> list[int]: ...

    def is_favorite(self, character_id: int) -> bool: ...

    def add(self, character_id: int) -> None: ...

    def remove(self, character_id: int) -> None: ...

    def toggle(self, character_id: int) -> bool:
        """Alterna la marca y devuelve el estado resultante."""

        ...
