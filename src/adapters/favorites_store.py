"""Favoritos en un JSON local (lista de ids).

Equivale al almacenamiento clave-valor del navegador: sin servidor, sin
sincronización. El fichero se reescribe completo en cada cambio.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from core.interfaces.favorites import FavoritesStore

_logger = logging.getLogger(__name__)


class JsonFavoritesStore(FavoritesStore):
    def __init__(self, path: Path) -> None:
        self._path = path
        self._ids: list[int] = self._load()

    @property
    def path(self) -> Path:
        return self._path

    def ids(self) -> list[int]:
        return list(self._ids)

    def is_favorite(self, character_id: int) -> bool:
        return int(character_id) in self._ids

    def add(self, character_id: int) -> None:
        character_id = int(character_id)
        if character_id in self._ids:
            return
        self._ids.append(character_id)
        self._save()

    def remove(self, character_id: int) -> None:
        character_id = int(character_id)
        if character_id not in self._ids:
            return
        self._ids.remove(character_id)
        self._save()

    def toggle(self, character_id: int) -> bool:
        if self.is_favorite(character_id):
            self.remove(character_id)
            return False
        self.add(character_id)
        return True

    def _load(self) -> list[int]:
        if not self._path.exists():
            return []
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except json.JSONDecodeError:
            _logger.warning("Favorites file %s is not valid JSON; starting empty", self._path)
            return []
        if not isinstance(data, list):
            _logger.warning("Favorites file %s has unexpected shape; starting empty", self._path)
            return []
        out: list[int] = []
        for value in data:
            if isinstance(value, int) and not isinstance(value, bool) and value not in out:
                out.append(value)
        return out

    def _save(self) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps(self._ids) + "\n", encoding="utf-8")
