"""Exportación CSV (una fila por personaje, columnas planas)."""

from __future__ import annotations

import csv
from pathlib import Path
from typing import Iterable

from core.domain.models import Character

CSV_COLUMNS: tuple[str, ...] = (
    "id",
    "name",
    "status",
    "species",
    "type",
    "gender",
    "origin",
    "location",
    "created",
    "episodes",
)


def character_row(character: Character) -> dict[str, str]:
    return {
        "id": str(character.id),
        "name": character.name,
        "status": character.status.value,
        "species": character.species,
        "type": character.type,
        "gender": character.gender.value,
        "origin": character.origin.name,
        "location": character.location.name,
        "created": character.created.isoformat(),
        "episodes": str(len(character.episode)),
    }


def export_characters_csv(*, characters: Iterable[Character], output_path: Path) -> Path:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with output_path.open("w", encoding="utf-8", newline="") as fh:
        writer = csv.DictWriter(fh, fieldnames=list(CSV_COLUMNS))
        writer.writeheader()
        for character in characters:
            writer.writerow(character_row(character))
    return output_path
