"""Filtro client-side por fecha de creación.

La API no permite filtrar por `created`, así que el rango se aplica sobre cada
página recibida antes de acumularla. Función pura: sin red ni estado.
"""

from __future__ import annotations

from datetime import date, datetime, time
from typing import Callable, Iterable, TypeVar

from core.domain.models import Character

T = TypeVar("T")

_START_OF_DAY = time(0, 0, 0, 0)
_END_OF_DAY = time(23, 59, 59, 999_000)


def _as_date(value: date | datetime) -> date:
    return value.date() if isinstance(value, datetime) else value


def _created_at(item: Character) -> datetime:
    return item.created


def filter_by_date_range(
    items: Iterable[T],
    start: date | datetime | None = None,
    end: date | datetime | None = None,
    *,
    key: Callable[[T], datetime] = _created_at,  # type: ignore[assignment]
) -> list[T]:
    """Filtra `items` cuyo timestamp cae en `[start, end]` (inclusive).

    - `start` se normaliza a 00:00:00.000 de su día y `end` a 23:59:59.999.
    - Los límites se interpretan en la misma zona horaria que el timestamp de
      cada item (UTC para la API).
    - Sin límites, devuelve los items tal cual (mismo orden).
    """

    if start is None and end is None:
        return list(items)

    start_day = _as_date(start) if start is not None else None
    end_day = _as_date(end) if end is not None else None

    out: list[T] = []
    for item in items:
        ts = key(item)
        if start_day is not None and ts < datetime.combine(start_day, _START_OF_DAY, tzinfo=ts.tzinfo):
            continue
        if end_day is not None and ts > datetime.combine(end_day, _END_OF_DAY, tzinfo=ts.tzinfo):
            continue
        out.append(item)
    return out
