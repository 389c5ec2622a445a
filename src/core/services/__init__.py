"""Servicios del Core: motor de consultas, reducer, debounce y filtros puros."""

from core.services.date_range import filter_by_date_range
from core.services.query_engine import QueryEngine
from core.services.query_state import QuerySnapshot, QueryStatus

__all__ = [
    "QueryEngine",
    "QuerySnapshot",
    "QueryStatus",
    "filter_by_date_range",
]
