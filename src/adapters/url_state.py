"""Estado de filtros/página como query string (estilo URL).

`?name=Rick&status=Alive&createdStart=2017-11-01&page=3`

- Se omiten los campos vacíos y `page` cuando vale 1.
- Opcionalmente se guarda en un fichero para que `browse` retome la sesión.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable
from urllib.parse import parse_qsl, urlencode

from pydantic import ValidationError

from core.domain.errors import PersistenceError
from core.domain.models import QUERY_KEYS, FilterState
from core.interfaces.url_state import UrlStateBridge

_logger = logging.getLogger(__name__)


def parse_query(query: str) -> tuple[FilterState, int]:
    """Parsea una query string; los valores inválidos se ignoran (con warning)."""

    params = dict(parse_qsl(query.strip().lstrip("?"), keep_blank_values=False))

    valid: dict[str, str] = {}
    for field_name, key in QUERY_KEYS.items():
        raw = params.get(key)
        if raw is None:
            continue
        try:
            FilterState.model_validate({field_name: raw})
        except ValidationError:
            _logger.warning("Ignoring invalid query value %s=%r", key, raw)
            continue
        valid[key] = raw

    page = 1
    raw_page = params.get("page")
    if raw_page is not None:
        try:
            page = int(raw_page)
        except ValueError:
            page = 0
        if page < 1:
            _logger.warning("Ignoring invalid page %r", raw_page)
            page = 1

    return FilterState.from_query(valid), page


def build_query(filter: FilterState, page: int) -> str:
    params = filter.to_query()
    if page != 1:
        params["page"] = str(page)
    return urlencode(params)


class QueryStringState(UrlStateBridge):
    """`UrlStateBridge` sobre una query string en memoria (y fichero opcional)."""

    def __init__(
        self,
        query: str = "",
        *,
        state_path: Path | None = None,
        on_change: Callable[[str], None] | None = None,
    ) -> None:
        self._query = query.strip().lstrip("?")
        self._state_path = state_path
        self._on_change = on_change

    @classmethod
    def from_file(
        cls,
        state_path: Path,
        *,
        on_change: Callable[[str], None] | None = None,
    ) -> "QueryStringState":
        query = ""
        if state_path.exists():
            query = state_path.read_text(encoding="utf-8").strip()
        return cls(query, state_path=state_path, on_change=on_change)

    @property
    def query(self) -> str:
        return self._query

    def read_initial(self) -> tuple[FilterState, int]:
        return parse_query(self._query)

    def persist(self, filter: FilterState, page: int) -> None:
        query = build_query(filter, page)
        if query == self._query:
            return
        if self._state_path is not None:
            try:
                self._state_path.parent.mkdir(parents=True, exist_ok=True)
                self._state_path.write_text(query + "\n", encoding="utf-8")
            except OSError as exc:
                raise PersistenceError(f"Could not write query state to {self._state_path}") from exc
        # `query` refleja lo último escrito con éxito.
        self._query = query
        if self._on_change is not None:
            self._on_change(query)
