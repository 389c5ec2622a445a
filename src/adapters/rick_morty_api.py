"""Cliente del catálogo de personajes (Rick & Morty API).

Implementa `core.interfaces.collection.RemoteCollectionClient` y añade las
consultas por id que usa la CLI (detalle y favoritos).

Contrato de la API:
- `GET /character?page=N&name=...&status=...` -> `{info: {count, pages}, results}`.
- Un filtro sin resultados responde `404 {"error": "There is nothing here"}`;
  aquí se traduce a una página vacía.
- `GET /character/1,2,3` -> lista; `GET /character/1` -> objeto.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable

import httpx
from pydantic import ValidationError

from adapters.http_client import build_async_client
from core.config import AppSettings
from core.domain.errors import TransportError
from core.domain.models import Character, CollectionPage, FilterState
from core.interfaces.collection import RemoteCollectionClient

_logger = logging.getLogger(__name__)


class RickMortyClient(RemoteCollectionClient):
    """Cliente asíncrono de `/character`.

    Si no se inyecta un `httpx.AsyncClient`, se crea uno con
    `build_async_client` y se cierra en `aclose()`.
    """

    def __init__(
        self,
        settings: AppSettings | None = None,
        *,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._settings = settings or AppSettings()
        self._client = client
        self._owns_client = client is None

    async def __aenter__(self) -> "RickMortyClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def fetch_page(self, filter: FilterState, page: int) -> CollectionPage:
        if page < 1:
            raise ValueError("page is 1-based")
        params = {**filter.remote_params(), "page": str(page)}
        payload = await self._get_json("/character", params=params, not_found_ok=True)
        if payload is None:
            _logger.debug("No characters for params %s", params)
            return CollectionPage()
        if not isinstance(payload, dict):
            raise TransportError("Unexpected character page payload (expected an object)")
        try:
            return CollectionPage.from_api(payload)
        except (ValidationError, TypeError, ValueError) as exc:
            raise TransportError(f"Malformed character page payload: {exc}") from exc

    async def get_character(self, character_id: int) -> Character | None:
        payload = await self._get_json(f"/character/{int(character_id)}", not_found_ok=True)
        if payload is None:
            return None
        try:
            return Character.model_validate(payload)
        except ValidationError as exc:
            raise TransportError(f"Malformed character payload: {exc}") from exc

    async def get_characters(self, character_ids: Iterable[int]) -> list[Character]:
        ids = [int(i) for i in character_ids]
        if not ids:
            return []
        joined = ",".join(str(i) for i in ids)
        payload = await self._get_json(f"/character/{joined}", not_found_ok=True)
        if payload is None:
            return []
        # Con un único id la API devuelve un objeto, no una lista.
        raw_items = payload if isinstance(payload, list) else [payload]
        try:
            return [Character.model_validate(raw) for raw in raw_items]
        except ValidationError as exc:
            raise TransportError(f"Malformed characters payload: {exc}") from exc

    def _http(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = build_async_client(self._settings)
            self._owns_client = True
        return self._client

    async def _get_json(
        self,
        path: str,
        *,
        params: dict[str, str] | None = None,
        not_found_ok: bool = False,
    ) -> Any:
        try:
            resp = await self._http().get(path, params=params)
        except httpx.TimeoutException as exc:
            raise TransportError(f"Timeout requesting {path}") from exc
        except httpx.HTTPError as exc:
            raise TransportError(f"Request to {path} failed: {exc}") from exc

        if resp.status_code == 404 and not_found_ok:
            return None
        if resp.status_code != 200:
            raise TransportError(
                f"HTTP {resp.status_code} requesting {path}",
                status_code=resp.status_code,
            )
        try:
            return resp.json()
        except ValueError as exc:
            raise TransportError(f"Invalid JSON from {path}") from exc
