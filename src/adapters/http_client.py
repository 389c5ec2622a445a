"""Wrapper de httpx.

Por qué un wrapper:
- Estandariza base URL, timeouts y headers para todas las llamadas a la API.
- Un solo sitio donde cambiar la configuración HTTP; los tests inyectan su
  propio `httpx.AsyncClient` (con `httpx.MockTransport`) en el cliente.
"""

from __future__ import annotations

import httpx

from core.config import AppSettings


def build_async_client(
    settings: AppSettings | None = None,
) -> httpx.AsyncClient:
    """Crea un `httpx.AsyncClient` apuntando a la API del catálogo.

    El timeout se delega aquí: cuando vence, httpx lanza
    `httpx.TimeoutException` y el cliente lo convierte en `TransportError`.
    """

    settings = settings or AppSettings()
    headers: dict[str, str] = {
        "User-Agent": settings.user_agent,
        "Accept": "application/json",
    }
    return httpx.AsyncClient(
        base_url=settings.api_base_url,
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        follow_redirects=True,
        headers=headers,
    )
