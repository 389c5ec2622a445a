"""Interfaces/abstracciones del Core.

Por qué:
- Define contratos (Protocol) que implementan adaptadores concretos.
- Permite invertir dependencias: el motor de consultas depende de abstracciones
  (cliente remoto, estado en URL, scroll, sumidero de errores).
"""

from core.interfaces.collection import RemoteCollectionClient
from core.interfaces.error_sink import ErrorSink
from core.interfaces.favorites import FavoritesStore
from core.interfaces.scroll_trigger import ScrollTrigger
from core.interfaces.url_state import UrlStateBridge

__all__ = [
    "ErrorSink",
    "FavoritesStore",
    "RemoteCollectionClient",
    "ScrollTrigger",
    "UrlStateBridge",
]
