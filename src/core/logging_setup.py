from __future__ import annotations

import logging
import sys

HANDLER_NAME = "morty-catalog-console"

_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def configure_logging(level: str | int = logging.WARNING) -> logging.Logger:
    """Instala (una sola vez) un handler de consola en el logger raíz.

    Se escribe en stderr para no mezclarse con la salida de la CLI.
    """

    if isinstance(level, str):
        level = logging.getLevelName(level.strip().upper())
        if not isinstance(level, int):
            level = logging.WARNING

    root = logging.getLogger()
    for handler in root.handlers:
        if getattr(handler, "name", None) == HANDLER_NAME:
            handler.setLevel(level)
            root.setLevel(level)
            return root

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.name = HANDLER_NAME
    handler.setFormatter(logging.Formatter(_FORMAT))
    root.addHandler(handler)
    root.setLevel(level)
    return root
