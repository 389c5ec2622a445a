"""Configuración del Core.

Por qué aquí:
- Centraliza variables de entorno (pydantic-settings) sin contaminar la CLI.
- Permite que adaptadores (HTTP, favoritos, export) lean config de forma
  consistente.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

APP_DIR_NAME = "morty-catalog"


def get_user_config_dir() -> Path:
    """Directorio de configuración por usuario (cross-platform, sin dependencias)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / APP_DIR_NAME
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / APP_DIR_NAME

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / APP_DIR_NAME
    return Path.home() / ".config" / APP_DIR_NAME


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def _parse_env_lines(text: str) -> dict[str, str]:
    """Lee `KEY=value` por línea; ignora comentarios y líneas sin `=`."""

    data: dict[str, str] = {}
    for line in map(str.strip, text.splitlines()):
        if line.startswith("#"):
            continue
        key, sep, value = line.partition("=")
        key = key.strip()
        if sep and key:
            data[key] = value.strip().strip("\"'")
    return data


def write_user_env_vars(values: dict[str, str], *, env_path: Path | None = None) -> Path:
    """Escribe/actualiza variables en el .env global del usuario."""

    env_path = env_path or get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    existing: dict[str, str] = {}
    if env_path.exists():
        existing = _parse_env_lines(env_path.read_text(encoding="utf-8"))

    existing.update({k: v for k, v in values.items() if v is not None})

    lines = ["# morty-catalog user config (.env)"]
    for key in sorted(existing.keys()):
        lines.append(f"{key}={existing[key]}")
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return env_path


class AppSettings(BaseSettings):
    """Configuración de morty-catalog (prefijo `MORTY_CATALOG_`).

    Prioridad: argumentos explícitos > variables de entorno > `.env` del
    proyecto > `.env` del usuario (ver `doctor setup-api`).
    """

    model_config = SettingsConfigDict(
        env_prefix="MORTY_CATALOG_",
        extra="ignore",
        case_sensitive=False,
        # Orden: proyecto primero (dev), luego config global de usuario.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    api_base_url: str = Field(
        default="https://rickandmortyapi.com/api",
        min_length=8,
        description="Base URL de la API del catálogo.",
    )
    http_timeout_seconds: float = Field(
        default=15.0,
        gt=0,
        description="Timeout por request (segundos). Un timeout es un TransportError.",
    )
    user_agent: str = Field(
        default="morty-catalog/0.1 (+https://local)",
        min_length=1,
        description="User-Agent para las peticiones a la API.",
    )
    debounce_ms: int = Field(
        default=300,
        ge=0,
        le=10_000,
        description="Ventana de debounce para ediciones de filtro (ms).",
    )
    log_level: str = Field(
        default="WARNING",
        description="Nivel de logging (DEBUG, INFO, WARNING, ERROR).",
    )
    favorites_path: Path | None = Field(
        default=None,
        description="JSON de favoritos. Por defecto en el directorio de config del usuario.",
    )
    state_path: Path | None = Field(
        default=None,
        description="Fichero donde se persiste la query string de la sesión `browse`.",
    )
    export_dir: Path = Field(
        default=Path("exports"),
        description="Directorio por defecto para CSV/JSON exportados.",
    )

    def resolved_favorites_path(self) -> Path:
        return self.favorites_path or get_user_config_dir() / "favorites.json"

    def resolved_state_path(self) -> Path:
        return self.state_path or get_user_config_dir() / "last_query.txt"
