"""Modelos del dominio (Pydantic v2).

Por qué Pydantic en el dominio:
- Validación en el borde (payload de la API, query string) sin acoplar el
  Core a librerías de I/O.
- Igualdad estructural gratis: dos `FilterState` con los mismos campos son
  iguales, que es lo que usa el motor para no repetir consultas.

Nota:
- Estos modelos describen *qué* es la información, no *cómo* se obtiene.
"""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import Any, Mapping

from pydantic import BaseModel, Field, field_validator
from pydantic.config import ConfigDict


class CharacterStatus(str, Enum):
    """Estado vital tal y como lo devuelve la API."""

    ALIVE = "Alive"
    DEAD = "Dead"
    UNKNOWN = "unknown"

    @classmethod
    def _missing_(cls, value: object) -> "CharacterStatus | None":
        if isinstance(value, str):
            lowered = value.strip().lower()
            for member in cls:
                if member.value.lower() == lowered:
                    return member
        return None


class CharacterGender(str, Enum):
    """Género tal y como lo devuelve la API."""

    FEMALE = "Female"
    MALE = "Male"
    GENDERLESS = "Genderless"
    UNKNOWN = "unknown"

    @classmethod
    def _missing_(cls, value: object) -> "CharacterGender | None":
        if isinstance(value, str):
            lowered = value.strip().lower()
            for member in cls:
                if member.value.lower() == lowered:
                    return member
        return None


# Campos que el endpoint remoto entiende; el rango de fechas es solo cliente.
REMOTE_FIELDS: tuple[str, ...] = ("name", "status", "species", "gender")

# Nombre del campo -> clave en la representación persistida (query string).
QUERY_KEYS: dict[str, str] = {
    "name": "name",
    "status": "status",
    "species": "species",
    "gender": "gender",
    "created_start": "createdStart",
    "created_end": "createdEnd",
}


class FilterState(BaseModel):
    """Predicados de consulta normalizados.

    Reglas:
    - Campo ausente = sin restricción.
    - Cadena vacía o en blanco se normaliza a `None` (equivale a ausente).
    - `FilterState()` es el filtro vacío canónico.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str | None = Field(default=None, description="Subcadena del nombre.")
    status: CharacterStatus | None = Field(default=None, description="Estado vital.")
    species: str | None = Field(default=None, description="Especie exacta (según la API).")
    gender: CharacterGender | None = Field(default=None, description="Género.")
    created_start: date | None = Field(
        default=None,
        description="Inicio (inclusive) del rango de creación; se filtra en cliente.",
    )
    created_end: date | None = Field(
        default=None,
        description="Fin (inclusive) del rango de creación; se filtra en cliente.",
    )

    @field_validator("name", "species", "status", "gender", "created_start", "created_end", mode="before")
    @classmethod
    def _blank_is_absent(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = value.strip()
            if not value:
                return None
        return value

    @field_validator("created_start", "created_end", mode="before")
    @classmethod
    def _datetime_to_date(cls, value: Any) -> Any:
        if isinstance(value, datetime):
            return value.date()
        return value

    @classmethod
    def empty(cls) -> "FilterState":
        return cls()

    @property
    def is_empty(self) -> bool:
        return self == FilterState()

    def merge(self, **changes: Any) -> "FilterState":
        """Devuelve un filtro nuevo con los campos indicados reemplazados."""

        unknown = set(changes) - set(type(self).model_fields)
        if unknown:
            raise ValueError(f"Unknown filter fields: {', '.join(sorted(unknown))}")
        data = self.model_dump()
        data.update(changes)
        return type(self).model_validate(data)

    def remote(self) -> "FilterState":
        """Solo la parte que el endpoint remoto puede expresar."""

        return self.model_copy(update={"created_start": None, "created_end": None})

    def remote_params(self) -> dict[str, str]:
        params: dict[str, str] = {}
        for field_name in REMOTE_FIELDS:
            value = getattr(self, field_name)
            if value is None:
                continue
            params[field_name] = value.value if isinstance(value, Enum) else str(value)
        return params

    def to_query(self) -> dict[str, str]:
        """Representación mínima para persistir (omite campos vacíos)."""

        out: dict[str, str] = {}
        for field_name, key in QUERY_KEYS.items():
            value = getattr(self, field_name)
            if value is None:
                continue
            if isinstance(value, Enum):
                out[key] = value.value
            elif isinstance(value, date):
                out[key] = value.isoformat()
            else:
                out[key] = str(value)
        return out

    @classmethod
    def from_query(cls, params: Mapping[str, str]) -> "FilterState":
        data = {field_name: params.get(key) for field_name, key in QUERY_KEYS.items()}
        return cls.model_validate(data)


class PageMeta(BaseModel):
    """Metadatos de paginación; se reemplazan enteros en cada respuesta."""

    model_config = ConfigDict(frozen=True)

    total_count: int = Field(default=0, ge=0)
    total_pages: int = Field(default=0, ge=0)


class Location(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str = ""
    url: str = ""


class Character(BaseModel):
    """Personaje del catálogo. Inmutable una vez recibido."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    id: int = Field(..., ge=1, description="Identidad estable en la API.")
    name: str = Field(..., description="Nombre del personaje.")
    status: CharacterStatus = Field(default=CharacterStatus.UNKNOWN)
    species: str = Field(default="")
    type: str = Field(default="", description="Subespecie/variante (a menudo vacío).")
    gender: CharacterGender = Field(default=CharacterGender.UNKNOWN)
    origin: Location = Field(default_factory=Location)
    location: Location = Field(default_factory=Location)
    image: str = Field(default="")
    episode: list[str] = Field(default_factory=list)
    url: str = Field(default="")
    created: datetime = Field(..., description="Momento de creación en la API (ISO 8601).")


class CollectionPage(BaseModel):
    """Una página del catálogo remoto ya normalizada."""

    model_config = ConfigDict(frozen=True)

    items: list[Character] = Field(default_factory=list)
    total_count: int = Field(default=0, ge=0)
    total_pages: int = Field(default=0, ge=0)

    @property
    def meta(self) -> PageMeta:
        return PageMeta(total_count=self.total_count, total_pages=self.total_pages)

    @classmethod
    def from_api(cls, payload: Mapping[str, Any]) -> "CollectionPage":
        """Construye la página desde el sobre `{info: {...}, results: [...]}`."""

        info = payload.get("info") or {}
        return cls(
            items=[Character.model_validate(raw) for raw in payload.get("results") or []],
            total_count=int(info.get("count") or 0),
            total_pages=int(info.get("pages") or 0),
        )
