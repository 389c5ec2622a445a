import asyncio
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

# Keep the suite runnable without an editable install.
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from core.domain.models import Character, CollectionPage, FilterState  # noqa: E402


def make_character(
    character_id: int,
    name: str = "Rick Sanchez",
    *,
    created: str = "2017-11-04T18:48:46.250Z",
    status: str = "Alive",
    species: str = "Human",
    gender: str = "Male",
) -> Character:
    return Character.model_validate(
        {
            "id": character_id,
            "name": name,
            "status": status,
            "species": species,
            "type": "",
            "gender": gender,
            "origin": {"name": "Earth (C-137)", "url": "https://rickandmortyapi.com/api/location/1"},
            "location": {"name": "Citadel of Ricks", "url": "https://rickandmortyapi.com/api/location/3"},
            "image": f"https://rickandmortyapi.com/api/character/avatar/{character_id}.jpeg",
            "episode": ["https://rickandmortyapi.com/api/episode/1"],
            "url": f"https://rickandmortyapi.com/api/character/{character_id}",
            "created": created,
        }
    )


def make_page(ids, *, total_pages: int, total_count: int | None = None) -> CollectionPage:
    items = [make_character(i, f"Character {i}") for i in ids]
    return CollectionPage(
        items=items,
        total_count=total_count if total_count is not None else total_pages * 20,
        total_pages=total_pages,
    )


class PagedClient:
    """Answers immediately from a fixed number of 2-item pages."""

    def __init__(self, total_pages: int = 3, *, fail_pages=()):
        self.total_pages = total_pages
        self.fail_pages = set(fail_pages)
        self.calls: list[tuple[FilterState, int]] = []

    async def fetch_page(self, filter: FilterState, page: int) -> CollectionPage:
        self.calls.append((filter, page))
        if page in self.fail_pages:
            from core.domain.errors import TransportError

            raise TransportError("HTTP 500 requesting /character", status_code=500)
        first = (page - 1) * 2 + 1
        return make_page([first, first + 1], total_pages=self.total_pages)


class ScriptedClient:
    """Each call blocks until the test resolves or fails it."""

    def __init__(self):
        self.calls: list[tuple[FilterState, int]] = []
        self.futures: list[asyncio.Future] = []

    async def fetch_page(self, filter: FilterState, page: int) -> CollectionPage:
        future = asyncio.get_running_loop().create_future()
        self.calls.append((filter, page))
        self.futures.append(future)
        return await future

    def resolve(self, index: int, result: CollectionPage) -> None:
        self.futures[index].set_result(result)

    def fail(self, index: int, exc: BaseException) -> None:
        self.futures[index].set_exception(exc)


@pytest.fixture
def character_factory():
    return make_character
