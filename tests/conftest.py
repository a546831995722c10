import pytest
from httpx import AsyncClient, MockTransport

from pokevalutor.models.cache_db import CacheStore
from pokevalutor.services.cache import ResponseCache
from pokevalutor.services.fetcher import FetchOrchestrator
from pokevalutor.utils.constants import CACHE_PREFIX


BASE_URL = "https://worker.test"


class FakeClock:
    def __init__(self, now: float = 1_700_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def card_record(card_id: str, name: str = "Pikachu", **extra) -> dict:
    record = {
        "id": card_id,
        "name": name,
        "rarity": "Common",
        "number": "58",
        "printed_number": "58/102",
        "expansion": {"id": "base1", "name": "Base"},
        "images": [{"type": "front", "small": "s.png", "medium": "m.png"}],
        "variants": [{"name": "normal", "prices": []}],
    }
    record.update(extra)
    return record


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store(tmp_path) -> CacheStore:
    return CacheStore(tmp_path / "cache.db", CACHE_PREFIX)


@pytest.fixture
def cache(store, clock) -> ResponseCache:
    return ResponseCache(store, clock=clock)


@pytest.fixture
async def make_orchestrator(cache):
    clients: list[AsyncClient] = []

    def factory(handler, timeout: float = 1.0) -> FetchOrchestrator:
        client = AsyncClient(transport=MockTransport(handler))
        clients.append(client)
        return FetchOrchestrator(client, cache, BASE_URL, timeout=timeout)

    yield factory

    for client in clients:
        await client.aclose()
