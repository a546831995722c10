from typing import Any
from urllib.parse import quote

from httpx import URL

from pokevalutor.utils.constants import CACHE_PREFIX, LANG, PAGE_SIZE


# Endpoints of the worker that proxies the Scrydex Pokémon card API.


def search_url(base: str) -> str:
    return f"{base}/search"


def alternate_search_url(base: str) -> str:
    return f"{base}/cards/search"


def card_url(base: str, card_id: str) -> str:
    return f"{base}/cards/{quote(card_id, safe='')}"


def health_url(base: str) -> str:
    return f"{base}/health"


def page_params(page_size: int = PAGE_SIZE, lang: str = LANG) -> dict[str, Any]:
    return {"page": 1, "pageSize": page_size, "lang": lang}


def query_params(expression: str, page_size: int = PAGE_SIZE) -> dict[str, Any]:
    return {"q": expression, **page_params(page_size)}


def name_params(name: str, page_size: int = PAGE_SIZE) -> dict[str, Any]:
    return {"name": name, **page_params(page_size)}


def card_params(lang: str = LANG) -> dict[str, Any]:
    return {"includePrices": 1, "lang": lang}


def cache_key(url: str, params: dict[str, Any] | None = None) -> str:
    """Key for a fully resolved request; parameter order does not matter."""
    resolved = URL(url, params=sorted((params or {}).items()))
    return f"{CACHE_PREFIX}url:{resolved}"
