import asyncio
import logging
from typing import Any

from httpx import AsyncClient, InvalidURL, RequestError, Response, TimeoutException

from pokevalutor.models.query import SearchQuery
from pokevalutor.models.results import (
    FetchAborted,
    FetchOk,
    FetchResult,
    NetworkFailure,
    NonStructuredResponse,
    RemoteError,
    TimeoutFailure,
)
from pokevalutor.services.cache import ResponseCache
from pokevalutor.services.query_builder import build_field_query, build_query
from pokevalutor.services.scrydex_api import (
    alternate_search_url,
    cache_key,
    card_params,
    card_url,
    name_params,
    query_params,
    search_url,
)
from pokevalutor.utils.constants import (
    CARD_TTL_SECONDS,
    REQUEST_TIMEOUT_SECONDS,
    SEARCH_TTL_SECONDS,
    USER_AGENT,
)
from pokevalutor.utils.utils import get_api_base


LOG = logging.getLogger(__name__)


class CancellationToken:
    """Marks one logical search; cancelling it aborts the requests it started."""

    def __init__(self) -> None:
        self._cancelled = False
        self._tasks: set[asyncio.Task] = set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        if self._cancelled:
            return
        self._cancelled = True
        for task in self._tasks:
            task.cancel()

    def attach(self, task: asyncio.Task) -> None:
        if self._cancelled:
            task.cancel()
        self._tasks.add(task)

    def detach(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)


def _error_message(payload: Any, status: int) -> str:
    if isinstance(payload, dict):
        message = payload.get("error") or payload.get("message")
        if message:
            return str(message)
    return f"API error {status}"


class FetchOrchestrator:
    def __init__(
        self,
        client: AsyncClient,
        cache: ResponseCache,
        base_url: str | None = None,
        timeout: float = REQUEST_TIMEOUT_SECONDS,
    ) -> None:
        self.client = client
        self.cache = cache
        self.base_url = get_api_base(base_url)
        self.timeout = timeout

    async def _request(self, url: str, params: dict[str, Any], token: CancellationToken) -> Response:
        task = asyncio.ensure_future(self.client.get(url, params=params))
        token.attach(task)
        try:
            return await asyncio.wait_for(task, self.timeout)
        finally:
            token.detach(task)

    async def fetch_json(
        self,
        url: str,
        params: dict[str, Any],
        ttl: float,
        token: CancellationToken,
    ) -> FetchResult:
        try:
            key = cache_key(url, params)
        except InvalidURL as error:
            LOG.warning("Invalid request URL %s: %s", url, error)
            return NetworkFailure(type(error).__name__)

        cached = await self.cache.get(key)
        if token.cancelled:
            return FetchAborted()
        if isinstance(cached, dict):
            return FetchOk(cached)

        try:
            response = await self._request(url, params, token)
        except asyncio.CancelledError:
            if token.cancelled:
                LOG.debug("Request to %s aborted", url)
                return FetchAborted()
            raise
        except (asyncio.TimeoutError, TimeoutException):
            LOG.warning("Request to %s timed out after %ss", url, self.timeout)
            return TimeoutFailure(self.timeout)
        except (InvalidURL, RequestError) as error:
            LOG.warning("Request to %s failed: %r", url, error)
            return NetworkFailure(type(error).__name__)

        # The call may have settled after a newer search took over.
        if token.cancelled:
            return FetchAborted()

        status = response.status_code
        try:
            payload = response.json()
        except ValueError:
            payload = None
            if response.is_success:
                LOG.warning("Non-JSON response (%s) from %s", status, url)
                return NonStructuredResponse(status)

        if not response.is_success:
            LOG.info("Request to %s returned %s", url, status)
            return RemoteError(status, _error_message(payload, status))

        if not isinstance(payload, dict):
            return NonStructuredResponse(status)

        await self.cache.set(key, payload, ttl)
        return FetchOk(payload)

    async def search_by_number(self, query: SearchQuery, token: CancellationToken) -> FetchResult:
        expression = build_query(query)
        LOG.info("Number search: %s", expression)
        result = await self.fetch_json(
            search_url(self.base_url), query_params(expression), SEARCH_TTL_SECONDS, token
        )

        # Unknown numbers come back as 404 or upstream errors; the caller
        # moves on to a name search either way.
        if isinstance(result, RemoteError) and (result.status == 404 or result.status >= 500):
            LOG.info("Number search returned %s, treating as no results", result.status)
            return FetchOk({"data": []})
        return result

    async def search_by_name(self, name: str, token: CancellationToken) -> FetchResult:
        expression = build_field_query("name", name)
        LOG.info("Name search: %s", expression)
        result = await self.fetch_json(
            search_url(self.base_url), query_params(expression), SEARCH_TTL_SECONDS, token
        )

        retry = isinstance(result, (NetworkFailure, TimeoutFailure)) or (
            isinstance(result, RemoteError) and result.status == 404
        )
        if not retry:
            return result

        LOG.info("Name search failed with %r, retrying alternate endpoint", result)
        result = await self.fetch_json(
            alternate_search_url(self.base_url), name_params(name), SEARCH_TTL_SECONDS, token
        )
        if isinstance(result, RemoteError) and result.status == 404:
            return FetchOk({"data": []})
        return result

    async def get_card(self, card_id: str, token: CancellationToken) -> FetchResult:
        return await self.fetch_json(
            card_url(self.base_url, card_id), card_params(), CARD_TTL_SECONDS, token
        )


def make_client(timeout: float = REQUEST_TIMEOUT_SECONDS) -> AsyncClient:
    return AsyncClient(
        headers={"User-Agent": USER_AGENT, "Accept": "application/json"},
        timeout=timeout,
        follow_redirects=True,
    )
