import asyncio

import httpx
from httpx import Response

from pokevalutor.models.query import ByFraction, ByPrintedNumber
from pokevalutor.models.results import (
    FetchAborted,
    FetchOk,
    NetworkFailure,
    NonStructuredResponse,
    RemoteError,
    TimeoutFailure,
)
from pokevalutor.services.fetcher import CancellationToken, FetchOrchestrator
from pokevalutor.services.scrydex_api import cache_key, query_params, search_url
from pokevalutor.utils.constants import CARD_TTL_SECONDS, SEARCH_TTL_SECONDS

from conftest import BASE_URL, card_record


async def test_success_is_cached(make_orchestrator):
    calls = []

    def handler(request):
        calls.append(request)
        return Response(200, json={"data": [card_record("base1-58")]})

    orchestrator = make_orchestrator(handler)
    url = search_url(BASE_URL)
    params = query_params("name:pikachu")

    first = await orchestrator.fetch_json(url, params, 60, CancellationToken())
    second = await orchestrator.fetch_json(url, params, 60, CancellationToken())

    assert isinstance(first, FetchOk)
    assert second == first
    assert len(calls) == 1


def test_cache_key_ignores_parameter_order():
    url = search_url(BASE_URL)

    assert cache_key(url, {"q": "a", "page": 1}) == cache_key(url, {"page": 1, "q": "a"})
    assert cache_key(url, {"q": "a"}) != cache_key(url, {"q": "b"})


async def test_remote_error_uses_payload_message(make_orchestrator):
    orchestrator = make_orchestrator(
        lambda request: Response(400, json={"error": "bad query syntax"})
    )

    result = await orchestrator.fetch_json(
        search_url(BASE_URL), query_params("name:("), 60, CancellationToken()
    )

    assert result == RemoteError(400, "bad query syntax")


async def test_remote_error_without_payload(make_orchestrator):
    orchestrator = make_orchestrator(lambda request: Response(403, text="<html>denied</html>"))

    result = await orchestrator.fetch_json(
        search_url(BASE_URL), query_params("name:x"), 60, CancellationToken()
    )

    assert result == RemoteError(403, "API error 403")


async def test_non_json_success_is_non_structured(make_orchestrator, cache):
    orchestrator = make_orchestrator(lambda request: Response(200, text="<html>hi</html>"))
    params = query_params("name:x")

    result = await orchestrator.fetch_json(search_url(BASE_URL), params, 60, CancellationToken())

    assert result == NonStructuredResponse(200)
    assert await cache.get(cache_key(search_url(BASE_URL), params)) is None


async def test_network_error(make_orchestrator):
    def handler(request):
        raise httpx.ConnectError("name resolution failed", request=request)

    orchestrator = make_orchestrator(handler)

    result = await orchestrator.fetch_json(
        search_url(BASE_URL), query_params("name:x"), 60, CancellationToken()
    )

    assert result == NetworkFailure("ConnectError")


async def test_slow_request_times_out(make_orchestrator):
    async def handler(request):
        await asyncio.sleep(5)
        return Response(200, json={"data": []})

    orchestrator = make_orchestrator(handler, timeout=0.05)

    result = await orchestrator.fetch_json(
        search_url(BASE_URL), query_params("name:x"), 60, CancellationToken()
    )

    assert result == TimeoutFailure(0.05)


async def test_number_search_treats_404_and_5xx_as_no_results(make_orchestrator):
    for status in (404, 500, 503):
        orchestrator = make_orchestrator(
            lambda request, status=status: Response(status, json={"error": "nope"})
        )

        result = await orchestrator.search_by_number(
            ByPrintedNumber(value=f"SWSH{status}"), CancellationToken()
        )

        assert result == FetchOk({"data": []})


async def test_number_search_sends_built_expression(make_orchestrator):
    seen = []

    def handler(request):
        seen.append(request.url)
        return Response(200, json={"data": []})

    orchestrator = make_orchestrator(handler)
    await orchestrator.search_by_number(ByFraction(number="4", total="102"), CancellationToken())

    assert seen[0].path == "/search"
    assert seen[0].params["q"] == (
        "number:4 AND (expansion.total:102 OR expansion.printed_total:102)"
    )
    assert seen[0].params["pageSize"] == "5"


async def test_name_search_404_retries_alternate_endpoint_once(make_orchestrator):
    seen = []

    def handler(request):
        seen.append(request.url)
        if request.url.path == "/search":
            return Response(404, json={"error": "not found"})
        return Response(200, json={"data": [card_record("base1-4", "Charizard")]})

    orchestrator = make_orchestrator(handler)
    result = await orchestrator.search_by_name("charizard", CancellationToken())

    assert isinstance(result, FetchOk)
    assert [url.path for url in seen] == ["/search", "/cards/search"]
    assert seen[1].params["name"] == "charizard"


async def test_name_search_404_on_both_endpoints_is_no_results(make_orchestrator):
    seen = []

    def handler(request):
        seen.append(request.url.path)
        return Response(404, json={"error": "not found"})

    orchestrator = make_orchestrator(handler)
    result = await orchestrator.search_by_name("missingno", CancellationToken())

    assert result == FetchOk({"data": []})
    assert seen == ["/search", "/cards/search"]


async def test_name_search_server_error_is_not_retried(make_orchestrator):
    seen = []

    def handler(request):
        seen.append(request.url.path)
        return Response(502, json={"message": "upstream down"})

    orchestrator = make_orchestrator(handler)
    result = await orchestrator.search_by_name("pikachu", CancellationToken())

    assert result == RemoteError(502, "upstream down")
    assert seen == ["/search"]


async def test_card_lookup_uses_detail_endpoint(make_orchestrator):
    seen = []

    def handler(request):
        seen.append(request.url)
        return Response(200, json={"data": card_record("base1-58")})

    orchestrator = make_orchestrator(handler)
    result = await orchestrator.get_card("base1-58", CancellationToken())

    assert isinstance(result, FetchOk)
    assert seen[0].path == "/cards/base1-58"
    assert seen[0].params["includePrices"] == "1"
    assert seen[0].params["lang"] == "en"


async def test_cancelled_token_aborts_in_flight_request(make_orchestrator):
    started = asyncio.Event()

    async def handler(request):
        started.set()
        await asyncio.sleep(5)
        return Response(200, json={"data": []})

    orchestrator = make_orchestrator(handler)
    token = CancellationToken()
    fetch = asyncio.create_task(
        orchestrator.fetch_json(search_url(BASE_URL), query_params("name:x"), 60, token)
    )
    await started.wait()
    token.cancel()

    assert await fetch == FetchAborted()


async def test_response_settling_after_cancel_is_discarded(make_orchestrator, cache):
    token = CancellationToken()

    def handler(request):
        # The newer search takes over while this response is being produced.
        token.cancel()
        return Response(200, json={"data": [card_record("base1-58")]})

    orchestrator = make_orchestrator(handler)
    params = query_params("name:pikachu")

    result = await orchestrator.fetch_json(search_url(BASE_URL), params, 60, token)

    assert result == FetchAborted()
    assert await cache.get(cache_key(search_url(BASE_URL), params)) is None


async def test_already_cancelled_token_never_hits_network(make_orchestrator):
    calls = []

    def handler(request):
        calls.append(request)
        return Response(200, json={"data": []})

    orchestrator = make_orchestrator(handler)
    token = CancellationToken()
    token.cancel()

    result = await orchestrator.fetch_json(search_url(BASE_URL), query_params("q"), 60, token)

    assert result == FetchAborted()
    assert calls == []


async def test_malformed_base_url_is_a_network_failure(cache):
    def handler(request):
        return Response(200, json={"data": card_record("base1-58")})

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        orchestrator = FetchOrchestrator(client, cache, "https://[::1")
        result = await orchestrator.get_card("base1-58", CancellationToken())

    assert result == NetworkFailure("InvalidURL")


async def test_name_search_results_live_for_the_search_ttl(make_orchestrator, clock):
    calls = []

    def handler(request):
        calls.append(request)
        return Response(200, json={"data": [card_record("base1-58")]})

    orchestrator = make_orchestrator(handler)

    await orchestrator.search_by_name("pikachu", CancellationToken())
    clock.advance(SEARCH_TTL_SECONDS - 1)
    await orchestrator.search_by_name("pikachu", CancellationToken())
    assert len(calls) == 1

    clock.advance(2)
    await orchestrator.search_by_name("pikachu", CancellationToken())
    assert len(calls) == 2


async def test_card_details_outlive_search_results(make_orchestrator, clock):
    calls = []

    def handler(request):
        calls.append(request)
        return Response(200, json={"data": card_record("base1-58")})

    orchestrator = make_orchestrator(handler)

    await orchestrator.get_card("base1-58", CancellationToken())
    clock.advance(SEARCH_TTL_SECONDS + 1)
    await orchestrator.get_card("base1-58", CancellationToken())
    assert len(calls) == 1

    clock.advance(CARD_TTL_SECONDS - SEARCH_TTL_SECONDS)
    await orchestrator.get_card("base1-58", CancellationToken())
    assert len(calls) == 2
