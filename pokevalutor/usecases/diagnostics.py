from dataclasses import dataclass

from httpx import AsyncClient, InvalidURL, RequestError

from pokevalutor.services.query_builder import build_field_query
from pokevalutor.services.scrydex_api import health_url, query_params, search_url


MISSING_BASE_MESSAGE = "Missing PV_API_URL. Set your worker URL in .env."


@dataclass(frozen=True)
class DiagnosticReport:
    ok: bool
    message: str


async def check_health(client: AsyncClient, base: str) -> DiagnosticReport:
    if not base:
        return DiagnosticReport(ok=False, message=MISSING_BASE_MESSAGE)

    try:
        response = await client.get(health_url(base))
    except (InvalidURL, RequestError) as error:
        return DiagnosticReport(ok=False, message=f"Health check failed: {type(error).__name__}")

    content_type = response.headers.get("content-type") or "no content-type"
    try:
        parsed = response.json()
    except ValueError:
        parsed = None

    if isinstance(parsed, dict):
        healthy = bool(parsed.get("ok"))
        info = f"ok={str(healthy).lower()} • path={parsed.get('pathname') or 'n/a'}"
    else:
        healthy = False
        info = "non-JSON"

    return DiagnosticReport(
        ok=response.is_success and healthy,
        message=f"Status {response.status_code} • {content_type} • {info}",
    )


async def check_connection(
    client: AsyncClient, base: str, name: str = "pikachu"
) -> DiagnosticReport:
    if not base:
        return DiagnosticReport(ok=False, message=MISSING_BASE_MESSAGE)

    try:
        params = query_params(build_field_query("name", name), page_size=1)
        response = await client.get(search_url(base), params=params)
    except (InvalidURL, RequestError) as error:
        return DiagnosticReport(ok=False, message=f"Test failed: {type(error).__name__}")

    content_type = response.headers.get("content-type") or "no content-type"
    count = "n/a"
    try:
        parsed = response.json()
    except ValueError:
        parsed = None
    if isinstance(parsed, dict) and isinstance(parsed.get("data"), list):
        count = str(len(parsed["data"]))

    return DiagnosticReport(
        ok=response.is_success,
        message=f"Status {response.status_code} • {content_type} • Count {count}",
    )
