import logging

from pokevalutor.models.cards import CardResult, SearchOutcome, cards_from_payload
from pokevalutor.models.query import classify
from pokevalutor.models.results import (
    FetchAborted,
    FetchOk,
    FetchResult,
    RemoteError,
    TimeoutFailure,
)
from pokevalutor.services.fetcher import CancellationToken, FetchOrchestrator
from pokevalutor.utils.constants import PAGE_SIZE
from pokevalutor.utils.utils import pluralize


LOG = logging.getLogger(__name__)

EMPTY_INPUT_MESSAGE = "Please enter a Pokémon name or a printed card number."
NUMBER_GUIDANCE = (
    "If your card is not displayed, please search by card number "
    "(printed number) instead."
)
TIMEOUT_MESSAGE = "The card service took too long to respond. Please try again."


class SearchResolver:
    """Turns a search term into a SearchOutcome, one live search at a time.

    Each ``resolve`` call supersedes the previous one: its token is cancelled
    before anything new is issued, and a superseded call returns ``None``
    instead of an outcome so stale results never reach the screen.
    """

    def __init__(self, orchestrator: FetchOrchestrator) -> None:
        self.orchestrator = orchestrator
        self._token: CancellationToken | None = None

    def _begin(self) -> CancellationToken:
        self.cancel()
        self._token = CancellationToken()
        return self._token

    def cancel(self) -> None:
        if self._token is not None:
            self._token.cancel()

    async def resolve(self, raw_input: str) -> SearchOutcome | None:
        token = self._begin()
        term = (raw_input or "").strip()

        if not term:
            return SearchOutcome(results=(), status_message=EMPTY_INPUT_MESSAGE)

        query = classify(term)

        if query.is_number_query:
            result = await self.orchestrator.search_by_number(query, token)
            if token.cancelled or isinstance(result, FetchAborted):
                return None

            if isinstance(result, FetchOk):
                cards = cards_from_payload(result.payload)
                if cards:
                    return _outcome(cards, f'for printed number "{term}".')
                LOG.info("No printed-number match for %r, trying name search", term)
            else:
                LOG.info("Number search for %r failed (%r), trying name search", term, result)

        result = await self.orchestrator.search_by_name(term, token)
        if token.cancelled or isinstance(result, FetchAborted):
            return None

        if not isinstance(result, FetchOk):
            return SearchOutcome(results=(), status_message=self._failure_message(result))

        cards = cards_from_payload(result.payload)
        if not cards:
            return SearchOutcome(
                results=(), status_message=f'No results found for name "{term}"'
            )

        limit_note = f" Showing up to {PAGE_SIZE} matches." if len(cards) >= PAGE_SIZE else ""
        return _outcome(cards, f'for "{term}".{limit_note} {NUMBER_GUIDANCE}')

    def _failure_message(self, result: FetchResult) -> str:
        LOG.warning("Search failed: %r", result)

        if isinstance(result, TimeoutFailure):
            return TIMEOUT_MESSAGE
        if isinstance(result, RemoteError):
            return f"Error retrieving results (HTTP {result.status}). Please try again later."
        # Connection errors and non-JSON bodies usually mean a wrong base URL.
        return (
            f"Could not reach the card service at {self.orchestrator.base_url}. "
            "Check the PV_API_URL setting."
        )


def _outcome(cards: list[CardResult], detail: str) -> SearchOutcome:
    return SearchOutcome(
        results=tuple(cards),
        status_message=f"{pluralize(len(cards), 'result')} {detail}",
    )
