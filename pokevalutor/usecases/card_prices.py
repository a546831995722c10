from pokevalutor.models.cards import card_from_api
from pokevalutor.models.results import FetchOk
from pokevalutor.services.fetcher import CancellationToken, FetchOrchestrator
from pokevalutor.utils.utils import format_price_list


class PriceLookupError(Exception):
    pass


class CardPriceLookup:
    def __init__(self, orchestrator: FetchOrchestrator) -> None:
        self.orchestrator = orchestrator
        self._token: CancellationToken | None = None

    async def variant_prices(self, card_id: str) -> dict[str, str] | None:
        """Formatted price list per variant, or ``None`` if a newer lookup took over."""
        if self._token is not None:
            self._token.cancel()
        token = self._token = CancellationToken()

        result = await self.orchestrator.get_card(card_id, token)
        if token.cancelled:
            return None
        if not isinstance(result, FetchOk):
            raise PriceLookupError(f"Unable to load prices for {card_id}: {result!r}")

        # The worker sometimes wraps the record in a data envelope.
        record = result.payload.get("data", result.payload)
        try:
            card = card_from_api(record)
        except ValueError as error:
            raise PriceLookupError(f"Unexpected card payload for {card_id}") from error

        return {variant.name: format_price_list(list(variant.prices)) for variant in card.variants}
