import logging
from dataclasses import dataclass
from typing import Any


LOG = logging.getLogger(__name__)


@dataclass(frozen=True)
class CardImage:
    type: str
    small: str = ""
    medium: str = ""
    large: str = ""


@dataclass(frozen=True)
class CardVariant:
    name: str
    prices: tuple[dict[str, Any], ...] = ()


@dataclass(frozen=True)
class CardResult:
    id: str
    name: str
    rarity: str = ""
    number: str = ""
    printed_number: str = ""
    expansion_id: str = ""
    expansion_name: str = ""
    images: tuple[CardImage, ...] = ()
    variants: tuple[CardVariant, ...] = ()

    @property
    def variant_names(self) -> list[str]:
        return [variant.name for variant in self.variants]

    @property
    def image_url(self) -> str:
        """Medium front image, falling back to any size of any image."""
        front = next((i for i in self.images if i.type.lower() == "front"), None)
        candidates = [front] if front else []
        candidates += list(self.images[:1])

        for image in candidates:
            url = image.medium or image.large or image.small
            if url:
                return url
        return ""


@dataclass(frozen=True)
class SearchOutcome:
    results: tuple[CardResult, ...] = ()
    status_message: str = ""


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def _parse_images(raw: Any) -> tuple[CardImage, ...]:
    if not isinstance(raw, list):
        return ()
    return tuple(
        CardImage(
            type=_text(image.get("type")),
            small=_text(image.get("small")),
            medium=_text(image.get("medium")),
            large=_text(image.get("large")),
        )
        for image in raw
        if isinstance(image, dict)
    )


def _parse_variants(raw: Any) -> tuple[CardVariant, ...]:
    if not isinstance(raw, list):
        return ()
    variants = []
    for variant in raw:
        if not isinstance(variant, dict) or not variant.get("name"):
            continue
        prices = variant.get("prices")
        variants.append(
            CardVariant(
                name=str(variant["name"]),
                prices=tuple(p for p in prices if isinstance(p, dict))
                if isinstance(prices, list)
                else (),
            )
        )
    return tuple(variants)


def card_from_api(record: Any) -> CardResult:
    if not isinstance(record, dict) or not record.get("id"):
        raise ValueError("card record without an id")

    expansion = record.get("expansion")
    if not isinstance(expansion, dict):
        expansion = {}

    return CardResult(
        id=str(record["id"]),
        name=_text(record.get("name")) or "Unknown",
        rarity=_text(record.get("rarity")),
        number=_text(record.get("number")),
        printed_number=_text(record.get("printed_number")),
        expansion_id=_text(expansion.get("id")),
        expansion_name=_text(expansion.get("name")),
        images=_parse_images(record.get("images")),
        variants=_parse_variants(record.get("variants")),
    )


def cards_from_payload(payload: dict[str, Any]) -> list[CardResult]:
    records = payload.get("data")
    if not isinstance(records, list):
        return []

    cards: list[CardResult] = []
    for record in records:
        try:
            cards.append(card_from_api(record))
        except ValueError:
            LOG.warning("Skipping malformed card record: %r", record)
    return cards
