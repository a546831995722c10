import pytest

from pokevalutor.models.cards import card_from_api, cards_from_payload

from conftest import card_record


def test_card_from_api_normalizes_record():
    card = card_from_api(card_record("base1-58"))

    assert card.id == "base1-58"
    assert card.expansion_name == "Base"
    assert card.variant_names == ["normal"]
    assert card.image_url == "m.png"


def test_image_prefers_front_medium():
    record = card_record(
        "base1-58",
        images=[
            {"type": "back", "medium": "back.png"},
            {"type": "front", "large": "front-large.png"},
        ],
    )

    assert card_from_api(record).image_url == "front-large.png"


def test_missing_optional_fields():
    card = card_from_api({"id": 7})

    assert card.id == "7"
    assert card.name == "Unknown"
    assert card.variants == ()
    assert card.image_url == ""


@pytest.mark.parametrize("record", [{}, {"name": "Pikachu"}, None, "base1-58"])
def test_record_without_id_is_rejected(record):
    with pytest.raises(ValueError):
        card_from_api(record)


def test_payload_without_data_list():
    assert cards_from_payload({"data": None}) == []
    assert cards_from_payload({"error": "oops"}) == []
