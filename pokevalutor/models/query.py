import re
from dataclasses import dataclass


SET_AND_NUMBER_PATTERN = re.compile(r"^[A-Za-z0-9]+-[A-Za-z0-9]+$")
FRACTION_PATTERN = re.compile(r"^(\d+)/(\d+)$")
# Plain digits ("101") or a printed token mixing letters and digits ("SWSH101").
PRINTED_NUMBER_PATTERN = re.compile(r"^(?=[A-Za-z]*\d)[A-Za-z0-9]+$")


@dataclass(frozen=True)
class ByPrintedNumber:
    value: str

    is_number_query = True


@dataclass(frozen=True)
class BySetAndNumber:
    set_id: str
    number: str

    is_number_query = True


@dataclass(frozen=True)
class ByFraction:
    number: str
    total: str

    is_number_query = True


@dataclass(frozen=True)
class ByName:
    text: str

    is_number_query = False


SearchQuery = ByPrintedNumber | BySetAndNumber | ByFraction | ByName


def classify(raw: str) -> SearchQuery:
    """Map a search term onto the query shape it most likely denotes.

    Total and pure: every string yields exactly one variant, with free text
    as the fallback. Empty input comes back as an empty ``ByName`` and is
    expected to be rejected by the caller before searching.
    """
    text = (raw or "").strip()

    if SET_AND_NUMBER_PATTERN.match(text):
        set_id, number = text.split("-", 1)
        return BySetAndNumber(set_id=set_id, number=number)

    fraction = FRACTION_PATTERN.match(text)
    if fraction:
        number = fraction.group(1).lstrip("0") or "0"
        return ByFraction(number=number, total=fraction.group(2))

    if PRINTED_NUMBER_PATTERN.match(text):
        return ByPrintedNumber(value=text)

    return ByName(text=text)
