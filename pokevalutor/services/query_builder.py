import re

from pokevalutor.models.query import (
    ByFraction,
    ByName,
    ByPrintedNumber,
    BySetAndNumber,
    SearchQuery,
)


_NEEDS_QUOTES = re.compile(r"[^A-Za-z0-9]")
_ESCAPED_CHARS = re.compile(r"""([\\'"])""")


def quote_term(value: str) -> str:
    """Quote ``value`` for the remote query syntax unless it is plain alphanumeric."""
    if _NEEDS_QUOTES.search(value):
        escaped = _ESCAPED_CHARS.sub(r"\\\1", value)
        return f'"{escaped}"'
    return value


def build_field_query(field: str, value: str) -> str:
    trimmed = str(value or "").strip()
    if not trimmed:
        return ""
    return f"{field}:{quote_term(trimmed)}"


def build_query(query: SearchQuery) -> str:
    if isinstance(query, ByFraction):
        number = build_field_query("number", query.number)
        total = build_field_query("expansion.total", query.total)
        printed_total = build_field_query("expansion.printed_total", query.total)
        return f"{number} AND ({total} OR {printed_total})"

    if isinstance(query, BySetAndNumber):
        set_id = build_field_query("expansion.id", query.set_id)
        number = build_field_query("number", query.number)
        return f"{set_id} AND {number}"

    if isinstance(query, ByPrintedNumber):
        return build_field_query("printed_number", query.value)

    if isinstance(query, ByName):
        return build_field_query("name", query.text)

    raise TypeError(f"Unsupported query: {query!r}")
