from typing import Any

from pokevalutor.utils.constants import API_URL, DEFAULT_API_URL


def get_api_base(override: str | None = None) -> str:
    base = override or API_URL or DEFAULT_API_URL
    return base.strip().rstrip("/")


def pluralize(count: int, word: str) -> str:
    return f"{count} {word}{'' if count == 1 else 's'}"


def _money_symbol(currency: str) -> str:
    return "$" if currency in ("USD", "") else ""


def format_price(price: dict[str, Any]) -> str | None:
    condition = str(price["condition"]) if price.get("condition") is not None else ""
    kind = str(price["type"]) if price.get("type") is not None else ""
    currency = str(price["currency"]) if price.get("currency") is not None else ""
    symbol = _money_symbol(currency)

    bits = []
    if price.get("market") is not None:
        bits.append(f"market {symbol}{price['market']}")
    if price.get("low") is not None:
        bits.append(f"low {symbol}{price['low']}")

    if bits:
        if condition:
            prefix = f"{condition} ({kind})" if kind else condition
        else:
            prefix = f"({kind})" if kind else ""
        joined = " • ".join(bits)
        return f"{prefix}: {joined}" if prefix else joined

    # Unknown price shape, show whatever scalars it carries.
    entries = [
        f"{key} {value}"
        for key, value in price.items()
        if value is not None and not isinstance(value, (dict, list))
    ][:6]
    if entries:
        return " • ".join(entries)
    return None


def format_price_list(prices: Any) -> str:
    if not isinstance(prices, list) or not prices:
        return "No price data available."

    lines = []
    for price in prices:
        if not isinstance(price, dict):
            continue
        line = format_price(price)
        if line:
            lines.append(line)

    return "\n".join(lines) if lines else "No price data available."
