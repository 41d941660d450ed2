"""Display currency selection and price formatting."""

from decimal import Decimal, ROUND_HALF_UP
from enum import Enum
from typing import Optional, Union

from .domain import parse_price

PriceLike = Union[str, Decimal, int, float, None]


class Currency(str, Enum):
    USD = "USD"
    EUR = "EUR"


SYMBOLS = {Currency.USD: "$", Currency.EUR: "€"}


def _price(raw: PriceLike) -> Optional[Decimal]:
    if raw is None or raw == "":
        return None
    return parse_price(raw)


def select_price(currency: Currency, usd: PriceLike, eur: PriceLike) -> Optional[Decimal]:
    """The selected currency's price, else the other one, else ``None``."""
    usd_price, eur_price = _price(usd), _price(eur)
    if Currency(currency) == Currency.USD:
        return usd_price if usd_price is not None else eur_price
    return eur_price if eur_price is not None else usd_price


def format_price(currency: Currency, usd: PriceLike, eur: PriceLike) -> str:
    """``"$49.00"`` / ``"€49.00"``; empty string when no price is known."""
    amount = select_price(currency, usd, eur)
    if amount is None:
        return ""
    amount = amount.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    return f"{SYMBOLS[Currency(currency)]}{amount:,.2f}"
