"""Domain types and ports for hosted checkout.

The storefront never charges cards itself. It asks a provider (Stripe or
PayPal) for a hosted checkout session and hands the redirect URL back to the
browser. The amount, currency and number always come from the stored order
record, never from the caller.
"""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Optional, Protocol

CENT = Decimal("0.01")


class PaymentProviderError(Exception):
    """A payment provider (or the order lookup behind it) failed.

    Attributes:
        code: Short error code, e.g. ``STRIPE_ERROR`` or ``PAYPAL_TOKEN_FAILED``.
        detail: Free-form detail for logs; never shown to callers.
    """

    def __init__(self, code: str, detail: str = ""):
        super().__init__(code)
        self.code = code
        self.detail = detail


# ---- Entities / DTOs ----
@dataclass(frozen=True)
class CheckoutOrder:
    """The slice of a WooCommerce order that a checkout session needs.

    Attributes:
        order_id: WooCommerce order id.
        number: Human-facing order number.
        total: Order total as the decimal string WooCommerce stores.
        currency: ISO currency code as stored on the order.
    """

    order_id: int
    number: str
    total: str
    currency: str

    @classmethod
    def from_record(cls, record: dict) -> "CheckoutOrder":
        return cls(
            order_id=int(record["id"]),
            number=str(record.get("number") or record["id"]),
            total=str(record.get("total") or "0"),
            currency=str(record.get("currency") or "EUR"),
        )


@dataclass(frozen=True)
class CheckoutSession:
    """A hosted checkout created at a provider.

    Attributes:
        id: Provider-side id (Stripe session id or PayPal order id).
        url: Where the browser must go to pay.
    """

    id: str
    url: Optional[str]


# ---- Ports ----
class CheckoutProvider(Protocol):
    def create_session(self, order: CheckoutOrder, customer_email: Optional[str] = None) -> CheckoutSession:
        raise NotImplementedError()


# ---- Amount helpers ----
def _to_decimal(total: str) -> Decimal:
    try:
        value = Decimal(str(total).strip())
    except InvalidOperation:
        raise ValueError("INVALID_AMOUNT")
    if not value.is_finite() or value < 0:
        raise ValueError("INVALID_AMOUNT")
    return value


def to_minor_units(total: str) -> int:
    """Convert a decimal amount string into integer cents.

    Rounds half up at the cent, on the decimal value (not a float), so
    ``"19.99"`` gives 1999 and ``"1.005"`` gives 101.

    Raises:
        ValueError: ``INVALID_AMOUNT`` for non-numeric or negative input.
    """
    cents = _to_decimal(total).quantize(CENT, rounding=ROUND_HALF_UP) * 100
    return int(cents)


def two_decimals(total: str) -> str:
    """Decimal amount string with exactly two fraction digits (``"49"`` -> ``"49.00"``)."""
    return str(_to_decimal(total).quantize(CENT, rounding=ROUND_HALF_UP))


def paypal_currency(currency: str) -> str:
    # only USD and EUR are configured at PayPal
    return "USD" if currency == "USD" else "EUR"
