"""Order-side steps around a hosted checkout.

Both steps talk to WooCommerce: loading the authoritative order before a
session is created, and marking the order paid after a PayPal capture.
"""

import logging

from apps.commerce.client import WooCommerceClient
from apps.commerce.errors import CommerceAPIError

from .domain import CheckoutOrder, PaymentProviderError

logger = logging.getLogger(__name__)


def load_checkout_order(client: WooCommerceClient, order_id: int) -> CheckoutOrder:
    """Read total, currency and number from the stored order.

    Raises:
        PaymentProviderError: ``ORDER_LOOKUP_FAILED`` when the order cannot be read.
    """
    try:
        record = client.request(f"/orders/{order_id}")
    except CommerceAPIError as e:
        raise PaymentProviderError("ORDER_LOOKUP_FAILED", str(e)) from e
    if not isinstance(record, dict) or "id" not in record:
        raise PaymentProviderError("ORDER_LOOKUP_FAILED", "unexpected order payload")
    return CheckoutOrder.from_record(record)


def mark_paid_by_paypal(client: WooCommerceClient, capture: dict, paypal_order_id: str) -> str:
    """Mark the WooCommerce order behind a completed capture as paid.

    The order id travels through PayPal as the purchase unit's ``custom_id``.
    The order note is best effort; the status update is not.

    Returns:
        str: The WooCommerce order id.

    Raises:
        PaymentProviderError: ``PAYMENT_NOT_COMPLETED`` when the capture
            status is not ``COMPLETED``, ``ORDER_UPDATE_FAILED`` when the order
            cannot be updated.
    """
    if capture.get("status") != "COMPLETED":
        raise PaymentProviderError("PAYMENT_NOT_COMPLETED", str(capture.get("status")))

    units = capture.get("purchase_units") or [{}]
    order_id = units[0].get("custom_id")
    if not order_id:
        raise PaymentProviderError("ORDER_UPDATE_FAILED", "capture without custom_id")

    transaction_id = capture.get("id")
    try:
        client.request(
            f"/orders/{order_id}",
            method="PUT",
            json={"status": "processing", "transaction_id": transaction_id, "set_paid": True},
        )
    except CommerceAPIError as e:
        raise PaymentProviderError("ORDER_UPDATE_FAILED", str(e)) from e

    try:
        client.request(
            f"/orders/{order_id}/notes",
            method="POST",
            json={"note": f"PayPal payment completed. Order ID: {paypal_order_id}, Transaction ID: {transaction_id}"},
        )
    except CommerceAPIError as e:
        logger.warning("order note failed", extra={"order_id": order_id, "status": e.status_code})

    logger.info("order marked paid", extra={"order_id": order_id, "paypal_id": paypal_order_id})
    return str(order_id)
