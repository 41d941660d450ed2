"""Stripe hosted checkout adapter."""

import logging
from typing import Optional

import stripe
from django.conf import settings

from .domain import CheckoutOrder, CheckoutSession, PaymentProviderError, to_minor_units

logger = logging.getLogger(__name__)


class StripeCheckout:
    """Create one-line-item Stripe Checkout sessions for WooCommerce orders."""

    def __init__(self, secret_key: str | None = None, api_version: str | None = None, base_url: str | None = None):
        self.secret_key = secret_key or settings.STRIPE_SECRET_KEY
        self.api_version = api_version or settings.STRIPE_API_VERSION
        self.base_url = (base_url or settings.PUBLIC_BASE_URL).rstrip("/")

    def create_session(self, order: CheckoutOrder, customer_email: Optional[str] = None) -> CheckoutSession:
        """Create a checkout session charging the order total.

        Raises:
            PaymentProviderError: ``STRIPE_NOT_CONFIGURED`` without a secret
                key, ``INVALID_AMOUNT`` for a malformed total, or
                ``STRIPE_ERROR`` when the API call fails.
        """
        if not self.secret_key:
            raise PaymentProviderError("STRIPE_NOT_CONFIGURED")
        try:
            unit_amount = to_minor_units(order.total)
        except ValueError:
            raise PaymentProviderError("INVALID_AMOUNT", order.total)

        params = {
            "payment_method_types": ["card"],
            "mode": "payment",
            "line_items": [{
                "price_data": {
                    "currency": order.currency.lower(),
                    "product_data": {
                        "name": f"Order #{order.number}",
                        "description": settings.CHECKOUT_DESCRIPTION,
                    },
                    "unit_amount": unit_amount,
                },
                "quantity": 1,
            }],
            "success_url": f"{self.base_url}/order-success?order={order.order_id}&session_id={{CHECKOUT_SESSION_ID}}",
            "cancel_url": f"{self.base_url}/checkout?canceled=true",
            "metadata": {
                "order_id": str(order.order_id),
                "order_number": str(order.number),
                "source": "storefront_gateway",
                "woocommerce_order_id": str(order.order_id),
            },
        }
        if customer_email:
            params["customer_email"] = customer_email

        try:
            session = stripe.checkout.Session.create(
                api_key=self.secret_key,
                stripe_version=self.api_version,
                **params,
            )
        except stripe.StripeError as e:
            logger.error("stripe session create failed", extra={"order_id": order.order_id, "error": str(e)})
            raise PaymentProviderError("STRIPE_ERROR", str(e)) from e

        logger.info("stripe session created", extra={"order_id": order.order_id, "session_id": session.id})
        return CheckoutSession(id=session.id, url=session.url)
