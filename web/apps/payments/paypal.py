"""PayPal Orders v2 adapter.

Each call fetches a fresh OAuth2 client-credentials token; tokens are not
cached across requests.
"""

import logging
import re
from typing import Optional
from urllib.parse import quote

import httpx
from django.conf import settings

from apps.commerce.http import default_timeout, request_headers

from .domain import CheckoutOrder, CheckoutSession, PaymentProviderError, paypal_currency, two_decimals

logger = logging.getLogger(__name__)

LIVE_API = "https://api-m.paypal.com"
SANDBOX_API = "https://api-m.sandbox.paypal.com"

# PayPal order ids are short upper-case alphanumerics
ORDER_ID_RE = re.compile(r"[A-Za-z0-9-]{1,64}")


def api_base(mode: str) -> str:
    return LIVE_API if mode == "live" else SANDBOX_API


def approve_link(links) -> Optional[str]:
    """``href`` of the link whose ``rel`` is ``approve``, if any."""
    for link in links or []:
        if link.get("rel") == "approve":
            return link.get("href")
    return None


class PayPalCheckout:
    """Create and capture PayPal orders for WooCommerce orders."""

    def __init__(
        self,
        client_id: str | None = None,
        secret: str | None = None,
        mode: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
    ):
        self.client_id = client_id or settings.PAYPAL_CLIENT_ID
        self.secret = secret or settings.PAYPAL_SECRET
        self.api = api_base(mode or settings.PAYPAL_MODE)
        self.base_url = (base_url or settings.PUBLIC_BASE_URL).rstrip("/")
        self.timeout = timeout or default_timeout()

    def _post(self, client: httpx.Client, url: str, **kwargs) -> httpx.Response:
        try:
            return client.post(url, **kwargs)
        except httpx.RequestError as e:
            logger.error("paypal unreachable", extra={"url": url, "error": str(e)})
            raise PaymentProviderError("PAYPAL_UNREACHABLE", str(e)) from e

    def _access_token(self, client: httpx.Client) -> str:
        """Client-credentials token for one request.

        Raises:
            PaymentProviderError: ``PAYPAL_NOT_CONFIGURED`` or ``PAYPAL_TOKEN_FAILED``.
        """
        if not (self.client_id and self.secret):
            raise PaymentProviderError("PAYPAL_NOT_CONFIGURED")
        resp = self._post(
            client,
            f"{self.api}/v1/oauth2/token",
            auth=(self.client_id, self.secret),
            data={"grant_type": "client_credentials"},
            headers=request_headers({"Accept": "application/json"}),
        )
        if not resp.is_success:
            logger.error("paypal token failed", extra={"status": resp.status_code, "body": resp.text[:500]})
            raise PaymentProviderError("PAYPAL_TOKEN_FAILED", resp.text)
        token = resp.json().get("access_token")
        if not token:
            raise PaymentProviderError("PAYPAL_TOKEN_FAILED", "no access_token in response")
        return token

    def create_session(self, order: CheckoutOrder, customer_email: Optional[str] = None) -> CheckoutSession:
        """Create a PayPal order with intent CAPTURE.

        Returns:
            CheckoutSession: PayPal order id and the buyer approval link.

        Raises:
            PaymentProviderError: ``INVALID_AMOUNT``, token failures, or
                ``PAYPAL_ORDER_FAILED`` for a non-2xx answer.
        """
        try:
            value = two_decimals(order.total)
        except ValueError:
            raise PaymentProviderError("INVALID_AMOUNT", order.total)

        payload = {
            "intent": "CAPTURE",
            "purchase_units": [{
                "reference_id": str(order.number),
                "description": settings.CHECKOUT_DESCRIPTION,
                "custom_id": str(order.order_id),
                "amount": {"currency_code": paypal_currency(order.currency), "value": value},
            }],
            "application_context": {
                "brand_name": settings.CHECKOUT_BRAND_NAME,
                "return_url": f"{self.base_url}/api/capture-paypal-payment",
                "cancel_url": f"{self.base_url}/checkout?canceled=true",
            },
        }

        with httpx.Client(timeout=self.timeout) as client:
            token = self._access_token(client)
            resp = self._post(
                client,
                f"{self.api}/v2/checkout/orders",
                json=payload,
                headers=request_headers({"Authorization": f"Bearer {token}"}),
            )
        if not resp.is_success:
            logger.error("paypal order failed", extra={"order_id": order.order_id, "status": resp.status_code, "body": resp.text[:500]})
            raise PaymentProviderError("PAYPAL_ORDER_FAILED", resp.text)

        data = resp.json()
        logger.info("paypal order created", extra={"order_id": order.order_id, "paypal_id": data.get("id")})
        return CheckoutSession(id=data.get("id"), url=approve_link(data.get("links")))

    def capture(self, paypal_order_id: str) -> dict:
        """Capture an approved PayPal order and return PayPal's capture body.

        Raises:
            PaymentProviderError: ``INVALID_PAYPAL_ORDER_ID``, token failures or
                ``PAYPAL_CAPTURE_FAILED``.
        """
        if not ORDER_ID_RE.fullmatch(paypal_order_id or ""):
            raise PaymentProviderError("INVALID_PAYPAL_ORDER_ID", str(paypal_order_id)[:64])
        with httpx.Client(timeout=self.timeout) as client:
            token = self._access_token(client)
            resp = self._post(
                client,
                f"{self.api}/v2/checkout/orders/{quote(paypal_order_id, safe='')}/capture",
                headers=request_headers({
                    "Authorization": f"Bearer {token}",
                    "Content-Type": "application/json",
                }),
            )
        if not resp.is_success:
            logger.error("paypal capture failed", extra={"paypal_id": paypal_order_id, "status": resp.status_code, "body": resp.text[:500]})
            raise PaymentProviderError("PAYPAL_CAPTURE_FAILED", resp.text)
        return resp.json()
