"""WooCommerce client for the REST API (v3) and the Store API (v1).

The REST API is called with HTTP Basic credentials (consumer key/secret) on
every request. The Store API is the session-oriented API used for cart and
checkout; it is not called with the shared credentials, and it carries cart
continuity in a ``Cart-Token`` header both ways, so ``store_request`` returns
the response headers alongside the parsed body.

Both paths raise ``CommerceAPIError`` on any non-2xx status or transport
failure. There are no retries: payment and order calls are not idempotent
upstream, so a failure is terminal for the current request.
"""

import base64
import logging
from dataclasses import dataclass
from typing import Any, Optional

import httpx
from django.conf import settings

from .errors import CommerceAPIError
from .http import default_timeout, request_headers, wordpress_url

logger = logging.getLogger(__name__)

REST_PREFIX = "/wp-json/wc/v3"
STORE_PREFIX = "/wp-json/wc/store/v1"
CART_TOKEN_HEADER = "Cart-Token"


@dataclass
class StoreResponse:
    """Parsed Store API answer.

    Attributes:
        data: Decoded JSON body.
        headers: Upstream response headers (case-insensitive mapping).
    """

    data: Any
    headers: httpx.Headers

    @property
    def cart_token(self) -> Optional[str]:
        return self.headers.get(CART_TOKEN_HEADER)


def _decode(resp: httpx.Response) -> Any:
    if not resp.content:
        return None
    return resp.json()


class WooCommerceClient:
    """HTTP client for the commerce backend."""

    def __init__(
        self,
        base_url: str | None = None,
        consumer_key: str | None = None,
        consumer_secret: str | None = None,
        timeout: float | None = None,
    ):
        self.base_url = (base_url or wordpress_url()).rstrip("/")
        self.consumer_key = consumer_key if consumer_key is not None else settings.WOO_CONSUMER_KEY
        self.consumer_secret = consumer_secret if consumer_secret is not None else settings.WOO_CONSUMER_SECRET
        self.timeout = timeout or default_timeout()

    @property
    def configured(self) -> bool:
        return bool(self.base_url and self.consumer_key and self.consumer_secret)

    def _auth_header(self) -> str:
        raw = f"{self.consumer_key}:{self.consumer_secret}".encode("utf-8")
        return "Basic " + base64.b64encode(raw).decode("ascii")

    def _send(self, method: str, url: str, headers: dict, json=None, content=None) -> httpx.Response:
        try:
            with httpx.Client(timeout=self.timeout) as client:
                return client.request(method, url, headers=headers, json=json, content=content)
        except httpx.RequestError as e:
            logger.error("commerce backend unreachable", extra={"url": url, "method": method, "error": str(e)})
            raise CommerceAPIError(None, str(e)) from e

    def request(self, endpoint: str, method: str = "GET", json: Any = None, content: bytes | None = None) -> Any:
        """Call the authenticated WooCommerce REST API.

        Args:
            endpoint: Path below ``/wp-json/wc/v3``, including any query
                string (e.g. ``/orders/42`` or ``/customers?email=x``).
            method: HTTP method.
            json: Optional JSON-serializable body.
            content: Optional raw body, forwarded byte for byte.

        Returns:
            The decoded JSON body (``None`` for an empty body).

        Raises:
            CommerceAPIError: On a non-2xx status or a transport error.
        """
        url = f"{self.base_url}{REST_PREFIX}{endpoint}"
        headers = request_headers({
            "Authorization": self._auth_header(),
            "Content-Type": "application/json",
        })
        resp = self._send(method, url, headers, json=json, content=content)
        if not resp.is_success:
            logger.error(
                "woocommerce request failed",
                extra={"url": url, "method": method, "status": resp.status_code, "body": resp.text[:500]},
            )
            raise CommerceAPIError(resp.status_code, resp.reason_phrase, resp.text)
        return _decode(resp)

    def store_request(
        self,
        endpoint: str,
        method: str = "GET",
        json: Any = None,
        content: bytes | None = None,
        cart_token: str | None = None,
    ) -> StoreResponse:
        """Call the WooCommerce Store API.

        Args:
            endpoint: Path below ``/wp-json/wc/store/v1`` with query string.
            method: HTTP method.
            json: Optional JSON-serializable body.
            content: Optional raw body.
            cart_token: Cart session token to send as ``Cart-Token``.

        Returns:
            StoreResponse: Decoded body and the upstream headers.

        Raises:
            CommerceAPIError: On a non-2xx status or a transport error.
        """
        url = f"{self.base_url}{STORE_PREFIX}{endpoint}"
        extra = {"Content-Type": "application/json"}
        if cart_token:
            extra[CART_TOKEN_HEADER] = cart_token
        resp = self._send(method, url, request_headers(extra), json=json, content=content)
        if not resp.is_success:
            logger.error(
                "store api request failed",
                extra={"url": url, "method": method, "status": resp.status_code, "body": resp.text[:500]},
            )
            raise CommerceAPIError(resp.status_code, resp.reason_phrase, resp.text)
        return StoreResponse(data=_decode(resp), headers=resp.headers)

    def wp_request(self, path: str, bearer: str | None = None) -> Any:
        """GET a WordPress REST route (``/wp-json/...``) without shop credentials.

        Used for the custom ``blackboard/v1`` routes, which authorize by the
        visitor's own JWT when one is given.

        Raises:
            CommerceAPIError: On a non-2xx status or a transport error.
        """
        url = f"{self.base_url}{path}"
        extra = {"Accept": "application/json"}
        if bearer:
            extra["Authorization"] = f"Bearer {bearer}"
        resp = self._send("GET", url, request_headers(extra))
        if not resp.is_success:
            logger.error(
                "wordpress request failed",
                extra={"url": url, "status": resp.status_code, "body": resp.text[:500]},
            )
            raise CommerceAPIError(resp.status_code, resp.reason_phrase, resp.text)
        return _decode(resp)


def get_woo_client() -> WooCommerceClient:
    """Return a client bound to the current settings."""
    return WooCommerceClient()
