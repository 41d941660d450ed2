"""WordPress JWT login and profile lookup.

The JWT Authentication plugin exchanges a username/password for a token at
``/wp-json/jwt-auth/v1/token``. The token is then used as a bearer token for
``/wp-json/wp/v2/users/me``. The two answers are merged into the profile the
gateway keeps in its session. Tokens are never refreshed or revoked here.
"""

import logging
from typing import Any

import httpx

from apps.commerce.client import WooCommerceClient
from apps.commerce.errors import CommerceAPIError
from apps.commerce.http import default_timeout, request_headers, wordpress_url

from .session import IdentitySession

logger = logging.getLogger(__name__)

TOKEN_PATH = "/wp-json/jwt-auth/v1/token"
ME_PATH = "/wp-json/wp/v2/users/me"

# Error codes/messages WordPress returns when application-password or 2FA
# plugins have disabled API login for the account.
TWO_FACTOR_CODES = {
    "[jwt_auth] invalid_application_credentials",
    "jwt_auth_invalid_application_credentials",
}
TWO_FACTOR_MARKERS = ("API-Anmeldung", "API login disabled", "deaktiviert")


class WordPressAuthError(Exception):
    """Login failed.

    Attributes:
        code: ``INVALID_CREDENTIALS``, ``2FA_NOT_SUPPORTED`` or
            ``UPSTREAM_UNAVAILABLE``.
    """

    def __init__(self, code: str, detail: str = ""):
        super().__init__(code)
        self.code = code
        self.detail = detail


def _is_two_factor_error(data: dict) -> bool:
    code = str(data.get("code") or "")
    message = str(data.get("message") or "")
    return code in TWO_FACTOR_CODES or any(m in message for m in TWO_FACTOR_MARKERS)


def _json_or_empty(resp: httpx.Response) -> dict:
    try:
        data = resp.json()
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {}


class WordPressAuthClient:
    """Client for the WordPress identity endpoints."""

    def __init__(self, base_url: str | None = None, timeout: float | None = None, woo: WooCommerceClient | None = None):
        self.base_url = (base_url or wordpress_url()).rstrip("/")
        self.timeout = timeout or default_timeout()
        self.woo = woo or WooCommerceClient(base_url=self.base_url)

    def obtain_token(self, username: str, password: str) -> dict:
        """Exchange credentials for a JWT.

        Returns:
            dict: The token endpoint payload (``token``, ``user_email``,
            ``user_nicename``, ``user_display_name``).

        Raises:
            WordPressAuthError: On rejected credentials or transport errors.
        """
        url = f"{self.base_url}{TOKEN_PATH}"
        try:
            with httpx.Client(timeout=self.timeout) as client:
                resp = client.request(
                    "POST", url,
                    json={"username": username, "password": password},
                    headers=request_headers({"Content-Type": "application/json"}),
                )
        except httpx.RequestError as e:
            logger.error("wordpress token endpoint unreachable", extra={"error": str(e)})
            raise WordPressAuthError("UPSTREAM_UNAVAILABLE", str(e)) from e

        data = _json_or_empty(resp)
        if not resp.is_success or not data.get("token"):
            if _is_two_factor_error(data):
                logger.info("login rejected: api login disabled for account")
                raise WordPressAuthError("2FA_NOT_SUPPORTED", str(data.get("message") or ""))
            logger.info("login rejected", extra={"status": resp.status_code})
            raise WordPressAuthError("INVALID_CREDENTIALS", str(data.get("message") or ""))
        return data

    def current_user(self, token: str) -> dict:
        """Fetch the profile of the token's owner.

        Raises:
            WordPressAuthError: When the profile cannot be read.
        """
        url = f"{self.base_url}{ME_PATH}"
        try:
            with httpx.Client(timeout=self.timeout) as client:
                resp = client.request("GET", url, headers=request_headers({"Authorization": f"Bearer {token}"}))
        except httpx.RequestError as e:
            raise WordPressAuthError("UPSTREAM_UNAVAILABLE", str(e)) from e
        if not resp.is_success:
            logger.error("users/me failed", extra={"status": resp.status_code, "body": resp.text[:500]})
            raise WordPressAuthError("UPSTREAM_UNAVAILABLE", resp.reason_phrase)
        return _json_or_empty(resp)

    def customer_profile(self, user_id: Any) -> dict:
        """Best-effort WooCommerce customer record for first/last name.

        A failure here never fails the login; an empty dict is returned.
        """
        try:
            return self.woo.request(f"/customers/{user_id}") or {}
        except CommerceAPIError as e:
            logger.warning("customer profile unavailable", extra={"user_id": user_id, "status": e.status_code})
            return {}

    def login(self, username: str, password: str) -> IdentitySession:
        """Run the full login exchange and build the session object."""
        token_data = self.obtain_token(username, password)
        token = token_data["token"]
        user = self.current_user(token)
        user_id = user.get("id")
        if user_id is None:
            raise WordPressAuthError("UPSTREAM_UNAVAILABLE", "profile without id")
        customer = self.customer_profile(user_id)
        return IdentitySession(
            jwt=token,
            user_id=str(user_id),
            username=user.get("username") or token_data.get("user_nicename") or "",
            email=user.get("email") or token_data.get("user_email") or "",
            name=user.get("name") or token_data.get("user_display_name") or "",
            first_name=customer.get("first_name") or user.get("first_name") or "",
            last_name=customer.get("last_name") or user.get("last_name") or "",
        )


def get_auth_client() -> WordPressAuthClient:
    return WordPressAuthClient()
