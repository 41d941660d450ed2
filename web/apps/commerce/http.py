"""Shared helpers for outbound HTTP calls.

Every outbound client in the gateway (WooCommerce, WordPress, PayPal,
geolocation) builds its headers and timeout here so request correlation and
timeouts are uniform.
"""

from typing import Optional

from django.conf import settings

from gateway.middleware import REQUEST_ID_CTX


def request_headers(extra: Optional[dict] = None) -> dict:
    """Build base headers including X-Request-ID and any extras.

    Args:
        extra: Optional dict of additional headers to include.

    Returns:
        dict: Final headers dictionary for the outgoing request.
    """
    headers: dict[str, str] = {}
    rid = REQUEST_ID_CTX.get()
    if rid and rid != "-":
        headers["X-Request-ID"] = rid
    if extra:
        headers.update(extra)
    return headers


def default_timeout() -> float:
    return getattr(settings, "HTTP_TIMEOUT_SECS", 15.0)


def wordpress_url() -> str:
    """Base URL of the WordPress installation, without trailing slash."""
    return (settings.WP_BASE_URL or "").rstrip("/")
