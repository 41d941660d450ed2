"""Visitor country lookup used to preselect shipping country and currency."""

import logging
from typing import Optional

import httpx
from django.conf import settings

logger = logging.getLogger(__name__)

USER_AGENT = "BlackBoard-Headless/1.0"


def client_ip(meta: dict) -> Optional[str]:
    """First address of ``X-Forwarded-For``, else ``X-Real-IP``."""
    forwarded = meta.get("HTTP_X_FORWARDED_FOR")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    return meta.get("HTTP_X_REAL_IP") or None


def lookup_country(ip: Optional[str] = None) -> dict:
    """Resolve a country code for ``ip`` (or for the caller of the service).

    Never raises. Returns the fallback country (Germany) when the service
    errors, times out, answers non-2xx, or has no country code.

    Returns:
        dict: ``{"country": ..., "city": ..., "region": ...}``; only
        ``country`` is guaranteed.
    """
    fallback = {"country": settings.GEOLOCATION_FALLBACK_COUNTRY}
    base = settings.GEOLOCATION_URL.rstrip("/")
    url = f"{base}/{ip}/json/" if ip else f"{base}/json/"
    try:
        with httpx.Client(timeout=settings.GEOLOCATION_TIMEOUT_SECS) as client:
            resp = client.request("GET", url, headers={"User-Agent": USER_AGENT})
        if not resp.is_success:
            logger.warning("geolocation lookup non-ok", extra={"status": resp.status_code})
            return fallback
        data = resp.json()
    except (httpx.HTTPError, ValueError) as e:
        logger.warning("geolocation lookup failed", extra={"error": str(e)})
        return fallback

    country = data.get("country_code") if isinstance(data, dict) else None
    if not country:
        return fallback
    return {"country": country, "city": data.get("city"), "region": data.get("region")}
