"""Allow-list for the catch-all WooCommerce proxy.

The proxy forwards with the shop's own consumer credentials, so the set of
reachable resources is whatever this list grants, per HTTP method. Matching is
on the first path segment (``products/categories`` is covered by
``products``).
"""

from django.conf import settings


def is_allowed(method: str, path: str) -> bool:
    """Return True when ``method`` may reach ``path`` through the proxy.

    Args:
        method: Upper-case HTTP method.
        path: Path below the REST root, without leading slash.
    """
    segments = [s for s in path.split("/") if s]
    if not segments or any(s in (".", "..") for s in segments):
        return False
    allowed = getattr(settings, "WOO_PROXY_ALLOWED_RESOURCES", {}).get(method.upper(), [])
    return segments[0] in allowed
