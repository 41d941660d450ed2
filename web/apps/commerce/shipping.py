"""Shipping zone overview with a parallel per-zone fan-out.

WooCommerce exposes a zone's methods and locations as two separate
resources. After the zone list is fetched, every (zone, resource) pair is
requested concurrently on a small thread pool. Branches are independent and
unordered; if any branch fails the whole overview fails.
"""

from concurrent.futures import ThreadPoolExecutor
from contextvars import copy_context

from .client import WooCommerceClient

MAX_WORKERS = 8


def fetch_shipping_overview(client: WooCommerceClient) -> dict:
    """Fetch all shipping zones with their methods and locations.

    Args:
        client: WooCommerce client used for every call.

    Returns:
        dict: ``{"zones": [...], "zoneMethods": {zone_id: {"zoneName",
        "methods", "locations"}}}``.

    Raises:
        CommerceAPIError: If the zone list or any per-zone call fails.
    """
    zones = client.request("/shipping/zones") or []
    if not zones:
        return {"zones": [], "zoneMethods": {}}

    with ThreadPoolExecutor(max_workers=min(MAX_WORKERS, 2 * len(zones))) as pool:
        futures = {}
        for zone in zones:
            zid = zone["id"]
            for kind in ("methods", "locations"):
                # each branch runs in a copy of the caller's context so the
                # request id still reaches the outbound headers
                ctx = copy_context()
                futures[(zid, kind)] = pool.submit(ctx.run, client.request, f"/shipping/zones/{zid}/{kind}")
        results = {key: fut.result() for key, fut in futures.items()}

    zone_methods = {
        str(zone["id"]): {
            "zoneName": zone.get("name"),
            "methods": results[(zone["id"], "methods")],
            "locations": results[(zone["id"], "locations")],
        }
        for zone in zones
    }
    return {"zones": zones, "zoneMethods": zone_methods}
