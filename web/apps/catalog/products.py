"""Cached product reads from WooCommerce."""

from urllib.parse import urlencode

from apps.commerce.client import WooCommerceClient

from . import cache
from .html import decode_html_entities

LIST_PARAMS = ("per_page", "page", "featured", "category", "include")


class ProductNotFound(Exception):
    pass


def _clean(product: dict) -> dict:
    if isinstance(product, dict) and isinstance(product.get("name"), str):
        product = {**product, "name": decode_html_entities(product["name"])}
    return product


def list_products(client: WooCommerceClient, params: dict) -> list:
    """Product list filtered by the supported query parameters.

    Args:
        params: Any of ``per_page``, ``page``, ``featured``, ``category``,
            ``include`` (comma-separated ids). Other keys are ignored.
    """
    query = {k: params[k] for k in LIST_PARAMS if params.get(k) not in (None, "")}
    endpoint = "/products" + (f"?{urlencode(query)}" if query else "")
    products = cache.cached(cache.PRODUCTS, query, lambda: client.request(endpoint))
    return [_clean(p) for p in products or []]


def get_product(client: WooCommerceClient, id_or_slug: str) -> dict:
    """One product by numeric id or by slug.

    Raises:
        ProductNotFound: No product has this slug.
        CommerceAPIError: Upstream failure (including 404 for an unknown id).
    """
    if id_or_slug.isdigit():
        product = cache.cached(cache.PRODUCT, {"id": int(id_or_slug)}, lambda: client.request(f"/products/{id_or_slug}"))
        return _clean(product)

    def load():
        matches = client.request(f"/products?{urlencode({'slug': id_or_slug})}")
        if not matches:
            raise ProductNotFound(id_or_slug)
        return matches[0]

    return _clean(cache.cached(cache.PRODUCT, {"slug": id_or_slug}, load))


def list_variations(client: WooCommerceClient, product_id: int) -> list:
    return cache.cached(
        cache.VARIATIONS,
        {"product_id": product_id},
        lambda: client.request(f"/products/{product_id}/variations?per_page=100"),
    )
