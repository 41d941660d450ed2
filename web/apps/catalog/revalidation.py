"""Map revalidation requests (WooCommerce webhooks or manual calls) to cache tags."""

from typing import Optional

from .cache import ALL_TAGS, PRODUCT, PRODUCTS, VARIATIONS

PRODUCT_ACTIONS = ("product.created", "product.updated", "product.deleted", "product.restored")
ORDER_ACTIONS = ("order.created", "order.updated")


def tags_for_action(action: str) -> tuple:
    if action in PRODUCT_ACTIONS:
        return (PRODUCTS, PRODUCT, VARIATIONS)
    if action in ORDER_ACTIONS:
        # stock levels shown in listings
        return (PRODUCTS,)
    return ALL_TAGS


def tags_for_path(path: str) -> tuple:
    """Storefront page path to the tags its data comes from."""
    if path in ("/", "/shop"):
        return (PRODUCTS,)
    if path.startswith("/product/"):
        return (PRODUCT, VARIATIONS)
    return ALL_TAGS


def resolve(body: dict) -> tuple[dict, tuple]:
    """Decide what to invalidate for a POST body.

    Returns:
        tuple: ``(response fields, tags)``. Response fields describe the
        request the way it was understood (``action`` or ``type``).
    """
    action: Optional[str] = body.get("action")
    if action:
        return {"action": action}, tags_for_action(action)

    kind = body.get("type", "path")
    tag = body.get("tag")
    path = body.get("path")
    if kind == "tag" and tag:
        return {"type": "tag", "tag": tag}, (tag,)
    if kind == "path" and path:
        return {"type": "path", "path": path}, tags_for_path(path)
    if kind == "all":
        return {"type": "all"}, ALL_TAGS
    return {"type": "default"}, (PRODUCTS,)
