"""Cached catalog reads and on-demand cache revalidation."""

import hmac
import logging

from django.conf import settings
from django.utils import timezone
from rest_framework import status
from rest_framework.exceptions import ParseError
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.commerce.client import get_woo_client
from apps.commerce.errors import CommerceAPIError

from . import cache
from .products import ProductNotFound, get_product, list_products, list_variations
from .revalidation import resolve

logger = logging.getLogger(__name__)

PRODUCT_NOT_FOUND = {"error": "Product not found"}


class ProductListView(APIView):
    def get(self, request):
        try:
            products = list_products(get_woo_client(), request.query_params.dict())
        except CommerceAPIError as e:
            logger.error("product list failed", extra={"status": e.status_code})
            return Response({"error": "Failed to fetch products"}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
        return Response(products)


class ProductDetailView(APIView):
    def get(self, request, id_or_slug: str):
        try:
            product = get_product(get_woo_client(), id_or_slug)
        except ProductNotFound:
            return Response(PRODUCT_NOT_FOUND, status=status.HTTP_404_NOT_FOUND)
        except CommerceAPIError as e:
            if e.status_code == 404:
                return Response(PRODUCT_NOT_FOUND, status=status.HTTP_404_NOT_FOUND)
            logger.error("product fetch failed", extra={"product": id_or_slug, "status": e.status_code})
            return Response({"error": "Failed to fetch product"}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
        return Response(product)


class ProductVariationsView(APIView):
    def get(self, request, product_id: int):
        try:
            variations = list_variations(get_woo_client(), product_id)
        except CommerceAPIError as e:
            logger.error("variations fetch failed", extra={"product_id": product_id, "status": e.status_code})
            return Response({"error": "Failed to fetch variations"}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
        return Response(variations)


def _secret_ok(given) -> bool:
    expected = settings.REVALIDATE_SECRET
    if not expected:
        return True
    return bool(given) and hmac.compare_digest(str(given).encode("utf-8"), expected.encode("utf-8"))


class RevalidateView(APIView):
    """Invalidate cached catalog data.

    POST is what WooCommerce webhooks call (``{"action": "product.updated"}``)
    and also accepts manual ``type`` requests: ``tag`` with ``tag``, ``path``
    with ``path``, ``all``. GET is a manual trigger that only acts with the
    configured secret and otherwise describes usage.
    """

    def post(self, request):
        secret = request.headers.get("x-revalidate-secret") or request.query_params.get("secret")
        if not _secret_ok(secret):
            logger.warning("revalidation rejected")
            return Response({"error": "Invalid secret"}, status=status.HTTP_401_UNAUTHORIZED)

        try:
            body = request.data
        except ParseError:
            body = {}
        if not isinstance(body, dict):
            body = {}

        described, tags = resolve(body)
        touched = cache.invalidate(tags)
        return Response({
            "revalidated": True,
            **described,
            "tags": touched,
            "timestamp": timezone.now().isoformat(),
        })

    def get(self, request):
        secret = request.query_params.get("secret")
        kind = request.query_params.get("type", "all")
        if settings.REVALIDATE_SECRET and _secret_ok(secret):
            if kind == "all":
                cache.invalidate(cache.ALL_TAGS)
                return Response({
                    "revalidated": True,
                    "method": "GET",
                    "type": "all",
                    "message": "All catalog data revalidated",
                })
            if kind == "shop":
                cache.invalidate((cache.PRODUCTS,))
                return Response({
                    "revalidated": True,
                    "method": "GET",
                    "type": "shop",
                    "message": "Product listings revalidated",
                })

        return Response({
            "message": "Revalidation endpoint",
            "usage": {
                "POST": "Send POST request with secret and revalidation details",
                "GET": "Use ?secret=YOUR_SECRET&type=all to revalidate everything",
                "types": ["all", "shop", "path", "tag"],
                "wordpress": "Configure WooCommerce webhooks to POST here on product updates",
            },
        })
