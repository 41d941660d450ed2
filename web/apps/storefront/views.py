"""Thin proxy views in front of WooCommerce and WordPress.

Every view forwards one request upstream and relays the answer. Upstream
detail is logged, never returned: callers see a fixed message per route.
"""

import json
import logging
from urllib.parse import quote

from django.conf import settings
from django.http import Http404
from pydantic import ValidationError
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.accounts.session import load_identity
from apps.commerce.client import get_woo_client
from apps.commerce.errors import CommerceAPIError
from apps.commerce.shipping import fetch_shipping_overview

from .allowlist import is_allowed
from .geolocation import client_ip, lookup_country
from .schemas import AddressUpdateIn, CheckoutRequestIn

logger = logging.getLogger(__name__)

UNAUTHORIZED = {"error": "Unauthorized"}


def _endpoint(path: str, request) -> str:
    endpoint = "/" + path.strip("/")
    query = request.META.get("QUERY_STRING", "")
    return f"{endpoint}?{query}" if query else endpoint


class OrderDetailView(APIView):
    """Order summary for the order-success page.

    When ``?key=`` is given it must match the order's ``order_key``.
    """

    def get(self, request, order_id: int):
        try:
            order = get_woo_client().request(f"/orders/{order_id}")
        except CommerceAPIError as e:
            logger.error("order fetch failed", extra={"order_id": order_id, "status": e.status_code})
            return Response(
                {"success": False, "error": "Failed to fetch order"},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )
        if not isinstance(order, dict):
            logger.error("order fetch returned no record", extra={"order_id": order_id})
            return Response(
                {"success": False, "error": "Failed to fetch order"},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )

        key = request.query_params.get("key")
        if key and order.get("order_key") != key:
            return Response({"success": False, "error": "Invalid order key"}, status=status.HTTP_403_FORBIDDEN)

        return Response({
            "success": True,
            "order": {
                "id": order.get("id"),
                "number": order.get("number"),
                "status": order.get("status"),
                "total": order.get("total"),
                "currency": order.get("currency"),
                "dateCreated": order.get("date_created"),
                "paymentMethod": order.get("payment_method"),
                "paymentMethodTitle": order.get("payment_method_title"),
                "billing": order.get("billing"),
                "shipping": order.get("shipping"),
                "lineItems": order.get("line_items"),
            },
        })


class WooProxyView(APIView):
    """Catch-all WooCommerce REST proxy, restricted to allow-listed resources."""

    FAILURE_MESSAGES = {
        "GET": "Failed to fetch from WooCommerce",
        "POST": "Failed to post to WooCommerce",
        "PUT": "Failed to update in WooCommerce",
        "DELETE": "Failed to delete from WooCommerce",
    }

    def _forward(self, request, path: str):
        method = request.method
        if not is_allowed(method, path):
            logger.warning("proxy path rejected", extra={"method": method, "path": path})
            return Response({"error": "Resource not available"}, status=status.HTTP_403_FORBIDDEN)

        body = request.body if method in ("POST", "PUT") else None
        try:
            data = get_woo_client().request(_endpoint(path, request), method=method, content=body or None)
        except CommerceAPIError as e:
            logger.error("proxy request failed", extra={"method": method, "path": path, "status": e.status_code})
            return Response({"error": self.FAILURE_MESSAGES[method]}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
        return Response(data)

    get = post = put = delete = _forward


class AddressesView(APIView):
    """Billing and shipping addresses of the logged-in customer."""

    def get(self, request):
        identity = load_identity(request.session)
        if identity is None:
            return Response(UNAUTHORIZED, status=status.HTTP_401_UNAUTHORIZED)
        try:
            customer = get_woo_client().request(f"/customers/{identity.user_id}")
        except CommerceAPIError as e:
            logger.error("address fetch failed", extra={"user_id": identity.user_id, "status": e.status_code})
            return Response({"error": "Failed to fetch addresses"}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
        return Response({"billing": customer.get("billing"), "shipping": customer.get("shipping")})

    def put(self, request):
        identity = load_identity(request.session)
        if identity is None:
            return Response(UNAUTHORIZED, status=status.HTTP_401_UNAUTHORIZED)
        try:
            dto = AddressUpdateIn.model_validate(request.data)
        except ValidationError:
            return Response(
                {"error": "type must be billing or shipping and address is required"},
                status=status.HTTP_400_BAD_REQUEST,
            )

        try:
            customer = get_woo_client().request(
                f"/customers/{identity.user_id}", method="PUT", json={dto.type: dto.address},
            )
        except CommerceAPIError as e:
            logger.error("address update failed", extra={"user_id": identity.user_id, "status": e.status_code})
            return Response({"error": "Failed to update address"}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
        return Response({"billing": customer.get("billing"), "shipping": customer.get("shipping")})


class PaymentMethodsView(APIView):
    def get(self, request):
        if load_identity(request.session) is None:
            return Response(UNAUTHORIZED, status=status.HTTP_401_UNAUTHORIZED)
        try:
            gateways = get_woo_client().request("/payment_gateways")
        except CommerceAPIError as e:
            logger.error("payment gateways fetch failed", extra={"status": e.status_code})
            return Response({"error": "Failed to fetch payment methods"}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
        return Response([g for g in gateways or [] if g.get("enabled") is True])


def _set_cart_cookie(response, token: str) -> None:
    response.set_cookie(
        settings.CART_TOKEN_COOKIE,
        token,
        max_age=settings.CART_TOKEN_MAX_AGE,
        httponly=True,
        secure=not settings.DEBUG,
        samesite="Lax",
    )


class StoreProxyView(APIView):
    """Store API proxy keeping the cart token in an http-only cookie."""

    FAILURE_MESSAGES = {
        "GET": "Failed to fetch from Store API",
        "POST": "Failed to post to Store API",
        "PUT": "Failed to update in Store API",
        "DELETE": "Failed to delete from Store API",
    }

    def _forward(self, request, path: str):
        method = request.method
        cookie_name = settings.CART_TOKEN_COOKIE
        body = request.body if method in ("POST", "PUT") else None
        try:
            result = get_woo_client().store_request(
                _endpoint(path, request),
                method=method,
                content=body or None,
                cart_token=request.COOKIES.get(cookie_name),
            )
        except CommerceAPIError as e:
            logger.error("store proxy failed", extra={"method": method, "path": path, "status": e.status_code})
            return Response({"error": self.FAILURE_MESSAGES[method]}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

        response = Response(result.data)
        if result.cart_token:
            _set_cart_cookie(response, result.cart_token)
        return response

    get = post = put = delete = _forward


def _store_error_code(e: CommerceAPIError) -> str:
    try:
        data = json.loads(e.body or "")
    except ValueError:
        return "checkout_error"
    code = data.get("code") if isinstance(data, dict) else None
    return code if isinstance(code, str) and code else "checkout_error"


class CheckoutView(APIView):
    """Store API checkout.

    GET returns the checkout configuration for the current cart. POST
    rebuilds the Store API cart from ``cartItems``, places the order and
    drops the cart token; the returned order id is what the payment
    endpoints take.
    """

    def get(self, request):
        try:
            result = get_woo_client().store_request(
                "/checkout", cart_token=request.COOKIES.get(settings.CART_TOKEN_COOKIE),
            )
        except CommerceAPIError as e:
            logger.error("checkout config fetch failed", extra={"status": e.status_code})
            return Response(
                {"error": "Failed to fetch checkout configuration"},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )
        data = result.data if isinstance(result.data, dict) else {}
        return Response({
            "fields": data.get("fields") or {},
            "paymentMethods": data.get("payment_methods") or [],
            "shippingMethods": data.get("shipping_methods") or [],
            "needsShipping": bool(data.get("needs_shipping", False)),
            "needsPayment": bool(data.get("needs_payment", True)),
        })

    def post(self, request):
        try:
            dto = CheckoutRequestIn.model_validate(request.data)
        except ValidationError:
            return Response(
                {"success": False, "error": "Invalid checkout data", "code": "invalid_checkout_data"},
                status=status.HTTP_400_BAD_REQUEST,
            )

        client = get_woo_client()
        initial_token = request.COOKIES.get(settings.CART_TOKEN_COOKIE)
        token = initial_token
        try:
            if dto.cart_items:
                cleared = client.store_request("/cart/items", method="DELETE", cart_token=token)
                token = cleared.cart_token or token
                for line in dto.cart_items:
                    added = client.store_request(
                        "/cart/add-item",
                        method="POST",
                        json={"id": line.store_id, "quantity": line.quantity},
                        cart_token=token,
                    )
                    token = added.cart_token or token
            result = client.store_request("/checkout", method="POST", json=dto.store_payload(), cart_token=token)
        except CommerceAPIError as e:
            code = _store_error_code(e)
            logger.error("checkout failed", extra={"status": e.status_code, "code": code})
            response = Response(
                {"success": False, "error": "Failed to process checkout", "code": code},
                status=status.HTTP_400_BAD_REQUEST,
            )
            if token and token != initial_token:
                _set_cart_cookie(response, token)
            return response

        order = result.data if isinstance(result.data, dict) else {}
        logger.info("checkout placed order", extra={"order_id": order.get("order_id") or order.get("id")})
        response = Response({
            "success": True,
            "order": {
                "id": order.get("order_id") or order.get("id"),
                "orderNumber": order.get("order_number") or order.get("order_key"),
                "status": order.get("status"),
                "total": order.get("total"),
                "paymentUrl": (order.get("payment_result") or {}).get("redirect_url"),
                "paymentMethod": order.get("payment_method"),
                "billingAddress": order.get("billing_address"),
                "shippingAddress": order.get("shipping_address"),
            },
        })
        response.delete_cookie(settings.CART_TOKEN_COOKIE, samesite="Lax")
        return response


class CoursesView(APIView):
    """Course catalogue with per-user access flags when logged in."""

    def get(self, request):
        identity = load_identity(request.session)
        try:
            data = get_woo_client().wp_request(
                "/wp-json/blackboard/v1/courses", bearer=identity.jwt if identity else None,
            )
        except CommerceAPIError as e:
            if e.status_code is None:
                return Response({"error": "Internal server error"}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
            return Response({"error": "Failed to fetch courses"}, status=e.status_code)
        return Response(data)


class ShippingZonesView(APIView):
    def get(self, request):
        try:
            overview = fetch_shipping_overview(get_woo_client())
        except CommerceAPIError as e:
            logger.error("shipping overview failed", extra={"status": e.status_code})
            return Response({"error": "Failed to fetch shipping zones"}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
        return Response(overview)


class GeolocationView(APIView):
    def get(self, request):
        return Response(lookup_country(client_ip(request.META)))


class DebugPaymentView(APIView):
    """Raw payment-url payload for one order. Exists only with debug routes on."""

    def get(self, request):
        if not settings.DEBUG_ROUTES_ENABLED:
            raise Http404
        order_id = request.query_params.get("orderId")
        if not order_id:
            return Response({"error": "Order ID required"}, status=status.HTTP_400_BAD_REQUEST)

        path = f"/wp-json/blackboard/v1/orders/{quote(order_id, safe='')}/payment-url"
        try:
            data = get_woo_client().wp_request(path) or {}
        except CommerceAPIError as e:
            return Response(
                {"success": False, "error": str(e), "body": e.body},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )
        return Response({
            "success": True,
            "endpoint": path,
            "rawResponse": data,
            "analysis": {
                "hasPaymentUrl": bool(data.get("payment_url")),
                "paymentUrl": data.get("payment_url"),
                "returnUrl": data.get("return_url"),
                "redirectType": data.get("redirect_type"),
                "paymentMethod": data.get("payment_method"),
            },
        })
