"""Hosted checkout endpoints.

Callers send only the WooCommerce order id. Amount, currency and order
number are re-read from the order itself before any provider call, so a
client cannot pay less than the order is worth.
"""

import logging
from urllib.parse import urlencode

from django.conf import settings
from django.http import HttpResponseRedirect
from pydantic import ValidationError
from rest_framework import status
from rest_framework.response import Response
from rest_framework.throttling import ScopedRateThrottle
from rest_framework.views import APIView

from apps.commerce.client import get_woo_client

from .domain import PaymentProviderError
from .providers import get_paypal_checkout, get_stripe_checkout
from .schemas import CheckoutIn
from .services import load_checkout_order, mark_paid_by_paypal

logger = logging.getLogger(__name__)

ORDER_ID_REQUIRED = {"success": False, "error": "orderId is required"}


class CreateStripeCheckoutView(APIView):
    """Create a Stripe Checkout session for an existing order.

    Returns:
        200 ``{success, sessionId, url}``; 400 without a valid ``orderId``;
        500 ``{success: false, error}`` on any order or provider failure.
    """

    throttle_classes = [ScopedRateThrottle]
    throttle_scope = "payments_create"

    def post(self, request):
        try:
            dto = CheckoutIn.model_validate(request.data)
        except ValidationError:
            return Response(ORDER_ID_REQUIRED, status=status.HTTP_400_BAD_REQUEST)

        try:
            order = load_checkout_order(get_woo_client(), dto.order_id)
            session = get_stripe_checkout().create_session(order, customer_email=dto.customer_email)
        except PaymentProviderError as e:
            logger.error("stripe checkout failed", extra={"order_id": dto.order_id, "code": e.code})
            return Response(
                {"success": False, "error": "Failed to create Stripe checkout session"},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )
        return Response({"success": True, "sessionId": session.id, "url": session.url})


class CreatePayPalOrderView(APIView):
    """Create a PayPal order (intent CAPTURE) for an existing order."""

    throttle_classes = [ScopedRateThrottle]
    throttle_scope = "payments_create"

    def post(self, request):
        try:
            dto = CheckoutIn.model_validate(request.data)
        except ValidationError:
            return Response(ORDER_ID_REQUIRED, status=status.HTTP_400_BAD_REQUEST)

        try:
            order = load_checkout_order(get_woo_client(), dto.order_id)
            session = get_paypal_checkout().create_session(order)
        except PaymentProviderError as e:
            logger.error("paypal order failed", extra={"order_id": dto.order_id, "code": e.code})
            return Response(
                {"success": False, "error": "Failed to create PayPal order"},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )
        return Response({"success": True, "id": session.id, "approveLink": session.url})


class CapturePayPalPaymentView(APIView):
    """PayPal return URL: capture, mark the order paid, redirect the buyer."""

    def get(self, request):
        base = settings.PUBLIC_BASE_URL.rstrip("/")
        token = request.query_params.get("token")
        try:
            if not token:
                raise PaymentProviderError("MISSING_TOKEN")
            capture = get_paypal_checkout().capture(token)
            order_id = mark_paid_by_paypal(get_woo_client(), capture, token)
        except PaymentProviderError as e:
            logger.error("paypal capture flow failed", extra={"paypal_id": token, "code": e.code, "detail": e.detail[:500]})
            return HttpResponseRedirect(f"{base}/checkout?{urlencode({'error': 'payment_failed'})}")
        return HttpResponseRedirect(f"{base}/order-success?{urlencode({'order': order_id, 'paypal_id': token})}")
