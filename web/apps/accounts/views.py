"""HTTP views for login, session and customer lookup.

The session object is the bridge between WordPress identity and the rest of
the gateway: views in other apps call ``load_identity(request.session)`` to
decide whether a caller is logged in.
"""

import logging
import time
from urllib.parse import quote

from pydantic import ValidationError
from rest_framework import status
from rest_framework.response import Response
from rest_framework.throttling import ScopedRateThrottle
from rest_framework.views import APIView

from apps.commerce.client import get_woo_client
from apps.commerce.errors import CommerceAPIError

from .schemas import CheckEmailIn, LoginIn, RegisterCustomerIn
from .session import clear_identity, load_identity, store_identity
from .wordpress import WordPressAuthError, get_auth_client

logger = logging.getLogger(__name__)

NO_ACCOUNT_MESSAGE = "No account found. You can create one during checkout."
ACCOUNT_EXISTS_MESSAGE = "This email is already registered. Please login or use a different email."


class CheckEmailView(APIView):
    """Tell the checkout whether an email already has a customer account."""

    def post(self, request):
        try:
            dto = CheckEmailIn.model_validate(request.data)
        except ValidationError:
            return Response({"exists": False, "error": "Email is required"}, status=status.HTTP_400_BAD_REQUEST)

        try:
            customers = get_woo_client().request(f"/customers?email={quote(dto.email, safe='')}&per_page=1")
        except CommerceAPIError as e:
            # lookup failures read as "no account"
            logger.warning("customer lookup failed", extra={"status": e.status_code})
            return Response({"exists": False, "message": NO_ACCOUNT_MESSAGE})

        if isinstance(customers, list) and customers:
            return Response({
                "exists": True,
                "message": ACCOUNT_EXISTS_MESSAGE,
                "userId": customers[0].get("id"),
            })
        return Response({"exists": False, "message": NO_ACCOUNT_MESSAGE, "userId": None})


class WordPressLoginView(APIView):
    """Exchange WordPress credentials for a gateway session.

    Returns:
        200 with ``{token, user}`` and a session cookie; 400 when a field is
        missing; 401 when WordPress rejects the credentials; 500 when
        WordPress cannot be reached.
    """

    throttle_classes = [ScopedRateThrottle]
    throttle_scope = "auth_login"

    def post(self, request):
        try:
            dto = LoginIn.model_validate(request.data)
        except ValidationError:
            return Response({"error": "Username and password are required"}, status=status.HTTP_400_BAD_REQUEST)

        try:
            identity = get_auth_client().login(dto.username, dto.password)
        except WordPressAuthError as e:
            if e.code == "INVALID_CREDENTIALS":
                return Response({"error": "Invalid username or password"}, status=status.HTTP_401_UNAUTHORIZED)
            if e.code == "2FA_NOT_SUPPORTED":
                return Response({"error": "2FA_NOT_SUPPORTED"}, status=status.HTTP_401_UNAUTHORIZED)
            logger.error("wordpress login failed", extra={"code": e.code, "detail": e.detail})
            return Response({"error": "Authentication failed"}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

        store_identity(request.session, identity)
        logger.info("user logged in", extra={"user_id": identity.user_id})
        return Response({"token": identity.jwt, "user": identity.public_user()})


class SessionView(APIView):
    def get(self, request):
        identity = load_identity(request.session)
        if identity is None:
            return Response({"error": "Unauthorized"}, status=status.HTTP_401_UNAUTHORIZED)
        return Response({"user": identity.public_user(), "userId": identity.user_id, "jwt": identity.jwt})


class LogoutView(APIView):
    def post(self, request):
        clear_identity(request.session)
        return Response({"success": True})


class RegisterCustomerView(APIView):
    """Create a WooCommerce customer (and WordPress user) during checkout."""

    def post(self, request):
        try:
            dto = RegisterCustomerIn.model_validate(request.data)
        except ValidationError:
            return Response(
                {"success": False, "error": "Email and password are required"},
                status=status.HTTP_400_BAD_REQUEST,
            )

        billing = dto.billing
        shipping = dto.shipping
        payload = {
            "email": dto.email,
            "first_name": dto.first_name or (billing.first_name if billing else ""),
            "last_name": dto.last_name or (billing.last_name if billing else ""),
            # WordPress needs a unique login name; the email local part alone can collide
            "username": f"{dto.email.split('@')[0]}_{int(time.time() * 1000)}",
            "password": dto.password,
            "billing": billing.billing_payload(dto.email) if billing else {},
            "shipping": shipping.shipping_payload() if shipping else {},
            "meta_data": [
                {"key": "created_via", "value": "storefront_checkout"},
                {"key": "account_created_at_checkout", "value": "yes"},
            ],
            "role": "customer",
        }

        try:
            customer = get_woo_client().request("/customers", method="POST", json=payload)
        except CommerceAPIError as e:
            if e.status_code == 400 and ("already" in e.body or "email-exists" in e.body):
                return Response(
                    {"success": False, "error": "An account with this email already exists. Please login instead."},
                    status=status.HTTP_400_BAD_REQUEST,
                )
            logger.error("customer creation failed", extra={"status": e.status_code})
            return Response(
                {"success": False, "error": "Failed to create account"},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )

        logger.info("customer created", extra={"customer_id": customer.get("id")})
        return Response({
            "success": True,
            "customer": {
                "id": customer.get("id"),
                "email": customer.get("email"),
                "username": customer.get("username"),
                "firstName": customer.get("first_name"),
                "lastName": customer.get("last_name"),
            },
            "message": "Account created successfully",
        })
