"""Gateway middleware: request correlation and API body limits.

``RequestIdMiddleware`` gives every inbound request an identifier. The value
comes from the caller's ``X-Request-Id`` header when present (the storefront
frontend forwards its own) or is generated server-side. It is stored on the
request and in ``REQUEST_ID_CTX`` so the outbound HTTP helpers and the log
filter can read it without the view passing it around. The same id is echoed
back in the ``X-Request-ID`` response header.

``ApiSizeLimitMiddleware`` rejects oversized bodies on ``/api/`` routes before
they are parsed or forwarded to WooCommerce.
"""

import uuid
import contextvars

from django.conf import settings
from django.http import JsonResponse
from django.utils.deprecation import MiddlewareMixin

REQUEST_ID_CTX = contextvars.ContextVar("request_id", default="-")


class RequestIdMiddleware(MiddlewareMixin):
    """Set and return a per-request identifier.

    Attributes:
        HEADER (str): Incoming header name in ``request.META`` casing.
        RESPONSE_HEADER (str): Header added to every response.
    """

    HEADER = "HTTP_X_REQUEST_ID"
    RESPONSE_HEADER = "X-Request-ID"

    def process_request(self, request):
        """Attach the request id to the request and the context variable.

        Args:
            request: Django HttpRequest instance.
        """
        rid = request.META.get(self.HEADER)
        if not rid:
            rid = str(uuid.uuid4())
        request.request_id = rid
        REQUEST_ID_CTX.set(rid)

    def process_response(self, request, response):
        """Echo the request id on the response.

        Falls back to the ContextVar when the request never went through
        ``process_request`` (for example when an earlier middleware
        short-circuited).

        Args:
            request: Django HttpRequest.
            response: Django HttpResponse to modify.

        Returns:
            The same response with ``X-Request-ID`` set.
        """
        rid = getattr(request, "request_id", REQUEST_ID_CTX.get())
        response[self.RESPONSE_HEADER] = rid
        return response


class ApiSizeLimitMiddleware(MiddlewareMixin):
    def process_request(self, request):
        if request.path.startswith("/api/"):
            limit = getattr(settings, "API_MAX_BYTES", 1 * 1024 * 1024)
            clen = request.META.get("CONTENT_LENGTH")
            if clen and clen.isdigit() and int(clen) > limit:
                return JsonResponse({"detail": "PAYLOAD_TOO_LARGE"}, status=413)
