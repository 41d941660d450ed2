"""Errors raised by the commerce backend clients."""


class CommerceAPIError(Exception):
    """Non-2xx answer (or transport failure) from WooCommerce/WordPress.

    Both the authenticated REST API and the Store API raise this type, and
    both keep the raw body text so it can be logged. Views never forward
    ``body`` to their callers.

    Attributes:
        status_code: Upstream HTTP status, or ``None`` for transport errors.
        reason: Upstream reason phrase or transport error text.
        body: Raw upstream body text (may be empty).
    """

    def __init__(self, status_code: int | None, reason: str, body: str = ""):
        super().__init__(f"WooCommerce API error: {status_code} {reason}".strip())
        self.status_code = status_code
        self.reason = reason
        self.body = body
