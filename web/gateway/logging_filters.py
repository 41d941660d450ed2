"""Logging filter that stamps records with the current request id.

Referenced from ``LOGGING["filters"]`` in the settings so the JSON formatter
can always render ``%(request_id)s``, including for records emitted by the
outbound WooCommerce/PayPal clients deep inside a view.
"""

from logging import Filter, LogRecord

from .middleware import REQUEST_ID_CTX


class RequestIdFilter(Filter):
    """Attach a ``request_id`` attribute to log records.

    Records emitted outside a request (startup, management commands) get the
    ContextVar default, a hyphen.
    """

    def filter(self, record: LogRecord) -> bool:
        record.request_id = REQUEST_ID_CTX.get()
        return True
