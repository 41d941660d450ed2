import math
import os

bind = os.getenv("GUNI_BIND", "0.0.0.0:8000")
wsgi_app = "gateway.wsgi:application"

# Requests spend their time waiting on WooCommerce, WordPress and the payment
# providers, so concurrency comes from threads rather than processes.
workers = int(os.getenv("GUNI_WORKERS", "2"))
worker_class = "gthread"
threads = int(os.getenv("GTHREADS", "8"))

# Login and payment creation each make up to three sequential upstream calls
# bounded by HTTP_TIMEOUT_SECS; the worker timeout must outlast them so an
# upstream timeout is answered with the route's 500 body, not a killed worker.
UPSTREAM_CALLS_PER_REQUEST = 3
_http_timeout = float(os.getenv("HTTP_TIMEOUT_SECS", "15"))
timeout = int(os.getenv("GUNI_TIMEOUT", str(math.ceil(_http_timeout * UPSTREAM_CALLS_PER_REQUEST) + 5)))
graceful_timeout = int(os.getenv("GUNI_GRACEFUL_TIMEOUT", "30"))
keepalive = int(os.getenv("GUNI_KEEPALIVE", "5"))

max_requests = int(os.getenv("GUNI_MAX_REQUESTS", "2000"))
max_requests_jitter = int(os.getenv("GUNI_MAX_REQUESTS_JITTER", "200"))

# Body limit is enforced by ApiSizeLimitMiddleware; this only caps headers
limit_request_field_size = 16384

accesslog = "-"
errorlog = "-"
loglevel = os.getenv("GUNI_LOGLEVEL", "info")
# correlate access lines with the JSON application log
access_log_format = '%(h)s "%(r)s" %(s)s %(b)s %(M)sms rid=%({x-request-id}o)s'
forwarded_allow_ips = os.getenv("FORWARDED_ALLOW_IPS", "127.0.0.1")
