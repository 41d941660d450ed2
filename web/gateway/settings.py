"""Django settings for the storefront gateway.

Every value is read from the environment so the same image runs against a
staging or a production WordPress/WooCommerce installation. Secrets default
to empty strings; the views treat a missing secret as "not configured".
"""

import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent


def _env_bool(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


SECRET_KEY = os.getenv("DJANGO_SECRET_KEY", "dev-insecure-secret-key")
DEBUG = _env_bool("DJANGO_DEBUG")
ALLOWED_HOSTS = [h.strip() for h in os.getenv("DJANGO_ALLOWED_HOSTS", "*").split(",") if h.strip()]

INSTALLED_APPS = [
    "django.contrib.contenttypes",
    "django.contrib.auth",
    "django.contrib.sessions",
    "rest_framework",
    "apps.monitoring",
    "apps.commerce",
    "apps.accounts",
    "apps.storefront",
    "apps.payments",
    "apps.catalog",
    "apps.cart",
]

MIDDLEWARE = [
    "gateway.middleware.RequestIdMiddleware",
    "gateway.middleware.ApiSizeLimitMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
]

ROOT_URLCONF = "gateway.urls"
WSGI_APPLICATION = "gateway.wsgi.application"

# No database: every record of truth lives in WooCommerce/WordPress.
DATABASES = {}

# Sessions live entirely in a signed cookie.
SESSION_ENGINE = "django.contrib.sessions.backends.signed_cookies"
SESSION_COOKIE_HTTPONLY = True
SESSION_COOKIE_SAMESITE = "Lax"
SESSION_COOKIE_SECURE = not DEBUG
SESSION_EXPIRE_AT_BROWSER_CLOSE = True

CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
        "LOCATION": "storefront-gateway",
    }
}

USE_TZ = True
TIME_ZONE = "UTC"
APPEND_SLASH = False

REST_FRAMEWORK = {
    "DEFAULT_RENDERER_CLASSES": ["rest_framework.renderers.JSONRenderer"],
    "DEFAULT_PARSER_CLASSES": ["rest_framework.parsers.JSONParser"],
    "DEFAULT_AUTHENTICATION_CLASSES": [],
    "DEFAULT_PERMISSION_CLASSES": ["rest_framework.permissions.AllowAny"],
    "UNAUTHENTICATED_USER": None,
    "DEFAULT_THROTTLE_RATES": {
        "auth_login": os.getenv("THROTTLE_AUTH_LOGIN", "20/min"),
        "payments_create": os.getenv("THROTTLE_PAYMENTS_CREATE", "30/min"),
    },
}

# ---- Commerce backend (WordPress + WooCommerce) ----
WP_BASE_URL = os.getenv("WP_BASE_URL", "").rstrip("/")
WOO_CONSUMER_KEY = os.getenv("WOO_CONSUMER_KEY", "")
WOO_CONSUMER_SECRET = os.getenv("WOO_CONSUMER_SECRET", "")

# Top-level WooCommerce REST resources the catch-all proxy may reach, per method.
WOO_PROXY_ALLOWED_RESOURCES = {
    "GET": ["products", "data", "shipping", "taxes", "coupons", "orders"],
    "POST": ["orders", "customers"],
    "PUT": ["orders"],
    "DELETE": [],
}

# ---- Payment providers ----
STRIPE_SECRET_KEY = os.getenv("STRIPE_SECRET_KEY", "")
STRIPE_API_VERSION = os.getenv("STRIPE_API_VERSION", "2024-11-20.acacia")
PAYPAL_CLIENT_ID = os.getenv("PAYPAL_CLIENT_ID", "")
PAYPAL_SECRET = os.getenv("PAYPAL_SECRET", "")
PAYPAL_MODE = os.getenv("PAYPAL_MODE", "sandbox")
CHECKOUT_BRAND_NAME = os.getenv("CHECKOUT_BRAND_NAME", "BlackBoard Training")
CHECKOUT_DESCRIPTION = os.getenv("CHECKOUT_DESCRIPTION", "BlackBoard Training Products")

# Public storefront URL, used to build provider redirect URLs.
PUBLIC_BASE_URL = os.getenv("PUBLIC_BASE_URL", "http://localhost:3000").rstrip("/")

# ---- Misc ----
REVALIDATE_SECRET = os.getenv("REVALIDATE_SECRET", "")
GEOLOCATION_URL = os.getenv("GEOLOCATION_URL", "https://ipapi.co")
GEOLOCATION_TIMEOUT_SECS = float(os.getenv("GEOLOCATION_TIMEOUT_SECS", "3"))
GEOLOCATION_FALLBACK_COUNTRY = "DE"
HTTP_TIMEOUT_SECS = float(os.getenv("HTTP_TIMEOUT_SECS", "15"))
API_MAX_BYTES = int(os.getenv("API_MAX_BYTES", str(1 * 1024 * 1024)))
CATALOG_CACHE_TTL = int(os.getenv("CATALOG_CACHE_TTL", "3600"))
DEBUG_ROUTES_ENABLED = _env_bool("DEBUG_ROUTES_ENABLED", "1" if DEBUG else "0")
CART_TOKEN_COOKIE = "woo-cart-token"
CART_TOKEN_MAX_AGE = 60 * 60 * 24 * 7

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "filters": {
        "request_id": {"()": "gateway.logging_filters.RequestIdFilter"},
    },
    "formatters": {
        "json": {
            "()": "pythonjsonlogger.jsonlogger.JsonFormatter",
            "fmt": "%(asctime)s %(levelname)s %(name)s %(message)s %(request_id)s",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "json",
            "filters": ["request_id"],
        },
    },
    "root": {"handlers": ["console"], "level": os.getenv("LOG_LEVEL", "INFO")},
}
