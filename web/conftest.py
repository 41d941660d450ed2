"""Shared fixtures.

``upstream`` replaces ``httpx.Client.request`` (which ``post``/``get`` also go
through) with a router returning real ``httpx.Response`` objects, so every
outbound call made by the gateway is answered in-process and recorded.
"""

from dataclasses import dataclass, field

import httpx
import pytest
from django.core.cache import cache

WP = "https://shop.test"


@dataclass
class Call:
    method: str
    url: str
    kwargs: dict = field(default_factory=dict)

    @property
    def headers(self) -> dict:
        return self.kwargs.get("headers") or {}


@dataclass
class Route:
    method: str
    url_part: str
    status: int = 200
    json: object = None
    text: str | None = None
    headers: dict | None = None
    exc: Exception | None = None

    def matches(self, method: str, url: str) -> bool:
        if method.upper() != self.method:
            return False
        # a route with a query string matches the full URL, otherwise the path
        target = url if "?" in self.url_part else url.split("?")[0]
        return target.endswith(self.url_part)


class FakeUpstream:
    def __init__(self):
        self.routes: list[Route] = []
        self.calls: list[Call] = []

    def add(self, method, url_part, status=200, json=None, text=None, headers=None, exc=None):
        self.routes.append(Route(method.upper(), url_part, status, json, text, headers, exc))
        return self

    def calls_to(self, url_part: str) -> list[Call]:
        return [c for c in self.calls if url_part in c.url]

    def __call__(self, client, method, url, **kwargs):
        url = str(url)
        self.calls.append(Call(method.upper(), url, kwargs))
        # latest registration wins
        for route in reversed(self.routes):
            if route.matches(method, url):
                if route.exc is not None:
                    raise route.exc
                request = httpx.Request(method, url)
                if route.json is not None:
                    return httpx.Response(route.status, json=route.json, headers=route.headers, request=request)
                return httpx.Response(route.status, text=route.text or "", headers=route.headers, request=request)
        raise AssertionError(f"unexpected upstream call: {method} {url}")


@pytest.fixture
def upstream(monkeypatch):
    fake = FakeUpstream()
    monkeypatch.setattr(
        httpx.Client, "request",
        lambda self, method, url, **kwargs: fake(self, method, url, **kwargs),
        raising=True,
    )
    return fake


@pytest.fixture(autouse=True)
def gateway_settings(settings):
    settings.WP_BASE_URL = WP
    settings.WOO_CONSUMER_KEY = "ck_test"
    settings.WOO_CONSUMER_SECRET = "cs_test"
    settings.PUBLIC_BASE_URL = "https://store.test"
    settings.STRIPE_SECRET_KEY = "sk_test_123"
    settings.PAYPAL_CLIENT_ID = "pp-client"
    settings.PAYPAL_SECRET = "pp-secret"
    settings.PAYPAL_MODE = "sandbox"
    settings.REVALIDATE_SECRET = ""
    settings.DEBUG_ROUTES_ENABLED = False
    return settings


@pytest.fixture(autouse=True)
def clear_cache():
    # throttle counters and catalog entries live in the default cache
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def login_session(client, settings):
    """Put a WordPress identity into the test client's session."""

    def _login(user_id="7", jwt="jwt-abc", **profile):
        session = client.session
        session["identity"] = {"jwt": jwt, "user_id": user_id, **profile}
        session.save()
        client.cookies[settings.SESSION_COOKIE_NAME] = session.session_key
        return session

    return _login
