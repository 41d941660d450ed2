"""API tests for cached product reads and revalidation."""

import pytest

from apps.catalog.html import clean_html_text, decode_html_entities, strip_html_tags


def test_product_list_is_cached(client, upstream):
    upstream.add("GET", "/wc/v3/products?per_page=12&featured=true", json=[{"id": 1, "name": "Set &#8211; Pro"}])

    first = client.get("/api/products?per_page=12&featured=true&ignored=1")
    second = client.get("/api/products?featured=true&per_page=12")

    assert first.status_code == 200
    assert first.json() == [{"id": 1, "name": "Set – Pro"}]
    assert second.json() == first.json()
    assert len(upstream.calls) == 1


def test_product_by_slug(client, upstream):
    upstream.add("GET", "/wc/v3/products?slug=blackboard-basic", json=[{"id": 5, "slug": "blackboard-basic", "name": "Basic"}])

    r = client.get("/api/products/blackboard-basic")

    assert r.status_code == 200
    assert r.json()["id"] == 5


def test_unknown_slug_is_404_and_not_cached(client, upstream):
    upstream.add("GET", "/wc/v3/products?slug=nope", json=[])

    assert client.get("/api/products/nope").status_code == 404
    r = client.get("/api/products/nope")
    assert r.json() == {"error": "Product not found"}
    assert len(upstream.calls) == 2


def test_unknown_id_is_404(client, upstream):
    upstream.add("GET", "/wc/v3/products/999", status=404, json={"code": "woocommerce_rest_product_invalid_id"})
    assert client.get("/api/products/999").status_code == 404


def test_product_upstream_failure_is_500(client, upstream):
    upstream.add("GET", "/wc/v3/products/3", status=502, text="bad gateway")
    r = client.get("/api/products/3")
    assert r.status_code == 500
    assert r.json() == {"error": "Failed to fetch product"}


def test_variations(client, upstream):
    upstream.add("GET", "/wc/v3/products/5/variations?per_page=100", json=[{"id": 51, "price": "10"}])

    r = client.get("/api/products/5/variations")

    assert r.status_code == 200
    assert r.json() == [{"id": 51, "price": "10"}]


def test_revalidate_product_action_invalidates_cached_reads(client, upstream):
    upstream.add("GET", "/wc/v3/products", json=[{"id": 1, "name": "Old"}])
    assert client.get("/api/products").json()[0]["name"] == "Old"

    upstream.add("GET", "/wc/v3/products", json=[{"id": 1, "name": "New"}])
    assert client.get("/api/products").json()[0]["name"] == "Old"

    r = client.post("/api/revalidate", data={"action": "product.updated", "slug": "x"}, content_type="application/json")

    assert r.status_code == 200
    assert r.json()["revalidated"] is True
    assert r.json()["action"] == "product.updated"
    assert set(r.json()["tags"]) == {"products", "product", "variations"}
    assert client.get("/api/products").json()[0]["name"] == "New"


@pytest.mark.parametrize("body,tags", [
    ({"action": "order.created"}, ["products"]),
    ({"action": "coupon.updated"}, ["products", "product", "variations"]),
    ({"type": "tag", "tag": "variations"}, ["variations"]),
    ({"type": "path", "path": "/shop"}, ["products"]),
    ({"type": "path", "path": "/product/blackboard-basic"}, ["product", "variations"]),
    ({"type": "all"}, ["products", "product", "variations"]),
    ({}, ["products"]),
])
def test_revalidate_tag_mapping(client, body, tags):
    r = client.post("/api/revalidate", data=body, content_type="application/json")
    assert r.status_code == 200
    assert r.json()["tags"] == tags


def test_revalidate_requires_secret_when_configured(client, settings):
    settings.REVALIDATE_SECRET = "s3"

    assert client.post("/api/revalidate", data={}, content_type="application/json").status_code == 401
    assert client.post("/api/revalidate?secret=wrong", data={}, content_type="application/json").status_code == 401
    ok_header = client.post("/api/revalidate", data={}, content_type="application/json", HTTP_X_REVALIDATE_SECRET="s3")
    ok_query = client.post("/api/revalidate?secret=s3", data={}, content_type="application/json")
    assert ok_header.status_code == 200
    assert ok_query.status_code == 200


def test_revalidate_tolerates_invalid_json(client):
    r = client.post("/api/revalidate", data="not json", content_type="application/json")
    assert r.status_code == 200
    assert r.json()["type"] == "default"


def test_revalidate_get_without_secret_shows_usage(client, settings):
    settings.REVALIDATE_SECRET = "s3"
    r = client.get("/api/revalidate")
    assert r.status_code == 200
    assert r.json()["message"] == "Revalidation endpoint"


def test_revalidate_get_with_secret(client, settings, upstream):
    settings.REVALIDATE_SECRET = "s3"
    upstream.add("GET", "/wc/v3/products", json=[{"id": 1, "name": "A"}])
    client.get("/api/products")

    r = client.get("/api/revalidate?secret=s3&type=shop")
    assert r.json()["revalidated"] is True
    client.get("/api/products")
    assert len(upstream.calls) == 2


def test_html_helpers():
    assert decode_html_entities("Caf&eacute; &amp; Bar&nbsp;&#8211; 10&euro;") == "Café & Bar – 10€"
    assert strip_html_tags("<p>Hello <b>you</b></p>") == "Hello you"
    assert clean_html_text("<p>Fu&szlig; &lt;3</p>") == "Fuß <3"
    assert decode_html_entities("") == ""


def test_revalidate_non_ascii_secret_is_rejected(client, settings):
    settings.REVALIDATE_SECRET = "s3"

    by_query = client.post("/api/revalidate?secret=%C3%A9", data={}, content_type="application/json")
    by_header = client.post(
        "/api/revalidate", data={}, content_type="application/json", HTTP_X_REVALIDATE_SECRET="caf\xe9",
    )

    assert by_query.status_code == 401
    assert by_header.status_code == 401


def test_revalidate_accepts_non_ascii_configured_secret(client, settings):
    settings.REVALIDATE_SECRET = "geheim-ß"

    r = client.post("/api/revalidate?secret=geheim-%C3%9F", data={}, content_type="application/json")

    assert r.status_code == 200
