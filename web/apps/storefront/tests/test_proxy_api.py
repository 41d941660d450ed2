"""API tests for the WooCommerce/Store API proxy routes."""

import pytest

ORDER = {
    "id": 42,
    "number": "1042",
    "order_key": "wc_order_abc",
    "status": "pending",
    "total": "99.00",
    "currency": "EUR",
    "date_created": "2026-01-02T10:00:00",
    "payment_method": "stripe",
    "payment_method_title": "Card",
    "billing": {"email": "ana@example.com"},
    "shipping": {"city": "Berlin"},
    "line_items": [{"id": 1, "name": "Set", "quantity": 1}],
}


# ---- orders ----

def test_order_detail_with_matching_key(client, upstream):
    upstream.add("GET", "/wc/v3/orders/42", json=ORDER)

    r = client.get("/api/orders/42?key=wc_order_abc")

    assert r.status_code == 200
    order = r.json()["order"]
    assert r.json()["success"] is True
    assert order["number"] == "1042"
    assert order["dateCreated"] == "2026-01-02T10:00:00"
    assert order["paymentMethodTitle"] == "Card"
    assert order["lineItems"] == ORDER["line_items"]
    assert "order_key" not in order


def test_order_detail_without_key_is_allowed(client, upstream):
    upstream.add("GET", "/wc/v3/orders/42", json=ORDER)
    assert client.get("/api/orders/42").status_code == 200


def test_order_detail_key_mismatch_is_403(client, upstream):
    upstream.add("GET", "/wc/v3/orders/42", json=ORDER)

    r = client.get("/api/orders/42?key=wrong")

    assert r.status_code == 403
    assert r.json() == {"success": False, "error": "Invalid order key"}


def test_order_detail_upstream_failure_is_fixed_500(client, upstream):
    upstream.add("GET", "/wc/v3/orders/42", status=404, text="secret upstream detail")

    r = client.get("/api/orders/42")

    assert r.status_code == 500
    assert r.json() == {"success": False, "error": "Failed to fetch order"}
    assert "secret" not in r.content.decode()


def test_order_detail_empty_upstream_body_is_fixed_500(client, upstream):
    upstream.add("GET", "/wc/v3/orders/42", text="")

    r = client.get("/api/orders/42?key=wc_order_abc")

    assert r.status_code == 500
    assert r.json() == {"success": False, "error": "Failed to fetch order"}


# ---- catch-all ----

def test_woo_proxy_forwards_path_and_query(client, upstream):
    upstream.add("GET", "/wc/v3/products/categories?per_page=50", json=[{"id": 3}])

    r = client.get("/api/woo/products/categories?per_page=50")

    assert r.status_code == 200
    assert r.json() == [{"id": 3}]
    assert upstream.calls[0].url == "https://shop.test/wp-json/wc/v3/products/categories?per_page=50"


def test_woo_proxy_forwards_raw_body(client, upstream):
    upstream.add("POST", "/wc/v3/orders", status=201, json={"id": 99})

    r = client.post("/api/woo/orders", data='{"payment_method":"stripe","line_items":[]}', content_type="application/json")

    assert r.status_code == 200
    assert r.json() == {"id": 99}
    assert upstream.calls[0].kwargs["content"] == b'{"payment_method":"stripe","line_items":[]}'


@pytest.mark.parametrize("method,path", [
    ("get", "/api/woo/customers"),
    ("get", "/api/woo/system_status"),
    ("delete", "/api/woo/orders/1"),
    ("put", "/api/woo/customers/7"),
    ("get", "/api/woo/products/../customers"),
])
def test_woo_proxy_rejects_resources_outside_allow_list(client, upstream, method, path):
    r = getattr(client, method)(path, content_type="application/json")

    assert r.status_code == 403
    assert r.json() == {"error": "Resource not available"}
    assert upstream.calls == []


@pytest.mark.parametrize("method,message", [
    ("get", "Failed to fetch from WooCommerce"),
    ("post", "Failed to post to WooCommerce"),
    ("put", "Failed to update in WooCommerce"),
])
def test_woo_proxy_failure_messages(client, upstream, method, message):
    upstream.add(method.upper(), "/wc/v3/orders/5", status=500, text="db down")

    if method == "get":
        r = client.get("/api/woo/orders/5")
    else:
        r = getattr(client, method)("/api/woo/orders/5", data="{}", content_type="application/json")

    assert r.status_code == 500
    assert r.json() == {"error": message}


def test_woo_proxy_allow_list_is_configurable(client, upstream, settings):
    settings.WOO_PROXY_ALLOWED_RESOURCES = {"GET": ["reports"]}
    upstream.add("GET", "/wc/v3/reports/sales", json={"total": 1})

    assert client.get("/api/woo/reports/sales").status_code == 200
    assert client.get("/api/woo/products").status_code == 403


# ---- addresses ----

def test_addresses_require_session(client, upstream):
    assert client.get("/api/woo/addresses").status_code == 401
    assert client.put("/api/woo/addresses", data={"type": "billing", "address": {}}, content_type="application/json").status_code == 401
    assert upstream.calls == []


def test_addresses_scoped_to_session_user(client, upstream, login_session):
    login_session(user_id="7")
    upstream.add("GET", "/wc/v3/customers/7", json={"billing": {"city": "Berlin"}, "shipping": {"city": "Hamburg"}, "email": "x"})

    r = client.get("/api/woo/addresses?customer_id=1")

    assert r.status_code == 200
    assert r.json() == {"billing": {"city": "Berlin"}, "shipping": {"city": "Hamburg"}}
    assert upstream.calls[0].url.endswith("/customers/7")


def test_address_update_replaces_sub_object(client, upstream, login_session):
    login_session(user_id="7")
    upstream.add("PUT", "/wc/v3/customers/7", json={"billing": {}, "shipping": {"city": "Köln"}})

    r = client.put(
        "/api/woo/addresses",
        data={"type": "shipping", "address": {"city": "Köln"}},
        content_type="application/json",
    )

    assert r.status_code == 200
    assert r.json()["shipping"] == {"city": "Köln"}
    assert upstream.calls[0].kwargs["json"] == {"shipping": {"city": "Köln"}}


def test_address_update_rejects_unknown_type(client, upstream, login_session):
    login_session()
    r = client.put("/api/woo/addresses", data={"type": "email", "address": {}}, content_type="application/json")
    assert r.status_code == 400
    assert upstream.calls == []


def test_address_fetch_failure_is_500(client, upstream, login_session):
    login_session(user_id="7")
    upstream.add("GET", "/wc/v3/customers/7", status=500, text="x")

    r = client.get("/api/woo/addresses")
    assert r.status_code == 500
    assert r.json() == {"error": "Failed to fetch addresses"}


# ---- payment methods ----

def test_payment_methods_only_enabled(client, upstream, login_session):
    login_session()
    upstream.add("GET", "/wc/v3/payment_gateways", json=[
        {"id": "stripe", "enabled": True},
        {"id": "bacs", "enabled": False},
        {"id": "paypal", "enabled": True},
    ])

    r = client.get("/api/woo/payment-methods")

    assert r.status_code == 200
    assert [g["id"] for g in r.json()] == ["stripe", "paypal"]


def test_payment_methods_require_session(client):
    assert client.get("/api/woo/payment-methods").status_code == 401


# ---- store api ----

def test_store_proxy_forwards_cookie_token_and_stores_new_one(client, upstream, settings):
    client.cookies[settings.CART_TOKEN_COOKIE] = "tok-1"
    upstream.add("GET", "/wc/store/v1/cart", json={"items_count": 0}, headers={"Cart-Token": "tok-2"})

    r = client.get("/api/store/cart")

    assert r.status_code == 200
    assert r.json() == {"items_count": 0}
    assert upstream.calls[0].headers["Cart-Token"] == "tok-1"
    cookie = r.cookies[settings.CART_TOKEN_COOKIE]
    assert cookie.value == "tok-2"
    assert cookie["httponly"]
    assert cookie["samesite"] == "Lax"
    assert cookie["max-age"] == 60 * 60 * 24 * 7


def test_store_proxy_without_token_header_sets_no_cookie(client, upstream, settings):
    upstream.add("POST", "/wc/store/v1/cart/add-item", json={"items_count": 1})

    r = client.post("/api/store/cart/add-item", data={"id": 5, "quantity": 1}, content_type="application/json")

    assert r.status_code == 200
    assert settings.CART_TOKEN_COOKIE not in r.cookies


def test_store_proxy_failure_is_500(client, upstream):
    upstream.add("DELETE", "/wc/store/v1/cart/items/abc", status=404, text="no such item")

    r = client.delete("/api/store/cart/items/abc")

    assert r.status_code == 500
    assert r.json() == {"error": "Failed to delete from Store API"}


# ---- checkout ----

BILLING = {
    "firstName": "Ana",
    "lastName": "Roth",
    "address1": "Main 1",
    "city": "Berlin",
    "postcode": "10115",
    "country": "DE",
    "email": "ana@example.com",
}


def test_checkout_config(client, upstream, settings):
    client.cookies[settings.CART_TOKEN_COOKIE] = "tok-1"
    upstream.add("GET", "/wc/store/v1/checkout", json={"payment_methods": ["stripe", "paypal"], "needs_shipping": True})

    r = client.get("/api/checkout")

    assert r.status_code == 200
    assert r.json() == {
        "fields": {},
        "paymentMethods": ["stripe", "paypal"],
        "shippingMethods": [],
        "needsShipping": True,
        "needsPayment": True,
    }
    assert upstream.calls[0].headers["Cart-Token"] == "tok-1"


def test_checkout_config_failure_is_500(client, upstream):
    upstream.add("GET", "/wc/store/v1/checkout", status=503, text="maintenance")

    r = client.get("/api/checkout")

    assert r.status_code == 500
    assert r.json() == {"error": "Failed to fetch checkout configuration"}


def test_checkout_rebuilds_cart_and_places_order(client, upstream, settings):
    client.cookies[settings.CART_TOKEN_COOKIE] = "tok-1"
    upstream.add("DELETE", "/wc/store/v1/cart/items", json=[])
    upstream.add("POST", "/wc/store/v1/cart/add-item", json={"items_count": 1}, headers={"Cart-Token": "tok-2"})
    upstream.add("POST", "/wc/store/v1/checkout", json={
        "order_id": 42,
        "order_key": "wc_order_k",
        "status": "pending",
        "payment_method": "stripe",
        "payment_result": {"redirect_url": "https://shop.test/pay/42"},
    })

    r = client.post("/api/checkout", data={
        "billing": BILLING,
        "useShippingAsBilling": True,
        "cartItems": [
            {"productId": 10, "quantity": 1},
            {"productId": 10, "variationId": 101, "quantity": 2},
        ],
    }, content_type="application/json")

    assert r.status_code == 200
    order = r.json()["order"]
    assert r.json()["success"] is True
    assert order["id"] == 42
    assert order["orderNumber"] == "wc_order_k"
    assert order["paymentUrl"] == "https://shop.test/pay/42"

    assert [(c.method, c.url.rsplit("/v1", 1)[1]) for c in upstream.calls] == [
        ("DELETE", "/cart/items"),
        ("POST", "/cart/add-item"),
        ("POST", "/cart/add-item"),
        ("POST", "/checkout"),
    ]
    adds = upstream.calls_to("/cart/add-item")
    assert [c.kwargs["json"] for c in adds] == [{"id": 10, "quantity": 1}, {"id": 101, "quantity": 2}]
    assert adds[0].headers["Cart-Token"] == "tok-1"
    assert adds[1].headers["Cart-Token"] == "tok-2"

    placed = upstream.calls_to("/checkout")[0]
    assert placed.headers["Cart-Token"] == "tok-2"
    body = placed.kwargs["json"]
    assert body["billing_address"]["email"] == "ana@example.com"
    assert body["shipping_address"] == {
        "first_name": "Ana", "last_name": "Roth", "address_1": "Main 1", "address_2": "",
        "city": "Berlin", "state": "", "postcode": "10115", "country": "DE",
    }
    assert body["payment_method"] == "stripe"
    assert r.cookies[settings.CART_TOKEN_COOKIE]["max-age"] == 0


def test_checkout_rejects_invalid_body(client, upstream):
    r = client.post("/api/checkout", data={"billing": {"firstName": "Ana"}}, content_type="application/json")

    assert r.status_code == 400
    assert r.json()["code"] == "invalid_checkout_data"
    assert upstream.calls == []


def test_checkout_store_error_returns_code_only(client, upstream):
    upstream.add("POST", "/wc/store/v1/checkout", status=400, json={
        "code": "woocommerce_rest_cart_empty", "message": "Cannot create order from empty cart.",
    })

    r = client.post("/api/checkout", data={"billing": BILLING}, content_type="application/json")

    assert r.status_code == 400
    assert r.json() == {"success": False, "error": "Failed to process checkout", "code": "woocommerce_rest_cart_empty"}


def test_checkout_failure_keeps_rolled_cart_token(client, upstream, settings):
    upstream.add("DELETE", "/wc/store/v1/cart/items", json=[])
    upstream.add("POST", "/wc/store/v1/cart/add-item", json={}, headers={"Cart-Token": "tok-9"})
    upstream.add("POST", "/wc/store/v1/checkout", status=500, text="fatal error")

    r = client.post("/api/checkout", data={
        "billing": BILLING, "cartItems": [{"productId": 5, "quantity": 1}],
    }, content_type="application/json")

    assert r.status_code == 400
    assert r.json()["code"] == "checkout_error"
    assert r.cookies[settings.CART_TOKEN_COOKIE].value == "tok-9"


# ---- courses, shipping, geolocation, debug ----

def test_courses_forward_session_jwt(client, upstream, login_session):
    login_session(jwt="jwt-777")
    upstream.add("GET", "/wp-json/blackboard/v1/courses", json=[{"id": 1, "has_access": True}])

    r = client.get("/api/courses")

    assert r.status_code == 200
    assert r.json() == [{"id": 1, "has_access": True}]
    assert upstream.calls[0].headers["Authorization"] == "Bearer jwt-777"


def test_courses_anonymous_has_no_bearer(client, upstream):
    upstream.add("GET", "/wp-json/blackboard/v1/courses", json=[])

    client.get("/api/courses")

    assert "Authorization" not in upstream.calls[0].headers


def test_courses_upstream_status_is_relayed(client, upstream):
    upstream.add("GET", "/wp-json/blackboard/v1/courses", status=503, text="maintenance")

    r = client.get("/api/courses")

    assert r.status_code == 503
    assert r.json() == {"error": "Failed to fetch courses"}


def test_shipping_zones_overview(client, upstream):
    upstream.add("GET", "/wc/v3/shipping/zones", json=[{"id": 1, "name": "DE"}])
    upstream.add("GET", "/wc/v3/shipping/zones/1/methods", json=[{"id": "flat_rate"}])
    upstream.add("GET", "/wc/v3/shipping/zones/1/locations", json=[{"code": "DE"}])

    r = client.get("/api/shipping-zones")

    assert r.status_code == 200
    assert r.json()["zoneMethods"]["1"]["zoneName"] == "DE"


def test_shipping_zones_branch_failure_is_500(client, upstream):
    upstream.add("GET", "/wc/v3/shipping/zones", json=[{"id": 1, "name": "DE"}])
    upstream.add("GET", "/wc/v3/shipping/zones/1/methods", json=[])
    upstream.add("GET", "/wc/v3/shipping/zones/1/locations", status=500, text="x")

    r = client.get("/api/shipping-zones")
    assert r.status_code == 500


def test_debug_route_hidden_by_default(client, upstream):
    r = client.get("/api/debug-payment?orderId=42")
    assert r.status_code == 404
    assert upstream.calls == []


def test_debug_route_when_enabled(client, upstream, settings):
    settings.DEBUG_ROUTES_ENABLED = True
    upstream.add("GET", "/wp-json/blackboard/v1/orders/42/payment-url", json={
        "payment_url": "https://pay.test/x", "redirect_type": "external",
    })

    r = client.get("/api/debug-payment?orderId=42")

    assert r.status_code == 200
    assert r.json()["analysis"]["hasPaymentUrl"] is True
    assert r.json()["analysis"]["redirectType"] == "external"


def test_debug_route_requires_order_id(client, settings):
    settings.DEBUG_ROUTES_ENABLED = True
    assert client.get("/api/debug-payment").status_code == 400
