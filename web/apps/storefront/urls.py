from django.urls import path

from .views import (
    AddressesView,
    CheckoutView,
    CoursesView,
    DebugPaymentView,
    GeolocationView,
    OrderDetailView,
    PaymentMethodsView,
    ShippingZonesView,
    StoreProxyView,
    WooProxyView,
)

app_name = "storefront"

urlpatterns = [
    path("orders/<int:order_id>", OrderDetailView.as_view(), name="order-detail"),
    # fixed routes before the catch-all
    path("woo/addresses", AddressesView.as_view(), name="addresses"),
    path("woo/payment-methods", PaymentMethodsView.as_view(), name="payment-methods"),
    path("woo/<path:path>", WooProxyView.as_view(), name="woo-proxy"),
    path("checkout", CheckoutView.as_view(), name="checkout"),
    path("store/<path:path>", StoreProxyView.as_view(), name="store-proxy"),
    path("courses", CoursesView.as_view(), name="courses"),
    path("shipping-zones", ShippingZonesView.as_view(), name="shipping-zones"),
    path("geolocation", GeolocationView.as_view(), name="geolocation"),
    path("debug-payment", DebugPaymentView.as_view(), name="debug-payment"),
]
