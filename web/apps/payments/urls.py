from django.urls import path

from .views import CapturePayPalPaymentView, CreatePayPalOrderView, CreateStripeCheckoutView

app_name = "payments"

urlpatterns = [
    path("create-stripe-checkout", CreateStripeCheckoutView.as_view(), name="create-stripe-checkout"),
    path("create-paypal-order", CreatePayPalOrderView.as_view(), name="create-paypal-order"),
    path("capture-paypal-payment", CapturePayPalPaymentView.as_view(), name="capture-paypal-payment"),
]
