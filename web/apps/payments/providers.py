"""Factories for the checkout providers, patched in tests."""

from .paypal import PayPalCheckout
from .stripe_checkout import StripeCheckout


def get_stripe_checkout() -> StripeCheckout:
    return StripeCheckout()


def get_paypal_checkout() -> PayPalCheckout:
    return PayPalCheckout()
