"""
URL configuration for the payments app.

Registers the checkout and contribution history endpoints and exposes
the Stripe webhook.  Include this module under ``/api/payments/`` in the
project-level URL config.
"""
from django.urls import path
from .views import CheckoutView, MyContributionsView
from .webhooks import stripe_webhook


urlpatterns = [
    path("checkout/", CheckoutView.as_view(), name="checkout"),
    path("contributions/", MyContributionsView.as_view(), name="my-contributions"),
    path("webhook/stripe/", stripe_webhook, name="stripe-webhook"),
]
