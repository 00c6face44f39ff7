"""
URL configuration for the outreach app, included under ``/api/``.
"""
from django.urls import path
from .views import NetworkSubmissionView, NewsletterSubscribeView


urlpatterns = [
    path("newsletter/subscribe/", NewsletterSubscribeView.as_view(), name="newsletter-subscribe"),
    path("network/", NetworkSubmissionView.as_view(), name="network-submission"),
]
