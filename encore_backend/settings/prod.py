"""
Production settings for the Encore crowdfunding backend.

Extends the base settings by disabling debug mode and enforcing HTTPS.
Refuses to start without the secrets the payment pipeline depends on:
a checkout that cannot be verified by the webhook would charge backers
without ever crediting the project.
"""
from django.core.exceptions import ImproperlyConfigured

from .base import *  # noqa

DEBUG = False

for _name in ("DJANGO_SECRET_KEY", "STRIPE_SECRET_KEY", "STRIPE_WEBHOOK_SECRET"):
    if not os.getenv(_name):  # noqa: F405
        raise ImproperlyConfigured(f"{_name} must be set in production")

SESSION_COOKIE_SECURE = True
CSRF_COOKIE_SECURE = True
SECURE_SSL_REDIRECT = True
SECURE_PROXY_SSL_HEADER = ("HTTP_X_FORWARDED_PROTO", "https")

SECURE_HSTS_SECONDS = 31536000
SECURE_HSTS_INCLUDE_SUBDOMAINS = True
SECURE_HSTS_PRELOAD = True

CORS_ALLOWED_ORIGINS = CORS_ALLOWED_ORIGINS or [FRONTEND_URL]  # noqa: F405
