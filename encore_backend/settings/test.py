"""
Test settings for the Encore crowdfunding backend.

Runs against an in-memory SQLite database, executes Celery tasks
eagerly and uses fixed Stripe/email credentials so tests never reach
external services.
"""
from .base import *  # noqa

DEBUG = False
ALLOWED_HOSTS = ["*"]

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

CACHES = {"default": {"BACKEND": "django.core.cache.backends.locmem.LocMemCache"}}

PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]

REST_FRAMEWORK = {
    **REST_FRAMEWORK,  # noqa: F405
    "DEFAULT_THROTTLE_CLASSES": [],
}

CELERY_TASK_ALWAYS_EAGER = True
CELERY_TASK_EAGER_PROPAGATES = False
CELERY_BROKER_URL = "memory://"
CELERY_RESULT_BACKEND = "cache+memory://"

FRONTEND_URL = "https://encore.test"
STRIPE_SECRET_KEY = "sk_test_dummy"
STRIPE_WEBHOOK_SECRET = "whsec_test_secret"
STRIPE_FEE_PERCENT = "0.029"
STRIPE_FEE_FIXED_CENTS = 30

TRANSACTIONAL_EMAIL_API_URL = "https://email.test/api/v1/transactional"
TRANSACTIONAL_EMAIL_API_KEY = "test-email-key"
BACKER_CONFIRMATION_TEMPLATE_ID = "tmpl_backer_confirmation"
STAKEHOLDER_ALERT_TEMPLATE_ID = "tmpl_stakeholder_alert"
PLACEHOLDER_IMAGE_URL = "https://encore.test/images/placeholder.png"
