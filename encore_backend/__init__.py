"""
Package initializer for the Encore crowdfunding backend.

The Celery application is imported here so that shared tasks use
`encore_backend.celery_app` by default, avoiding duplicate worker setups.
"""
from .celery import celery_app  # noqa: F401

__all__ = ["celery_app"]
