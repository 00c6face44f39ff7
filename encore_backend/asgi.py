"""
ASGI entry point for the Encore crowdfunding backend.

The default settings module is the development configuration; set
DJANGO_SETTINGS_MODULE to ``encore_backend.settings.prod`` in deployments.
"""

import os

from django.core.asgi import get_asgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "encore_backend.settings.dev")

application = get_asgi_application()
