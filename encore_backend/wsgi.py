"""
WSGI entry point, used by gunicorn-style servers in production.
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "encore_backend.settings.dev")

application = get_wsgi_application()
