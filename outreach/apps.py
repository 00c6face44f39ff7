from django.apps import AppConfig


class OutreachConfig(AppConfig):
    """Configuration for the outreach app."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "outreach"
