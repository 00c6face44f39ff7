"""
Signals for the users app.

Automatically create a `Profile` instance whenever a `User` is created,
so code reading ``user.profile`` never has to handle a missing row.
"""
from django.contrib.auth import get_user_model
from django.db.models.signals import post_save
from django.dispatch import receiver

from .models import Profile

User = get_user_model()


@receiver(post_save, sender=User)
def ensure_profile(sender, instance, created, **kwargs):
    """Ensure exactly one Profile exists for every User."""
    if created:
        Profile.objects.get_or_create(
            user=instance,
            defaults={"full_name": instance.get_full_name()},
        )
