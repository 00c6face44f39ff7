"""
Models for the users app.

A `Profile` model extends the built-in `auth.User` with the fields the
platform needs: a display name, an avatar and the user's role.  A
`OneToOneField` links each profile to its user.  The profile is created
automatically via signals when a new user instance is saved.
"""
from django.contrib.auth.models import User
from django.db import models
from django.db.models import Q


class Profile(models.Model):
    """Extension of Django's built-in User model."""

    TYPE_FAN = "fan"
    TYPE_ARTIST = "artist"
    TYPE_ADMIN = "admin"
    TYPE_CHOICES = [
        (TYPE_FAN, "Fan"),
        (TYPE_ARTIST, "Artist"),
        (TYPE_ADMIN, "Admin"),
    ]

    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name="profile")
    full_name = models.CharField(max_length=255, blank=True)
    avatar_url = models.URLField(blank=True, default="")
    user_type = models.CharField(
        max_length=10, choices=TYPE_CHOICES, default=TYPE_FAN, db_index=True
    )
    stripe_customer_id = models.CharField(max_length=255, blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    @property
    def is_admin(self) -> bool:
        return self.user_type == self.TYPE_ADMIN

    @property
    def short_name(self) -> str:
        """
        Public display form of the name: first name plus last initial
        ("Jane D."), a single name as-is, or "Anonymous".
        """
        parts = (self.full_name or "").split()
        if not parts:
            return "Anonymous"
        if len(parts) == 1:
            return parts[0]
        return f"{parts[0]} {parts[-1][0]}."

    def __str__(self) -> str:
        return f"Profile<{self.user.username}>"


def platform_admin_q() -> Q:
    """``User`` filter matching platform admins: staff, superusers and admin profiles."""
    return Q(is_staff=True) | Q(is_superuser=True) | Q(profile__user_type=Profile.TYPE_ADMIN)


def is_platform_admin(user) -> bool:
    """Per-instance form of ``platform_admin_q``."""
    if not user or not user.is_authenticated:
        return False
    if user.is_staff or user.is_superuser:
        return True
    profile = getattr(user, "profile", None)
    return bool(profile and profile.is_admin)
