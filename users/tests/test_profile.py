"""
Tests for profile creation and the public display name.
"""
import pytest
from django.contrib.auth.models import User

from projects.permissions import is_platform_admin
from users.models import Profile


@pytest.mark.django_db
def test_profile_created_with_user():
    """A profile is created automatically, seeded from the account name."""
    u = User.objects.create_user(username="bob", password="pass12345", first_name="Bob", last_name="Stone")
    assert u.profile.full_name == "Bob Stone"
    assert u.profile.user_type == Profile.TYPE_FAN
    assert not u.profile.is_admin


@pytest.mark.django_db
def test_profile_not_duplicated_on_save(user):
    user.first_name = "Janet"
    user.save()
    assert Profile.objects.filter(user=user).count() == 1


@pytest.mark.parametrize(
    "full_name,expected",
    [
        ("Jane Doe", "Jane D."),
        ("Mary Ann Smith", "Mary S."),
        ("Cher", "Cher"),
        ("", "Anonymous"),
        ("   ", "Anonymous"),
    ],
)
def test_short_name(full_name, expected):
    assert Profile(full_name=full_name).short_name == expected


@pytest.mark.django_db
def test_platform_admin_detection(user, platform_admin):
    assert is_platform_admin(platform_admin)
    assert not is_platform_admin(user)
    user.is_staff = True
    assert is_platform_admin(user)
