"""
Permissions for the projects app.

Contributor data (names, emails, amounts) is only visible to the
project's own team and to platform admins.
"""
from rest_framework import permissions

from users.models import is_platform_admin


class IsProjectMemberOrAdmin(permissions.BasePermission):
    """Permission to check if the user is on a project's team or a platform admin."""

    def has_permission(self, request, view):
        return bool(request.user and request.user.is_authenticated)

    def has_object_permission(self, request, view, obj):
        # obj is a Project instance
        user = request.user
        if is_platform_admin(user):
            return True
        return obj.memberships.filter(user=user).exists()
