# accounts/permissions.py
from rest_framework.permissions import BasePermission, SAFE_METHODS


def _role(user):
    return getattr(user, "role", None)


class IsAdmin(BasePermission):
    def has_permission(self, request, view):
        return bool(request.user and request.user.is_authenticated and (_role(request.user) == "ADMIN" or request.user.is_staff))


class IsAdminOrReadOnly(BasePermission):
    """Any signed-in user may read; only admins write."""

    def has_permission(self, request, view):
        if request.method in SAFE_METHODS:
            return bool(request.user and request.user.is_authenticated)
        return IsAdmin().has_permission(request, view)
