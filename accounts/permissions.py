from rest_framework import permissions

from accounts.scoping import get_driver_session


def is_admin_user(user):
    if not user or not user.is_authenticated:
        return False
    return bool(getattr(user, 'is_superuser', False) or hasattr(user, 'admin_profile'))


class IsAdmin(permissions.BasePermission):
    """Organization admins and superusers."""
    message = 'Administrator access required.'

    def has_permission(self, request, view):
        return get_driver_session(request) is None and is_admin_user(request.user)


class IsDriver(permissions.BasePermission):
    """Requests authenticated with an active driver session."""
    message = 'An active driver session is required.'

    def has_permission(self, request, view):
        return get_driver_session(request) is not None


class IsAdminOrDriverReadOnly(permissions.BasePermission):
    """Admins may write; drivers may only read master data."""

    def has_permission(self, request, view):
        if get_driver_session(request) is not None:
            return request.method in permissions.SAFE_METHODS
        return is_admin_user(request.user)


class IsAdminOrDriver(permissions.BasePermission):
    """Admins, or drivers acting within their own session."""

    def has_permission(self, request, view):
        return get_driver_session(request) is not None or is_admin_user(request.user)
