"""
Role checks layered on top of authentication.
"""
from django.conf import settings
from rest_framework.permissions import BasePermission


def _is_admin(user) -> bool:
    return bool(user and user.is_authenticated and getattr(user, 'is_admin', False))


class IsAdmin(BasePermission):
    message = "Admin access required"

    def has_permission(self, request, view):
        return _is_admin(request.user)


class CanChangeOrderStatus(BasePermission):
    """
    Admins only while ORDER_STATUS_REQUIRES_ADMIN is on, otherwise any
    authenticated user (who can then only reach their own orders).
    """
    message = "Only administrators can change order status"

    def has_permission(self, request, view):
        if settings.ORDER_STATUS_REQUIRES_ADMIN:
            return _is_admin(request.user)
        return bool(request.user and request.user.is_authenticated)
