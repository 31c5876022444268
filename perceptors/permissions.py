"""
Role based permission classes for the perceptor endpoints.

These gate whole endpoints.  Per-perceptor scoping (a manager may only
touch its own perceptors) is enforced by the lifecycle service.
"""
from rest_framework.permissions import BasePermission

from .models import User

STAFF_ROLES = {User.ROLE_MANAGER, User.ROLE_ADMIN}


class IsStaffRole(BasePermission):
    """Allow managers and administrators."""
    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        user = getattr(request, "user", None)
        if not (user and user.is_authenticated):
            return False
        return bool(user.is_superuser or getattr(user, "role", None) in STAFF_ROLES)


class IsAdminRole(BasePermission):
    """Only administrators (or Django superusers)."""
    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        user = getattr(request, "user", None)
        return bool(user and user.is_authenticated and getattr(user, "is_administrator", False))
