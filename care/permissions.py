"""
Custom permission classes for role based access control.
"""
from rest_framework.permissions import BasePermission

ADMIN_ROLES = {"admin"}
MANAGER_ROLES = {"admin", "hospital"}
CLINICAL_ROLES = {"admin", "hospital", "doctor"}


def has_role(user, roles) -> bool:
    return bool(user and user.is_authenticated and getattr(user, "role", None) in roles)


class IsAdminRole(BasePermission):
    """Allow access only to administrators."""
    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        return has_role(getattr(request, "user", None), ADMIN_ROLES)


class IsHospitalManager(BasePermission):
    """Administrators and hospital staff accounts."""
    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        return has_role(getattr(request, "user", None), MANAGER_ROLES)
