# users/permissions.py

from rest_framework.permissions import BasePermission

from users.models import ROLE_ADMIN, ROLE_EDITOR, ROLE_STAFF


# ---------------- BASE ROLE PERMISSION ----------------
class HasRole(BasePermission):
    """
    Base permission to check user role safely.
    Superusers always pass.
    """

    allowed_roles = set()

    def has_permission(self, request, view):
        user = request.user
        if not (user and user.is_authenticated):
            return False
        if user.is_superuser:
            return True
        return user.role in self.allowed_roles


# ---------------- ROLE PERMISSIONS ----------------
class IsAdmin(HasRole):
    allowed_roles = {ROLE_ADMIN}


class IsAdminOrEditor(HasRole):
    allowed_roles = {ROLE_ADMIN, ROLE_EDITOR}


class IsNotStaff(HasRole):
    """
    Till staff are kept out of the accounting back office.
    """

    message = "Staff users cannot access this resource."
    allowed_roles = {ROLE_ADMIN, ROLE_EDITOR}


__all__ = ["HasRole", "IsAdmin", "IsAdminOrEditor", "IsNotStaff", "ROLE_STAFF"]
