# users/models/__init__.py

from users.models.user import ROLE_ADMIN, ROLE_EDITOR, ROLE_STAFF, User, UserManager

__all__ = ["User", "UserManager", "ROLE_ADMIN", "ROLE_EDITOR", "ROLE_STAFF"]
