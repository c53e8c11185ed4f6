from enum import Enum


class UserRole(str, Enum):
    """User roles (who may manage content and other users)."""

    USER = "user"
    ADMIN = "admin"
