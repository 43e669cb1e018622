"""Database models and configuration"""

from user_access_platform.models.user import User, UserRole, normalize_email
from user_access_platform.models.db import Database

__all__ = [
    # Database
    "Database",
    # Models
    "User",
    "UserRole",
    "normalize_email",
]
