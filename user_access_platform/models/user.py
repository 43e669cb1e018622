from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from sqlmodel import Field, SQLModel


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UserRole(str, Enum):
    user = "user"
    admin = "admin"


class User(SQLModel, table=True):
    __tablename__ = "users"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(max_length=255)
    # 存储前统一 strip + lower，唯一索引建立在规范化后的邮箱上
    email: str = Field(max_length=255, index=True, unique=True)
    password_hash: str
    role: UserRole = Field(default=UserRole.user, index=True, description="用户角色：admin 或 user")
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def is_email_conflict(exc: Exception) -> bool:
    """True when an IntegrityError comes from the unique index on ``users.email``.

    SQLite reports ``UNIQUE constraint failed: users.email``; Postgres names
    the index (``ix_users_email``) and the key column.
    """
    message = str(getattr(exc, "orig", exc)).lower()
    return "unique" in message and "email" in message
