from __future__ import annotations

from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlmodel import select

from user_access_platform.errors import AuthError, AuthErrorKind
from user_access_platform.models.db import Database
from user_access_platform.models.user import User, UserRole, is_email_conflict, normalize_email, utcnow
from user_access_platform.utils.logging_config import get_logger
from user_access_platform.utils.passwords import DEFAULT_ROUNDS, hash_password

logger = get_logger(__name__)


class UserService:
    """CRUD over the users table. Authorization is decided by the caller."""

    def __init__(self, database: Database, bcrypt_rounds: int = DEFAULT_ROUNDS):
        self.database = database
        self.bcrypt_rounds = bcrypt_rounds

    def list_users(self) -> List[User]:
        with self.database.session() as session:
            return list(session.exec(select(User).order_by(User.id)).all())

    def get_user(self, user_id: int) -> User:
        with self.database.session() as session:
            user = session.get(User, user_id)
        if user is None:
            raise AuthError(AuthErrorKind.USER_NOT_FOUND, "User not found")
        return user

    def update_user(
        self,
        user_id: int,
        *,
        name: Optional[str] = None,
        email: Optional[str] = None,
        password: Optional[str] = None,
        role: Optional[UserRole] = None,
    ) -> User:
        """更新用户信息

        Raises:
            AuthError(USER_NOT_FOUND): 用户不存在
            AuthError(USER_EXISTS): 新邮箱已被其他用户占用
        """
        with self.database.session() as session:
            user = session.get(User, user_id)
            if user is None:
                raise AuthError(AuthErrorKind.USER_NOT_FOUND, "User not found")

            if email is not None:
                email = normalize_email(email)
                if email != user.email:
                    taken = session.exec(
                        select(User).where(User.email == email, User.id != user_id)
                    ).first()
                    if taken is not None:
                        raise AuthError(AuthErrorKind.USER_EXISTS, "User with this email already exists")
                    user.email = email
            if name is not None:
                user.name = name.strip()
            if password is not None:
                user.password_hash = hash_password(password, rounds=self.bcrypt_rounds)
            if role is not None:
                user.role = UserRole(role)
            user.updated_at = utcnow()

            session.add(user)
            try:
                session.commit()
            except IntegrityError as exc:
                session.rollback()
                if not is_email_conflict(exc):
                    raise
                raise AuthError(
                    AuthErrorKind.USER_EXISTS, "User with this email already exists"
                ) from exc
            session.refresh(user)

        logger.info(f"User updated: id={user.id}")
        return user

    def delete_user(self, user_id: int) -> None:
        with self.database.session() as session:
            user = session.get(User, user_id)
            if user is None:
                raise AuthError(AuthErrorKind.USER_NOT_FOUND, "User not found")
            session.delete(user)
            session.commit()
        logger.info(f"User deleted: id={user_id}")
