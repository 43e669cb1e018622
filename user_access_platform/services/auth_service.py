from __future__ import annotations

from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlmodel import select

from user_access_platform.errors import AuthError, AuthErrorKind
from user_access_platform.models.db import Database
from user_access_platform.models.user import User, UserRole, is_email_conflict, normalize_email
from user_access_platform.utils.logging_config import get_logger
from user_access_platform.utils.passwords import DEFAULT_ROUNDS, hash_password, verify_password

logger = get_logger(__name__)


class AuthService:
    def __init__(self, database: Database, bcrypt_rounds: int = DEFAULT_ROUNDS):
        self.database = database
        self.bcrypt_rounds = bcrypt_rounds
        self._dummy_hash: Optional[str] = None

    def create_user(
        self,
        *,
        name: str,
        email: str,
        password: str,
        role: UserRole = UserRole.user,
    ) -> User:
        """注册新用户

        The pre-insert lookup gives the common case a clean error; the unique
        index on ``users.email`` decides concurrent duplicates.

        Raises:
            AuthError(USER_EXISTS): 邮箱已被注册
        """
        email = normalize_email(email)
        with self.database.session() as session:
            existing = session.exec(select(User).where(User.email == email)).first()
            if existing is not None:
                raise AuthError(AuthErrorKind.USER_EXISTS, "User with this email already exists")

            user = User(
                name=name.strip(),
                email=email,
                password_hash=self.hash_password(password),
                role=UserRole(role),
            )
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

        logger.info(f"User registered: id={user.id} email={user.email} role={user.role.value}")
        return user

    def authenticate_user(self, *, email: str, password: str) -> User:
        """Raises USER_NOT_FOUND or INVALID_CREDENTIALS; callers decide how much to reveal."""
        email = normalize_email(email)
        with self.database.session() as session:
            user = session.exec(select(User).where(User.email == email)).first()
        if user is None:
            # Same bcrypt cost as a real check, so timing does not reveal registered emails
            verify_password(password, self.dummy_hash)
            raise AuthError(AuthErrorKind.USER_NOT_FOUND, "User not found")
        if not verify_password(password, user.password_hash):
            raise AuthError(AuthErrorKind.INVALID_CREDENTIALS, "Invalid password")
        return user

    def hash_password(self, password: str) -> str:
        return hash_password(password, rounds=self.bcrypt_rounds)

    @property
    def dummy_hash(self) -> str:
        """Hash compared against when the email is unknown; built once per service."""
        if self._dummy_hash is None:
            self._dummy_hash = self.hash_password("unknown-account-placeholder")
        return self._dummy_hash

    def ensure_default_admin(self, email: Optional[str], password: Optional[str]) -> Optional[User]:
        """确保存在管理员账号

        Only runs when both credentials are configured and no admin exists yet.

        Args:
            email: 管理员邮箱
            password: 管理员密码
        """
        if not email or not password:
            return None

        with self.database.session() as session:
            admin_exists = session.exec(
                select(User).where(User.role == UserRole.admin)
            ).first()
        if admin_exists:
            return None

        try:
            admin = self.create_user(name="Administrator", email=email, password=password, role=UserRole.admin)
        except AuthError as exc:
            if exc.kind is not AuthErrorKind.USER_EXISTS:
                raise
            logger.warning(f"Bootstrap admin skipped: {normalize_email(email)} is already a regular user")
            return None
        logger.info(f"Default admin user created: {admin.email}")
        return admin
