"""Runtime configuration loaded from environment variables."""
from __future__ import annotations

import os
import secrets
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Tuple

from user_access_platform.utils.logging_config import get_logger

logger = get_logger(__name__)

PROJECT_ROOT = Path(__file__).resolve().parent.parent
DEFAULT_DB_PATH = PROJECT_ROOT / "database.db"
DEFAULT_LOG_DIR = PROJECT_ROOT / "logs"

DEVELOPMENT_ENVS = ("development", "test")
KNOWN_ENVS = ("production",) + DEVELOPMENT_ENVS
# HS256 key length below which PyJWT warns; enforced in production
MIN_PRODUCTION_SECRET_BYTES = 32


class ConfigurationError(RuntimeError):
    """Raised when the environment cannot produce a usable configuration."""


def _env_bool(name: str, default: Optional[bool] = None) -> Optional[bool]:
    """Parse a boolean environment variable.

    Accepted truthy: 1, true, yes, y, on
    Accepted falsy:  0, false, no, n, off
    Anything else (or unset) returns ``default``.
    """
    raw = os.getenv(name)
    if raw is None:
        return default
    v = raw.strip().lower()
    if v in ("1", "true", "yes", "y", "on"):
        return True
    if v in ("0", "false", "no", "n", "off"):
        return False
    return default


def _env_int(name: str, default: Optional[int]) -> Optional[int]:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}")


@dataclass(frozen=True)
class Settings:
    jwt_secret: str
    app_env: str = "production"
    token_ttl_minutes: int = 24 * 60
    cookie_ttl_minutes: Optional[int] = None
    cookie_secure: Optional[bool] = None
    cookie_name: str = "token"
    bcrypt_rounds: int = 12
    database_url: str = f"sqlite:///{DEFAULT_DB_PATH}"
    log_dir: Path = DEFAULT_LOG_DIR
    log_level: str = "INFO"
    log_to_file: bool = True
    admin_email: Optional[str] = None
    admin_password: Optional[str] = None
    cors_origins: Tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if self.app_env not in KNOWN_ENVS:
            raise ConfigurationError(
                f"APP_ENV must be one of {', '.join(KNOWN_ENVS)}, got {self.app_env!r}"
            )
        if not self.jwt_secret:
            raise ConfigurationError("USER_ACCESS_JWT_SECRET is required")
        if self.is_production and len(self.jwt_secret.encode("utf-8")) < MIN_PRODUCTION_SECRET_BYTES:
            raise ConfigurationError(
                f"USER_ACCESS_JWT_SECRET must be at least {MIN_PRODUCTION_SECRET_BYTES} bytes in production"
            )
        if self.token_ttl_minutes <= 0:
            raise ConfigurationError("USER_ACCESS_TOKEN_TTL_MINUTES must be positive")
        if self.cookie_ttl_minutes is not None:
            if self.cookie_ttl_minutes <= 0:
                raise ConfigurationError("USER_ACCESS_COOKIE_TTL_MINUTES must be positive")
            # A cookie outliving its token would carry a dead session.
            if self.cookie_ttl_minutes > self.token_ttl_minutes:
                raise ConfigurationError(
                    "USER_ACCESS_COOKIE_TTL_MINUTES "
                    f"({self.cookie_ttl_minutes}) exceeds the token lifetime "
                    f"({self.token_ttl_minutes})"
                )
        if not 4 <= self.bcrypt_rounds <= 31:
            raise ConfigurationError("USER_ACCESS_BCRYPT_ROUNDS must be between 4 and 31")

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"

    @property
    def token_ttl_seconds(self) -> int:
        return self.token_ttl_minutes * 60

    @property
    def cookie_max_age(self) -> int:
        """Cookie lifetime in seconds; follows the token lifetime unless set."""
        minutes = self.cookie_ttl_minutes or self.token_ttl_minutes
        return minutes * 60

    @property
    def secure_cookies(self) -> bool:
        if self.cookie_secure is not None:
            return self.cookie_secure
        return self.is_production


def _database_url() -> str:
    url = os.getenv("USER_ACCESS_DATABASE_URL") or os.getenv("DATABASE_URL")
    if url:
        return url
    db_path = Path(os.getenv("USER_ACCESS_DB_PATH", DEFAULT_DB_PATH))
    return f"sqlite:///{db_path}"


def _jwt_secret(app_env: str) -> str:
    secret = os.getenv("USER_ACCESS_JWT_SECRET", "").strip()
    if secret:
        return secret
    if app_env in DEVELOPMENT_ENVS:
        logger.warning(
            "USER_ACCESS_JWT_SECRET is not set; using a random secret for this "
            "process (sessions will not survive a restart)"
        )
        return secrets.token_urlsafe(32)
    raise ConfigurationError(
        f"USER_ACCESS_JWT_SECRET must be set when APP_ENV={app_env!r}"
    )


def load_settings() -> Settings:
    """Build :class:`Settings` from the current environment."""
    app_env = os.getenv("APP_ENV", "production").strip().lower()
    if app_env not in KNOWN_ENVS:
        raise ConfigurationError(
            f"APP_ENV must be one of {', '.join(KNOWN_ENVS)}, got {app_env!r}"
        )

    origins = tuple(
        o.strip() for o in os.getenv("USER_ACCESS_CORS_ORIGINS", "").split(",") if o.strip()
    )

    return Settings(
        jwt_secret=_jwt_secret(app_env),
        app_env=app_env,
        token_ttl_minutes=_env_int("USER_ACCESS_TOKEN_TTL_MINUTES", 24 * 60),
        cookie_ttl_minutes=_env_int("USER_ACCESS_COOKIE_TTL_MINUTES", None),
        cookie_secure=_env_bool("USER_ACCESS_COOKIE_SECURE"),
        bcrypt_rounds=_env_int("USER_ACCESS_BCRYPT_ROUNDS", 12),
        database_url=_database_url(),
        log_dir=Path(os.getenv("USER_ACCESS_LOG_DIR", DEFAULT_LOG_DIR)),
        log_level=os.getenv("USER_ACCESS_LOG_LEVEL", "INFO"),
        log_to_file=bool(_env_bool("USER_ACCESS_LOG_TO_FILE", True)),
        admin_email=os.getenv("USER_ACCESS_ADMIN_EMAIL") or None,
        admin_password=os.getenv("USER_ACCESS_ADMIN_PASSWORD") or None,
        cors_origins=origins,
    )
