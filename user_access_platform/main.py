from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from user_access_platform.api.errors import register_exception_handlers
from user_access_platform.api.router import router as api_router
from user_access_platform.config import Settings, load_settings
from user_access_platform.middleware import RequestLoggingMiddleware
from user_access_platform.models.db import Database
from user_access_platform.services.auth_service import AuthService
from user_access_platform.services.user_service import UserService
from user_access_platform.utils.cookies import CookieManager, CookieOptions
from user_access_platform.utils.logging_config import get_logger, setup_access_logging, setup_logging

logger = get_logger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the application and every collaborator it owns.

    ``settings`` defaults to :func:`load_settings`, which fails fast on a
    missing signing secret outside development.
    """
    settings = settings or load_settings()

    setup_logging(
        log_level=settings.log_level,
        log_dir=settings.log_dir,
        enable_file=settings.log_to_file,
    )
    setup_access_logging(settings.log_dir if settings.log_to_file else None)

    app = FastAPI(title="User Access Platform")

    database = Database(settings.database_url)
    app.state.settings = settings
    app.state.database = database
    app.state.auth_service = AuthService(database, bcrypt_rounds=settings.bcrypt_rounds)
    app.state.user_service = UserService(database, bcrypt_rounds=settings.bcrypt_rounds)
    app.state.cookies = CookieManager(
        CookieOptions(
            max_age=settings.cookie_max_age,
            http_only=True,
            secure=settings.secure_cookies,
            same_site="strict",
        )
    )

    # 添加请求日志中间件（在 CORS 之前）
    app.add_middleware(RequestLoggingMiddleware)

    if settings.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=list(settings.cors_origins),
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    register_exception_handlers(app)

    logger.info(
        f"Application initialized: env={settings.app_env} "
        f"token_ttl={settings.token_ttl_seconds}s cookie_max_age={settings.cookie_max_age}s"
    )

    @app.on_event("startup")
    def on_startup():
        """Initialize persistent resources when the API boots."""
        database.init_db()
        app.state.auth_service.ensure_default_admin(settings.admin_email, settings.admin_password)

    @app.on_event("shutdown")
    def on_shutdown():
        """Release the connection pool when the API stops."""
        database.dispose()

    app.include_router(api_router)

    @app.get("/")
    def root():
        return {"status": "ok", "message": "User Access Platform is running"}

    return app
