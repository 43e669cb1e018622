"""
FastAPI dependencies.

Application-scoped collaborators are built once by ``create_app`` and kept on
``app.state``; these accessors hand them to route handlers.
"""
from fastapi import Depends, Request

from user_access_platform.config import Settings
from user_access_platform.errors import AuthError, AuthErrorKind
from user_access_platform.models.user import User, UserRole
from user_access_platform.services.auth_service import AuthService
from user_access_platform.services.user_service import UserService
from user_access_platform.utils.cookies import CookieManager
from user_access_platform.utils.tokens import verify_token


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth_service


def get_user_service(request: Request) -> UserService:
    return request.app.state.user_service


def get_cookie_manager(request: Request) -> CookieManager:
    return request.app.state.cookies


def get_current_user(
    request: Request,
    settings: Settings = Depends(get_settings),
    cookies: CookieManager = Depends(get_cookie_manager),
    user_service: UserService = Depends(get_user_service),
) -> User:
    """Resolve the session cookie to a live user record.

    A valid token for a user that has since been deleted is rejected the
    same way as a bad token.
    """
    token = cookies.read_cookie(request, settings.cookie_name)
    if not token:
        raise AuthError(AuthErrorKind.INVALID_TOKEN, "Missing session token")

    claims = verify_token(token, settings.jwt_secret)
    try:
        return user_service.get_user(claims.user_id)
    except AuthError as exc:
        if exc.kind is AuthErrorKind.USER_NOT_FOUND:
            raise AuthError(AuthErrorKind.INVALID_TOKEN, "Session user no longer exists") from exc
        raise


def require_admin(user: User = Depends(get_current_user)) -> User:
    if user.role != UserRole.admin:
        raise AuthError(AuthErrorKind.FORBIDDEN, "admin_required")
    return user


def require_self_or_admin(user_id: int, current_user: User = Depends(get_current_user)) -> User:
    if current_user.role != UserRole.admin and current_user.id != user_id:
        raise AuthError(AuthErrorKind.FORBIDDEN, "self_or_admin_required")
    return current_user
