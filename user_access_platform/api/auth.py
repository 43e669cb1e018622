from datetime import timedelta

from fastapi import APIRouter, Depends, Request, Response, status

from user_access_platform.api.dependencies import (
    get_auth_service,
    get_cookie_manager,
    get_current_user,
    get_settings,
)
from user_access_platform.api.errors import INVALID_LOGIN_MESSAGE
from user_access_platform.api.schemas import (
    AuthResponse,
    MessageResponse,
    SignInRequest,
    SignUpRequest,
    UserPublic,
    UserResponse,
)
from user_access_platform.config import Settings
from user_access_platform.errors import AuthError, AuthErrorKind
from user_access_platform.models.user import User
from user_access_platform.services.auth_service import AuthService
from user_access_platform.utils.cookies import CookieManager
from user_access_platform.utils.logging_config import get_logger
from user_access_platform.utils.tokens import sign_token, verify_token

logger = get_logger(__name__)
router = APIRouter(prefix="/auth", tags=["auth"])


def issue_session(response: Response, user: User, settings: Settings, cookies: CookieManager) -> str:
    """Mint a session token for ``user`` and attach it as the session cookie."""
    token = sign_token(
        {"sub": user.id, "email": user.email, "role": user.role.value},
        settings.jwt_secret,
        timedelta(seconds=settings.token_ttl_seconds),
    )
    cookies.set_cookie(response, settings.cookie_name, token)
    return token


@router.post("/sign-up", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def sign_up(
    payload: SignUpRequest,
    response: Response,
    settings: Settings = Depends(get_settings),
    cookies: CookieManager = Depends(get_cookie_manager),
    auth_service: AuthService = Depends(get_auth_service),
):
    user = auth_service.create_user(
        name=payload.name,
        email=payload.email,
        password=payload.password,
        role=payload.role,
    )
    issue_session(response, user, settings, cookies)
    logger.info(f"User signed up: {user.email}")
    return AuthResponse(message="User registered", user=UserPublic.from_user(user))


@router.post("/sign-in", response_model=AuthResponse)
def sign_in(
    payload: SignInRequest,
    response: Response,
    settings: Settings = Depends(get_settings),
    cookies: CookieManager = Depends(get_cookie_manager),
    auth_service: AuthService = Depends(get_auth_service),
):
    try:
        user = auth_service.authenticate_user(email=payload.email, password=payload.password)
    except AuthError as exc:
        if exc.kind in (AuthErrorKind.USER_NOT_FOUND, AuthErrorKind.INVALID_CREDENTIALS):
            logger.info(f"Sign-in rejected ({exc.kind.value})")
            # 不区分用户不存在与密码错误，避免邮箱枚举
            raise AuthError(AuthErrorKind.INVALID_CREDENTIALS, INVALID_LOGIN_MESSAGE) from exc
        raise

    issue_session(response, user, settings, cookies)
    logger.info(f"User signed in: {user.email}")
    return AuthResponse(message="User signed in", user=UserPublic.from_user(user))


@router.post("/sign-out", response_model=MessageResponse)
def sign_out(
    request: Request,
    response: Response,
    settings: Settings = Depends(get_settings),
    cookies: CookieManager = Depends(get_cookie_manager),
):
    token = cookies.read_cookie(request, settings.cookie_name)
    if token:
        try:
            claims = verify_token(token, settings.jwt_secret)
            logger.info(f"User signed out: id={claims.user_id}")
        except AuthError:
            logger.info("Signed out a stale or invalid session")
    else:
        logger.debug("Sign-out without an active session")

    cookies.clear_cookie(response, settings.cookie_name)
    return MessageResponse(message="User signed out")


@router.get("/me", response_model=UserResponse)
def me(current_user: User = Depends(get_current_user)):
    return UserResponse(user=UserPublic.from_user(current_user))
