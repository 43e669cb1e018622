"""用户管理 API - 列表、查询、更新、删除"""
from fastapi import APIRouter, Depends, Response

from user_access_platform.api.auth import issue_session
from user_access_platform.api.dependencies import (
    get_cookie_manager,
    get_settings,
    get_user_service,
    require_admin,
    require_self_or_admin,
)
from user_access_platform.api.schemas import (
    MessageResponse,
    UserListResponse,
    UserPublic,
    UserResponse,
    UserUpdateRequest,
)
from user_access_platform.config import Settings
from user_access_platform.errors import AuthError, AuthErrorKind
from user_access_platform.models.user import User, UserRole
from user_access_platform.services.user_service import UserService
from user_access_platform.utils.cookies import CookieManager
from user_access_platform.utils.logging_config import get_logger

logger = get_logger(__name__)
router = APIRouter(prefix="/users", tags=["users"])


@router.get("", response_model=UserListResponse)
def list_users(
    _admin: User = Depends(require_admin),
    user_service: UserService = Depends(get_user_service),
):
    users = user_service.list_users()
    return UserListResponse(users=[UserPublic.from_user(u) for u in users])


@router.get("/{user_id}", response_model=UserResponse)
def get_user(
    user_id: int,
    _caller: User = Depends(require_self_or_admin),
    user_service: UserService = Depends(get_user_service),
):
    return UserResponse(user=UserPublic.from_user(user_service.get_user(user_id)))


@router.put("/{user_id}", response_model=UserResponse)
def update_user(
    user_id: int,
    payload: UserUpdateRequest,
    response: Response,
    caller: User = Depends(require_self_or_admin),
    settings: Settings = Depends(get_settings),
    cookies: CookieManager = Depends(get_cookie_manager),
    user_service: UserService = Depends(get_user_service),
):
    """更新用户信息

    Regular users may edit their own name, email and password. Role changes
    require an admin.
    """
    if payload.role is not None and caller.role != UserRole.admin:
        raise AuthError(AuthErrorKind.FORBIDDEN, "role_change_requires_admin")

    user = user_service.update_user(
        user_id,
        name=payload.name,
        email=payload.email,
        password=payload.password,
        role=payload.role,
    )
    # Claims embed email and role, so the caller's own session is re-issued.
    if caller.id == user.id:
        issue_session(response, user, settings, cookies)

    logger.info(f"User {user.id} updated by {caller.id}")
    return UserResponse(user=UserPublic.from_user(user))


@router.delete("/{user_id}", response_model=MessageResponse)
def delete_user(
    user_id: int,
    response: Response,
    caller: User = Depends(require_self_or_admin),
    settings: Settings = Depends(get_settings),
    cookies: CookieManager = Depends(get_cookie_manager),
    user_service: UserService = Depends(get_user_service),
):
    user_service.delete_user(user_id)
    if caller.id == user_id:
        cookies.clear_cookie(response, settings.cookie_name)

    logger.info(f"User {user_id} deleted by {caller.id}")
    return MessageResponse(message="User deleted")
