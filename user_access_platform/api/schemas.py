from typing import Annotated, List, Optional

from pydantic import AfterValidator, BaseModel, EmailStr, Field, StringConstraints

from user_access_platform.models.user import User, UserRole
from user_access_platform.utils.passwords import MAX_PASSWORD_BYTES

PASSWORD_MIN_LENGTH = 6


def _check_password_bytes(value: str) -> str:
    if len(value.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
    return value


Name = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=255)]
NewPassword = Annotated[
    str,
    Field(min_length=PASSWORD_MIN_LENGTH, max_length=128),
    AfterValidator(_check_password_bytes),
]


class SignUpRequest(BaseModel):
    name: Name
    email: EmailStr
    password: NewPassword
    role: UserRole = UserRole.user


class SignInRequest(BaseModel):
    email: EmailStr
    # 登录时只要求非空，长度不符的密码统一走 401
    password: str = Field(min_length=1, max_length=128)


class UserUpdateRequest(BaseModel):
    name: Optional[Name] = None
    email: Optional[EmailStr] = None
    password: Optional[NewPassword] = None
    role: Optional[UserRole] = None


class UserPublic(BaseModel):
    """User payload returned by the API. Never carries the password hash."""

    id: int
    name: str
    email: str
    role: UserRole

    @classmethod
    def from_user(cls, user: User) -> "UserPublic":
        return cls(id=user.id, name=user.name, email=user.email, role=user.role)


class AuthResponse(BaseModel):
    message: str
    user: UserPublic


class UserResponse(BaseModel):
    user: UserPublic


class UserListResponse(BaseModel):
    users: List[UserPublic]


class MessageResponse(BaseModel):
    message: str


class ValidationDetail(BaseModel):
    field: Optional[str] = None
    message: str


class ErrorResponse(BaseModel):
    error: str
    details: Optional[List[ValidationDetail]] = None
