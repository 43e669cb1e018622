"""Error taxonomy shared by services, dependencies and route handlers.

Handlers match on :attr:`AuthError.kind`; message text is for humans only.
"""
from enum import Enum
from typing import Optional


class AuthErrorKind(str, Enum):
    USER_EXISTS = "user_exists"
    USER_NOT_FOUND = "user_not_found"
    INVALID_CREDENTIALS = "invalid_credentials"
    INVALID_TOKEN = "invalid_token"
    FORBIDDEN = "forbidden"


class AuthError(Exception):
    def __init__(self, kind: AuthErrorKind, message: Optional[str] = None):
        self.kind = kind
        self.message = message or kind.value
        super().__init__(self.message)

    def __repr__(self) -> str:
        return f"AuthError(kind={self.kind.value!r}, message={self.message!r})"
