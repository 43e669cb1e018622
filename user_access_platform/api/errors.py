"""Centralized exception handlers.

Domain errors are translated by :class:`AuthErrorKind`; validation failures
become 400 with one entry per field; anything else is logged and returned as
a generic 500.
"""
from typing import Any, Dict, List, Mapping, Tuple

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from user_access_platform.errors import AuthError, AuthErrorKind
from user_access_platform.utils.logging_config import get_logger

logger = get_logger(__name__)

INVALID_LOGIN_MESSAGE = "Invalid email or password"

ERROR_RESPONSES: Dict[AuthErrorKind, Tuple[int, str]] = {
    AuthErrorKind.USER_EXISTS: (status.HTTP_409_CONFLICT, "Email already exists"),
    AuthErrorKind.USER_NOT_FOUND: (status.HTTP_404_NOT_FOUND, "User not found"),
    AuthErrorKind.INVALID_CREDENTIALS: (status.HTTP_401_UNAUTHORIZED, INVALID_LOGIN_MESSAGE),
    AuthErrorKind.INVALID_TOKEN: (status.HTTP_401_UNAUTHORIZED, "Authentication required"),
    AuthErrorKind.FORBIDDEN: (status.HTTP_403_FORBIDDEN, "Insufficient permissions"),
}

# Request wrappers that carry no meaning for API clients.
_LOCATION_PREFIXES = ("body", "query", "path", "header", "cookie")


def _field_name(loc: Any) -> Any:
    if isinstance(loc, (list, tuple)):
        parts = [str(p) for p in loc]
        if parts and parts[0] in _LOCATION_PREFIXES:
            parts = parts[1:]
        return ".".join(parts) or None
    if loc in (None, ""):
        return None
    return str(loc)


def _message(error: Mapping[str, Any]) -> str:
    msg = error.get("msg") or error.get("message")
    if msg:
        return str(msg)
    return str(error)


def format_validation_errors(errors: Any) -> List[Dict[str, Any]]:
    """Flatten validation errors into ``[{"field", "message"}]``.

    Accepts a plain message, a single error mapping, a list of pydantic
    error dicts, or mappings of field name to message(s). Only the first
    problem reported for a field is kept.
    """
    details: List[Dict[str, Any]] = []
    seen = set()

    def add(field: Any, message: str) -> None:
        if field in seen:
            return
        seen.add(field)
        details.append({"field": field, "message": message})

    def walk(item: Any, field: Any = None) -> None:
        if item is None:
            return
        if isinstance(item, str):
            add(field, item)
        elif isinstance(item, Mapping):
            if "loc" in item or "msg" in item or "message" in item:
                add(_field_name(item.get("loc", field)), _message(item))
            else:
                for key, value in item.items():
                    walk(value, key if field is None else f"{field}.{key}")
        elif isinstance(item, (list, tuple, set)):
            for value in item:
                walk(value, field)
        else:
            add(field, str(item))

    walk(errors)
    return details


async def auth_error_handler(request: Request, exc: AuthError) -> JSONResponse:
    status_code, message = ERROR_RESPONSES[exc.kind]
    logger.info(f"{request.method} {request.url.path} -> {status_code} ({exc.kind.value})")
    return JSONResponse(status_code=status_code, content={"error": message})


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = format_validation_errors(exc.errors())
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Validation failed", "details": details},
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        f"Unhandled error on {request.method} {request.url.path}: {exc!r}",
        exc_info=exc,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AuthError, auth_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
