"""Session cookie helpers."""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Literal, Optional

from fastapi import Request, Response

SameSite = Literal["strict", "lax", "none"]


@dataclass(frozen=True)
class CookieOptions:
    """Attributes applied to every session cookie.

    Overrides go through :func:`dataclasses.replace`, so an unknown option
    name raises ``TypeError`` rather than being ignored.
    """

    max_age: int
    http_only: bool = True
    secure: bool = True
    same_site: SameSite = "strict"
    path: str = "/"

    def __post_init__(self) -> None:
        if self.max_age <= 0:
            raise ValueError("cookie max_age must be positive")
        # Browsers drop SameSite=None cookies that are not Secure.
        if self.same_site == "none" and not self.secure:
            raise ValueError("same_site='none' requires secure=True")


class CookieManager:
    def __init__(self, defaults: CookieOptions):
        self.defaults = defaults

    def options(self, **overrides) -> CookieOptions:
        if not overrides:
            return self.defaults
        return replace(self.defaults, **overrides)

    def set_cookie(self, response: Response, name: str, value: str, **overrides) -> CookieOptions:
        opts = self.options(**overrides)
        response.set_cookie(
            key=name,
            value=value,
            max_age=opts.max_age,
            path=opts.path,
            secure=opts.secure,
            httponly=opts.http_only,
            samesite=opts.same_site,
        )
        return opts

    def clear_cookie(self, response: Response, name: str, **overrides) -> None:
        """Expire ``name`` using the same scope attributes it was set with."""
        opts = self.options(**overrides)
        response.delete_cookie(
            key=name,
            path=opts.path,
            secure=opts.secure,
            httponly=opts.http_only,
            samesite=opts.same_site,
        )

    @staticmethod
    def read_cookie(request: Request, name: str) -> Optional[str]:
        return request.cookies.get(name) or None
