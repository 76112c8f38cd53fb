"""Pydantic schemas for API request/response models."""

from .auth import (
    LoginRequest,
    LoginResponse,
    PasswordForgotRequest,
    PasswordResetConfirm,
    RegisterRequest,
    StatusResponse,
    VerifyResponse,
)
from .links import LinkRead, ShortUrlRequest, ShortUrlResponse
from .user import AccountRead, AccountWithLinks, UrlDataResponse

__all__ = [
    "RegisterRequest",
    "LoginRequest",
    "LoginResponse",
    "PasswordForgotRequest",
    "PasswordResetConfirm",
    "StatusResponse",
    "VerifyResponse",
    "ShortUrlRequest",
    "ShortUrlResponse",
    "LinkRead",
    "AccountRead",
    "AccountWithLinks",
    "UrlDataResponse",
]
