"""Account lifecycle schemas for request/response models."""

from typing import Literal
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field

ResultStatus = Literal["success", "failed", "error"]


class RegisterRequest(BaseModel):
    """Registration with password confirmation (never persisted)."""

    email: EmailStr
    password: str = Field(min_length=1)
    confirm_password: str


class LoginRequest(BaseModel):
    """Login request with credentials."""

    email: EmailStr
    password: str = Field(min_length=1)


class PasswordForgotRequest(BaseModel):
    """Request to initiate password reset flow."""

    email: EmailStr


class PasswordResetConfirm(BaseModel):
    """Set a new password using the combined reset string from the mail link."""

    password: str = Field(min_length=1)
    confirm_password: str
    reset_string: str = Field(min_length=1)


class StatusResponse(BaseModel):
    """Plain outcome with a human-readable message."""

    status: ResultStatus
    message: str


class LoginResponse(StatusResponse):
    """Login outcome; account_id and token set only on success."""

    account_id: UUID | None = None
    token: str | None = None


class VerifyResponse(BaseModel):
    """Whether a session token belongs to the given account."""

    status: ResultStatus
    is_logged_in: bool
