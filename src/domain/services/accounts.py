"""Account lifecycle: registration, activation, login and password reset.

State per account: Pending -(activate)-> Active -(forgot)-> ResetPending
-(reset)-> Active. Guards run at the start of each operation and
short-circuit with a ServiceError.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from uuid import UUID

from src.core.config import Settings
from src.domain.errors import InvalidTokenError, ServiceError, UserNotFoundError
from src.domain.guards import (
    ensure_email_available,
    ensure_passwords_match,
    require_activated,
    require_existing_account,
)
from src.domain.schemas.auth import LoginResponse, StatusResponse
from src.domain.services.email import TOKEN_DELIMITER, MailDispatcher
from src.domain.services.hashing import hash_password, verify_password
from src.domain.services.tokens import TokenIssuer
from src.storage.models import Account
from src.storage.repositories import AccountStore

logger = logging.getLogger(__name__)

ACTIVATION_MESSAGE = "Click the below link to activate your account."
RESET_MESSAGE = (
    "Click the below link to reset your password. It is one-time link, "
    "once you changed your password using the link, it will be expired."
)


class ActivationOutcome(str, Enum):
    ACTIVATED = "activated"
    EXPIRED = "expired"


@dataclass(frozen=True)
class ResetCheck:
    """Result of validating a combined reset string."""

    valid: bool
    account_id: UUID | None = None


def split_reset_string(combined: str) -> tuple[str, UUID] | None:
    """Split ``token_._accountid`` into its parts.

    Returns None when the string is malformed, the token part is empty
    or the id is not a UUID.
    """
    if not combined or TOKEN_DELIMITER not in combined:
        return None
    token, _, raw_id = combined.rpartition(TOKEN_DELIMITER)
    if not token:
        return None
    try:
        return token, UUID(raw_id)
    except ValueError:
        return None


class AccountLifecycleManager:
    """Drives the account state machine over an AccountStore."""

    def __init__(
        self,
        accounts: AccountStore,
        mailer: MailDispatcher,
        issuer: TokenIssuer,
        settings: Settings,
    ):
        self.accounts = accounts
        self.mailer = mailer
        self.issuer = issuer
        self.settings = settings

    async def register(self, email: str, password: str, confirm_password: str) -> StatusResponse:
        """Create a pending account and mail its activation link.

        Raises:
            PasswordMismatchError: if confirmation differs
            DuplicateEmailError: if the email is already registered
        """
        ensure_passwords_match(password, confirm_password)
        await ensure_email_available(self.accounts, email)

        password_hash = hash_password(password)
        activation_token = await self.mailer.send_and_generate(
            ACTIVATION_MESSAGE,
            email,
            f"{self.settings.api_url}/activate?activation_string",
        )
        account = Account(
            email=email,
            password_hash=password_hash,
            is_activated=False,
            activation_token=activation_token,
        )
        await self.accounts.add(account)
        logger.info("Registered account %s", account.id)

        return StatusResponse(
            status="success",
            message="Account created. Please check your email for the link to activate your account.",
        )

    async def activate(self, activation_token: str) -> ActivationOutcome:
        """Consume an activation token. Unknown or used tokens are EXPIRED."""
        account = await self.accounts.find_by_activation_token(activation_token)
        if account is None or account.is_activated:
            return ActivationOutcome.EXPIRED

        account.activation_token = ""
        account.is_activated = True
        await self.accounts.save(account)
        logger.info("Activated account %s", account.id)
        return ActivationOutcome.ACTIVATED

    async def login(self, email: str, password: str) -> LoginResponse:
        """Authenticate and issue a session token.

        Activation is checked before the password.

        Raises:
            UserNotFoundError: if no single account has this email
            NotActivatedError: if the account is still pending
        """
        account = await require_existing_account(self.accounts, email)
        require_activated(account)

        if not verify_password(password, account.password_hash):
            logger.info("Login failed for account %s: password mismatch", account.id)
            return LoginResponse(
                status="failed",
                message="Please check your password and try again.",
            )

        token = self.issuer.issue(account.id)
        logger.info("Login succeeded for account %s", account.id)
        return LoginResponse(
            status="success",
            message="Login successful",
            account_id=account.id,
            token=token,
        )

    async def verify_identity(self, token: str, account_id: UUID) -> bool:
        """Check a session token belongs to an existing account_id.

        Any verification failure counts as not logged in.
        """
        try:
            claims = self.issuer.verify(token)
        except ServiceError:
            return False
        if claims.account_id != account_id:
            return False
        return await self.accounts.get(account_id) is not None

    async def request_password_reset(self, email: str) -> StatusResponse:
        """Mail a one-time reset link; a newer request supersedes older ones.

        Raises:
            UserNotFoundError: if no single account has this email
        """
        account = await require_existing_account(self.accounts, email)

        reset_token = await self.mailer.send_and_generate(
            RESET_MESSAGE,
            account.email,
            f"{self.settings.api_url}/password/check/token?reset_string",
            str(account.id),
        )
        account.reset_token = reset_token
        await self.accounts.save(account)
        logger.info("Password reset requested for account %s", account.id)

        return StatusResponse(
            status="success",
            message="Reset password link is sent to your email account.",
        )

    async def check_reset_token(self, combined: str) -> ResetCheck:
        """Validate ``token_._accountid`` against the stored reset token."""
        parts = split_reset_string(combined)
        if parts is None:
            return ResetCheck(valid=False)

        token, account_id = parts
        account = await self.accounts.find_by_reset_token(account_id, token)
        if account is None:
            return ResetCheck(valid=False)
        return ResetCheck(valid=True, account_id=account.id)

    async def reset_password(
        self,
        account_id: UUID,
        new_password: str,
        confirm_password: str,
        reset_string: str,
    ) -> StatusResponse:
        """Replace the password and consume the pending reset token.

        Raises:
            PasswordMismatchError: if confirmation differs
            UserNotFoundError: if the account does not exist
            InvalidTokenError: if reset_string is not the account's pending token
        """
        ensure_passwords_match(new_password, confirm_password)

        account = await self.accounts.get(account_id)
        if account is None:
            raise UserNotFoundError("User not found")

        parts = split_reset_string(reset_string)
        if (
            parts is None
            or parts[1] != account.id
            or not account.reset_token
            or parts[0] != account.reset_token
        ):
            raise InvalidTokenError("link expired")

        account.password_hash = hash_password(new_password)
        account.reset_token = ""
        await self.accounts.save(account)
        logger.info("Password reset for account %s", account.id)

        return StatusResponse(status="success", message="password changed successfully")
