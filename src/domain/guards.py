"""Pre-condition checks run before lifecycle logic."""

from src.domain.errors import (
    DuplicateEmailError,
    NotActivatedError,
    PasswordMismatchError,
    UserNotFoundError,
)
from src.storage.models import Account
from src.storage.repositories import AccountStore


async def ensure_email_available(accounts: AccountStore, email: str) -> None:
    """Fail if any account already uses this email."""
    if await accounts.find_by_email(email):
        raise DuplicateEmailError()


def ensure_passwords_match(password: str, confirm_password: str) -> None:
    if password != confirm_password:
        raise PasswordMismatchError()


async def require_existing_account(accounts: AccountStore, email: str) -> Account:
    """Return the single account registered with email.

    Raises:
        UserNotFoundError: unless exactly one account matches
    """
    matches = await accounts.find_by_email(email)
    if len(matches) != 1:
        raise UserNotFoundError()
    return matches[0]


def require_activated(account: Account) -> None:
    if not account.is_activated:
        raise NotActivatedError()
