"""Password hashing using bcrypt via pwdlib."""

from pwdlib import PasswordHash
from pwdlib.exceptions import UnknownHashError
from pwdlib.hashers.bcrypt import BcryptHasher

from src.domain.errors import CorruptHashError, InputError

# Password hashing using bcrypt via pwdlib
pwd_context = PasswordHash((BcryptHasher(),))

# bcrypt only reads the first 72 bytes
MAX_PASSWORD_BYTES = 72


def hash_password(password: str) -> str:
    """Hash a password using bcrypt.

    Raises:
        InputError: if the password is empty, not a string or over 72 bytes
    """
    if not isinstance(password, str) or not password:
        raise InputError("Password must be a non-empty string")
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise InputError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash.

    Returns False on mismatch.

    Raises:
        CorruptHashError: if hashed_password is not a bcrypt hash
    """
    if not isinstance(plain_password, str):
        return False
    if len(plain_password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        # Never hashed by hash_password, so it cannot match
        return False
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (UnknownHashError, ValueError, TypeError) as e:
        raise CorruptHashError() from e
