"""Service error taxonomy.

Every failure the core raises is a ServiceError carrying one ErrorKind.
The API layer maps kinds to status codes; the exception message is shown
to clients only for client-caused kinds.
"""

from enum import Enum

__all__ = [
    "ErrorKind",
    "ServiceError",
    "InputError",
    "DuplicateEmailError",
    "PasswordMismatchError",
    "UserNotFoundError",
    "NotActivatedError",
    "InvalidTokenError",
    "ExpiredTokenError",
    "CorruptHashError",
    "CodeGenerationExhaustedError",
    "StoreUnavailableError",
    "MailDeliveryError",
]


class ErrorKind(str, Enum):
    """Closed set of failure kinds."""

    INPUT = "input_error"
    DUPLICATE_EMAIL = "duplicate_email"
    PASSWORD_MISMATCH = "password_mismatch"
    USER_NOT_FOUND = "user_not_found"
    NOT_ACTIVATED = "not_activated"
    INVALID_TOKEN = "invalid_token"
    EXPIRED_TOKEN = "expired_token"
    CORRUPT_HASH = "corrupt_hash"
    CODE_GENERATION_EXHAUSTED = "code_generation_exhausted"
    STORE_UNAVAILABLE = "store_unavailable"
    MAIL_DELIVERY = "mail_delivery"


class ServiceError(Exception):
    """Base class for all service errors."""

    kind: ErrorKind
    default_message = "Request failed"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message


class InputError(ServiceError):
    """Malformed request input."""

    kind = ErrorKind.INPUT
    default_message = "Invalid input"


class DuplicateEmailError(ServiceError):
    """An account with this email already exists."""

    kind = ErrorKind.DUPLICATE_EMAIL
    default_message = "An account with this email already exists."


class PasswordMismatchError(ServiceError):
    """Password and confirmation differ."""

    kind = ErrorKind.PASSWORD_MISMATCH
    default_message = "Password and confirm password do not match."


class UserNotFoundError(ServiceError):
    """No (unique) account for the given email or id."""

    kind = ErrorKind.USER_NOT_FOUND
    default_message = "No user with this email found. Please provide the registered email."


class NotActivatedError(ServiceError):
    """Account has not been activated yet."""

    kind = ErrorKind.NOT_ACTIVATED
    default_message = "Account is not activated. Please check your email for the activation link."


class InvalidTokenError(ServiceError):
    """Token signature, structure or binding is wrong."""

    kind = ErrorKind.INVALID_TOKEN
    default_message = "Invalid token"


class ExpiredTokenError(ServiceError):
    """Token is past its expiry."""

    kind = ErrorKind.EXPIRED_TOKEN
    default_message = "Token has expired"


class CorruptHashError(ServiceError):
    """Stored password hash cannot be parsed."""

    kind = ErrorKind.CORRUPT_HASH
    default_message = "Stored credential is corrupt"


class CodeGenerationExhaustedError(ServiceError):
    """Every generated short code collided with an existing one."""

    kind = ErrorKind.CODE_GENERATION_EXHAUSTED
    default_message = "Could not generate a unique short code"


class StoreUnavailableError(ServiceError):
    """Database could not be reached or failed."""

    kind = ErrorKind.STORE_UNAVAILABLE
    default_message = "Store unavailable"


class MailDeliveryError(ServiceError):
    """Mail could not be sent."""

    kind = ErrorKind.MAIL_DELIVERY
    default_message = "Mail delivery failed"
