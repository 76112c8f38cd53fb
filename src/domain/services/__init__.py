"""Domain services for business logic."""

from .accounts import AccountLifecycleManager, ActivationOutcome, ResetCheck
from .email import MailDispatcher, generate_token
from .hashing import hash_password, verify_password
from .links import ShortLinkManager, generate_code
from .tokens import TokenClaims, TokenIssuer

__all__ = [
    "hash_password",
    "verify_password",
    "TokenIssuer",
    "TokenClaims",
    "MailDispatcher",
    "generate_token",
    "AccountLifecycleManager",
    "ActivationOutcome",
    "ResetCheck",
    "ShortLinkManager",
    "generate_code",
]
