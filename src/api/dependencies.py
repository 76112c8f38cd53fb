"""Shared FastAPI dependencies.

Central location for dependency injection functions. Stores share the
request's single database session.
"""

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.config import Settings, get_settings
from src.domain.errors import InvalidTokenError, ServiceError
from src.domain.services.accounts import AccountLifecycleManager
from src.domain.services.email import MailDispatcher
from src.domain.services.links import ShortLinkManager
from src.domain.services.tokens import TokenClaims, TokenIssuer
from src.storage.database import get_session
from src.storage.repositories import AccountStore, LinkStore

__all__ = [
    "get_session",
    "get_app_settings",
    "get_token_issuer",
    "get_mailer",
    "get_account_manager",
    "get_link_manager",
    "extract_token",
    "require_session",
]


def get_app_settings() -> Settings:
    return get_settings()


def get_token_issuer(settings: Settings = Depends(get_app_settings)) -> TokenIssuer:
    return TokenIssuer.from_settings(settings)


def get_mailer(settings: Settings = Depends(get_app_settings)) -> MailDispatcher:
    return MailDispatcher.from_settings(settings)


def get_account_store(db: AsyncSession = Depends(get_session)) -> AccountStore:
    return AccountStore(db)


def get_link_store(db: AsyncSession = Depends(get_session)) -> LinkStore:
    return LinkStore(db)


def get_account_manager(
    accounts: AccountStore = Depends(get_account_store),
    mailer: MailDispatcher = Depends(get_mailer),
    issuer: TokenIssuer = Depends(get_token_issuer),
    settings: Settings = Depends(get_app_settings),
) -> AccountLifecycleManager:
    return AccountLifecycleManager(accounts, mailer, issuer, settings)


def get_link_manager(
    links: LinkStore = Depends(get_link_store),
    accounts: AccountStore = Depends(get_account_store),
    settings: Settings = Depends(get_app_settings),
) -> ShortLinkManager:
    return ShortLinkManager(links, accounts, settings)


def extract_token(request: Request) -> str | None:
    """Read the session token from the Authorization header.

    The header carries the raw token; a "Bearer " prefix is tolerated.
    """
    auth_header = request.headers.get("Authorization")
    if not auth_header:
        return None
    if auth_header.startswith("Bearer "):
        return auth_header.split(" ", 1)[1]
    return auth_header


async def require_session(
    request: Request,
    issuer: TokenIssuer = Depends(get_token_issuer),
) -> TokenClaims:
    """Require a valid session token.

    Returns the verified claims.
    Raises InvalidTokenError (401) for a missing, invalid or expired token.
    """
    token = extract_token(request)
    if not token:
        raise InvalidTokenError("Not authenticated")
    try:
        return issuer.verify(token)
    except ServiceError as e:
        raise InvalidTokenError("Not authenticated") from e
