"""Short-link creation, resolution and per-account listing."""

import logging
import secrets
import string
from uuid import UUID

from src.core.config import Settings
from src.domain.errors import CodeGenerationExhaustedError, UserNotFoundError
from src.domain.schemas.links import LinkRead
from src.domain.schemas.user import AccountWithLinks, UrlDataResponse
from src.storage.models import ShortLink
from src.storage.repositories import AccountStore, CodeCollisionError, LinkStore

logger = logging.getLogger(__name__)

URL_SAFE_ALPHABET = string.ascii_letters + string.digits + "-_"


def generate_code(length: int = 8) -> str:
    """Generate a random URL-safe short code."""
    return "".join(secrets.choice(URL_SAFE_ALPHABET) for _ in range(length))


class ShortLinkManager:
    """Creates and resolves short codes over a LinkStore."""

    def __init__(self, links: LinkStore, accounts: AccountStore, settings: Settings):
        self.links = links
        self.accounts = accounts
        self.settings = settings

    async def create(self, account_id: UUID, long_url: str) -> ShortLink:
        """Store long_url under a fresh code owned by account_id.

        Uniqueness is left to the store; a collision regenerates the code,
        up to short_code_max_attempts times.

        Raises:
            UserNotFoundError: if the owner account does not exist
            CodeGenerationExhaustedError: if every attempt collided
        """
        if await self.accounts.get(account_id) is None:
            raise UserNotFoundError("User not found")

        attempts = self.settings.short_code_max_attempts
        for attempt in range(1, attempts + 1):
            link = ShortLink(
                owner_id=account_id,
                long_url=long_url,
                code=generate_code(self.settings.short_code_length),
            )
            try:
                await self.links.add(link)
            except CodeCollisionError:
                logger.warning(
                    "Short code collision (attempt %d/%d)", attempt, attempts
                )
                continue
            logger.info("Created short code %s for account %s", link.code, account_id)
            return link

        raise CodeGenerationExhaustedError()

    async def resolve(self, code: str) -> str | None:
        """Return the long URL for code, or None for an unknown code."""
        link = await self.links.find_by_code(code)
        return link.long_url if link else None

    async def list_for_account(self, account_id: UUID) -> UrlDataResponse:
        """Join the account with all links it owns.

        Raises:
            UserNotFoundError: if the account does not exist
        """
        account = await self.accounts.get(account_id)
        if account is None:
            raise UserNotFoundError("User not found")

        links = await self.links.list_for_owner(account_id)
        data = AccountWithLinks(
            id=account.id,
            email=account.email,
            is_activated=account.is_activated,
            created_at=account.created_at,
            links=[LinkRead.model_validate(link) for link in links],
        )
        return UrlDataResponse(status="success", data=data, items=len(links))
