"""Store interfaces for accounts and short links.

Each method performs one lookup or one single-row write. Connectivity
failures surface as StoreUnavailableError; a duplicate short code surfaces
as CodeCollisionError so the caller can retry with a new code.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, OperationalError, InterfaceError
from sqlalchemy.ext.asyncio import AsyncSession

from src.domain.errors import StoreUnavailableError
from src.storage.models import Account, ShortLink

logger = logging.getLogger(__name__)


class CodeCollisionError(Exception):
    """Inserted short code already exists."""


@asynccontextmanager
async def _store_errors(operation: str) -> AsyncIterator[None]:
    try:
        yield
    except (OperationalError, InterfaceError) as e:
        logger.error("Store operation %s failed: %s", operation, e)
        raise StoreUnavailableError() from e


class AccountStore:
    """Account lookups and updates over the accounts table."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def find_by_email(self, email: str) -> list[Account]:
        async with _store_errors("find_by_email"):
            result = await self.session.execute(
                select(Account).where(Account.email == email)
            )
            return list(result.scalars().all())

    async def get(self, account_id: UUID) -> Account | None:
        async with _store_errors("get"):
            result = await self.session.execute(
                select(Account).where(Account.id == account_id)
            )
            return result.scalar_one_or_none()

    async def find_by_activation_token(self, token: str) -> Account | None:
        """Exact match on a pending activation token. Empty never matches."""
        if not token:
            return None
        async with _store_errors("find_by_activation_token"):
            result = await self.session.execute(
                select(Account).where(Account.activation_token == token).limit(1)
            )
            return result.scalar_one_or_none()

    async def find_by_reset_token(self, account_id: UUID, token: str) -> Account | None:
        """Match on both account id and pending reset token. Empty never matches."""
        if not token:
            return None
        async with _store_errors("find_by_reset_token"):
            result = await self.session.execute(
                select(Account)
                .where(Account.id == account_id)
                .where(Account.reset_token == token)
            )
            return result.scalar_one_or_none()

    async def add(self, account: Account) -> Account:
        async with _store_errors("add"):
            self.session.add(account)
            await self.session.commit()
        return account

    async def save(self, account: Account) -> Account:
        """Persist field changes on an already loaded account."""
        account.updated_at = datetime.now(timezone.utc)
        async with _store_errors("save"):
            self.session.add(account)
            await self.session.commit()
        return account


class LinkStore:
    """Short-link inserts and lookups over the links table."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def add(self, link: ShortLink) -> ShortLink:
        """Insert a link.

        Raises:
            CodeCollisionError: if link.code is already taken
        """
        async with _store_errors("add_link"):
            self.session.add(link)
            try:
                await self.session.commit()
            except IntegrityError as e:
                await self.session.rollback()
                raise CodeCollisionError(link.code) from e
        return link

    async def find_by_code(self, code: str) -> ShortLink | None:
        async with _store_errors("find_by_code"):
            result = await self.session.execute(
                select(ShortLink).where(ShortLink.code == code)
            )
            return result.scalar_one_or_none()

    async def list_for_owner(self, owner_id: UUID) -> list[ShortLink]:
        async with _store_errors("list_for_owner"):
            result = await self.session.execute(
                select(ShortLink)
                .where(ShortLink.owner_id == owner_id)
                .order_by(ShortLink.created_at.asc())
            )
            return list(result.scalars().all())
