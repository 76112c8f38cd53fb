"""Account read schemas for API."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel

from src.domain.schemas.links import LinkRead


class AccountRead(BaseModel):
    """Schema for reading account data (excludes password and tokens)."""

    id: UUID
    email: str
    is_activated: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class AccountWithLinks(AccountRead):
    """Account joined with every short link it owns."""

    links: list[LinkRead] = []


class UrlDataResponse(BaseModel):
    """Account link listing; items counts the links."""

    status: str = "success"
    data: AccountWithLinks
    items: int
