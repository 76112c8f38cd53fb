"""Database models for accounts and short links.

Uses SQLModel for unified Pydantic + SQLAlchemy models.
"""

from datetime import datetime, timezone
from uuid import UUID, uuid4

from sqlmodel import Field, Relationship, SQLModel


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Account(SQLModel, table=True):
    """Registered user account.

    Email uniqueness is checked at registration, not by the table.
    An empty activation_token or reset_token means nothing is pending.
    """

    __tablename__ = "accounts"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    email: str = Field(index=True, max_length=255)
    password_hash: str = Field(max_length=255)
    is_activated: bool = Field(default=False)
    activation_token: str = Field(default="", index=True, max_length=255)
    reset_token: str = Field(default="", max_length=255)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    # Relationships
    links: list["ShortLink"] = Relationship(back_populates="owner")


class ShortLink(SQLModel, table=True):
    """Short code pointing at a long URL.

    Created once, never edited. The unique index on code is the only
    collision guard.
    """

    __tablename__ = "links"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    owner_id: UUID = Field(foreign_key="accounts.id", index=True)
    long_url: str
    code: str = Field(unique=True, index=True, max_length=32)
    created_at: datetime = Field(default_factory=utc_now)

    # Relationships
    owner: Account | None = Relationship(back_populates="links")
