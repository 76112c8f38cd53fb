"""Short-link schemas."""

from datetime import datetime

from pydantic import BaseModel, Field


class ShortUrlRequest(BaseModel):
    """Long URL to shorten. Not validated beyond being non-empty."""

    long_url: str = Field(min_length=1)


class ShortUrlResponse(BaseModel):
    status: str = "success"
    message: str = "short url generated"
    code: str
    short_url: str


class LinkRead(BaseModel):
    """Schema for reading a stored short link."""

    code: str
    long_url: str
    created_at: datetime

    model_config = {"from_attributes": True}
