"""Health check endpoint."""

from fastapi import APIRouter
from pydantic import BaseModel

from src.core.config import APP_VERSION

router = APIRouter()


class HealthResponse(BaseModel):
    status: str
    version: str


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Liveness probe; reports the installed package version."""
    return HealthResponse(status="ok", version=APP_VERSION)
