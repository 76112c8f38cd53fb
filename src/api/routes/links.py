"""Short-link endpoints.

The catch-all resolver router must be included after every other router.
"""

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse, RedirectResponse

from src.api.dependencies import get_app_settings, get_link_manager, require_session
from src.core.config import Settings
from src.domain.schemas.links import ShortUrlRequest, ShortUrlResponse
from src.domain.schemas.user import UrlDataResponse
from src.domain.services.links import ShortLinkManager
from src.domain.services.tokens import TokenClaims

router = APIRouter(tags=["links"])
resolver = APIRouter(tags=["links"])


@router.post("/short-url", response_model=ShortUrlResponse)
async def create_short_url(
    body: ShortUrlRequest,
    claims: TokenClaims = Depends(require_session),
    manager: ShortLinkManager = Depends(get_link_manager),
    settings: Settings = Depends(get_app_settings),
) -> ShortUrlResponse:
    """Create a short code for long_url owned by the token's account."""
    link = await manager.create(claims.account_id, body.long_url)
    return ShortUrlResponse(
        code=link.code,
        short_url=f"{settings.api_url}/{link.code}",
    )


@router.get("/users/url-data", response_model=UrlDataResponse)
async def list_url_data(
    claims: TokenClaims = Depends(require_session),
    manager: ShortLinkManager = Depends(get_link_manager),
) -> UrlDataResponse:
    """List the token's account together with its short links."""
    return await manager.list_for_account(claims.account_id)


@resolver.get("/{code}")
async def resolve_short_url(
    code: str,
    manager: ShortLinkManager = Depends(get_link_manager),
):
    """Redirect to the long URL stored under code."""
    long_url = await manager.resolve(code)
    if long_url is None:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"status": "failed", "message": "wrong short-url"},
        )
    return RedirectResponse(long_url, status_code=status.HTTP_302_FOUND)
