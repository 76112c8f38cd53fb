"""Account lifecycle endpoints: register, activate, login, password reset."""

from urllib.parse import urlencode
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.responses import HTMLResponse, JSONResponse, PlainTextResponse, RedirectResponse

from src.api.dependencies import (
    extract_token,
    get_account_manager,
    get_app_settings,
)
from src.core.config import Settings
from src.domain.schemas.auth import (
    LoginRequest,
    LoginResponse,
    PasswordForgotRequest,
    PasswordResetConfirm,
    RegisterRequest,
    StatusResponse,
    VerifyResponse,
)
from src.domain.services.accounts import AccountLifecycleManager, ActivationOutcome

router = APIRouter(tags=["accounts"])

EXPIRED_PAGE = "<p>link expired</p>"


@router.post("/register", response_model=StatusResponse)
async def register(
    body: RegisterRequest,
    manager: AccountLifecycleManager = Depends(get_account_manager),
) -> StatusResponse:
    """Create a pending account and mail the activation link.

    - Returns 400 if password and confirmation differ
    - Returns 409 if the email is already registered
    """
    return await manager.register(body.email, body.password, body.confirm_password)


@router.post("/login", response_model=LoginResponse, response_model_exclude_none=True)
async def login(
    body: LoginRequest,
    manager: AccountLifecycleManager = Depends(get_account_manager),
) -> LoginResponse:
    """Authenticate and return a session token.

    - Returns 404 if no account has this email
    - Returns 403 if the account is not activated
    - Returns 200 with status "failed" on a wrong password
    """
    return await manager.login(body.email, body.password)


@router.get("/verify/{account_id}", response_model=VerifyResponse)
async def verify(
    account_id: str,
    request: Request,
    manager: AccountLifecycleManager = Depends(get_account_manager),
):
    """Confirm the Authorization token belongs to account_id."""
    token = extract_token(request)
    try:
        expected = UUID(account_id)
    except ValueError:
        expected = None

    if token and expected and await manager.verify_identity(token, expected):
        return VerifyResponse(status="success", is_logged_in=True)

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=VerifyResponse(status="failed", is_logged_in=False).model_dump(),
    )


@router.get("/activate", response_class=HTMLResponse)
async def activate(
    activation_string: str = Query(""),
    manager: AccountLifecycleManager = Depends(get_account_manager),
    settings: Settings = Depends(get_app_settings),
) -> HTMLResponse:
    """Consume the activation token from the mailed link."""
    outcome = await manager.activate(activation_string)
    if outcome is ActivationOutcome.ACTIVATED:
        return HTMLResponse(
            f'<p>Account activated. Click <a href="{settings.frontend_url}/login.html">here</a> to login.</p>'
        )
    return HTMLResponse(EXPIRED_PAGE)


@router.post("/password/forgot", response_model=StatusResponse)
async def forgot_password(
    body: PasswordForgotRequest,
    manager: AccountLifecycleManager = Depends(get_account_manager),
) -> StatusResponse:
    """Mail a one-time password reset link.

    Returns 404 if no account has this email.
    """
    return await manager.request_password_reset(body.email)


@router.get("/password/check/token")
async def check_reset_token(
    reset_string: str = Query(""),
    manager: AccountLifecycleManager = Depends(get_account_manager),
    settings: Settings = Depends(get_app_settings),
):
    """Redirect a valid reset link to the reset form, else report it expired."""
    check = await manager.check_reset_token(reset_string)
    if not check.valid:
        return PlainTextResponse("link expired")

    query = urlencode({"uid": str(check.account_id), "reset_string": reset_string})
    return RedirectResponse(
        f"{settings.frontend_url}/reset_password.html?{query}",
        status_code=status.HTTP_302_FOUND,
    )


@router.post("/password/reset/{uid}", response_model=StatusResponse)
async def reset_password(
    uid: UUID,
    body: PasswordResetConfirm,
    manager: AccountLifecycleManager = Depends(get_account_manager),
) -> StatusResponse:
    """Set a new password and consume the reset token.

    - Returns 400 if password and confirmation differ
    - Returns 404 if the account does not exist
    - Returns 401 if the reset link is expired or already used
    """
    return await manager.reset_password(
        uid, body.password, body.confirm_password, body.reset_string
    )
