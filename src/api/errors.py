"""Map service errors to HTTP responses.

Client-caused kinds return their message with status "failed". Server-side
kinds return a generic message with status "error"; details are only logged.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from src.domain.errors import ErrorKind, ServiceError

logger = logging.getLogger(__name__)

STATUS_CODES: dict[ErrorKind, int] = {
    ErrorKind.INPUT: status.HTTP_422_UNPROCESSABLE_ENTITY,
    ErrorKind.DUPLICATE_EMAIL: status.HTTP_409_CONFLICT,
    ErrorKind.PASSWORD_MISMATCH: status.HTTP_400_BAD_REQUEST,
    ErrorKind.USER_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.NOT_ACTIVATED: status.HTTP_403_FORBIDDEN,
    ErrorKind.INVALID_TOKEN: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.EXPIRED_TOKEN: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.CORRUPT_HASH: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorKind.CODE_GENERATION_EXHAUSTED: status.HTTP_503_SERVICE_UNAVAILABLE,
    ErrorKind.STORE_UNAVAILABLE: status.HTTP_503_SERVICE_UNAVAILABLE,
    ErrorKind.MAIL_DELIVERY: status.HTTP_502_BAD_GATEWAY,
}

SERVER_KINDS = frozenset({
    ErrorKind.CORRUPT_HASH,
    ErrorKind.CODE_GENERATION_EXHAUSTED,
    ErrorKind.STORE_UNAVAILABLE,
    ErrorKind.MAIL_DELIVERY,
})

GENERIC_MESSAGE = "Something went wrong. Please try again later."


def error_body(kind: ErrorKind, message: str) -> dict:
    if kind in SERVER_KINDS:
        return {"status": "error", "error": kind.value, "message": GENERIC_MESSAGE}
    return {"status": "failed", "error": kind.value, "message": message}


async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    if exc.kind in SERVER_KINDS:
        logger.error("%s %s failed: %s (%s)", request.method, request.url.path, exc.kind.value, exc.message)
    return JSONResponse(
        status_code=STATUS_CODES[exc.kind],
        content=error_body(exc.kind, exc.message),
    )


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    fields = sorted({".".join(str(p) for p in err["loc"][1:]) for err in exc.errors()})
    message = f"Invalid input: {', '.join(f for f in fields if f)}" if fields else "Invalid input"
    return JSONResponse(
        status_code=STATUS_CODES[ErrorKind.INPUT],
        content=error_body(ErrorKind.INPUT, message),
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ServiceError, service_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
