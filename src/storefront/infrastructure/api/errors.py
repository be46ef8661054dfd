"""Translate domain exceptions into JSON error responses.

Every error body has the same shape: ``{"error": <code>, "message": ...}``
plus whatever context the exception carries (missing fields, product id
and quantities, current and requested status).
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from storefront.domain.exceptions import (
    DomainException,
    EmptyCartError,
    InvalidTransitionError,
    NotFoundError,
    OutOfStockError,
    PaymentGatewayError,
    UnauthenticatedError,
    UnauthorizedError,
    ValidationError,
)

logger = logging.getLogger(__name__)

STATUS_CODES: dict[type[DomainException], int] = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    EmptyCartError: status.HTTP_400_BAD_REQUEST,
    OutOfStockError: status.HTTP_409_CONFLICT,
    InvalidTransitionError: status.HTTP_409_CONFLICT,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    UnauthenticatedError: status.HTTP_401_UNAUTHORIZED,
    UnauthorizedError: status.HTTP_403_FORBIDDEN,
    PaymentGatewayError: status.HTTP_502_BAD_GATEWAY,
}


def status_code_for(exc: DomainException) -> int:
    for cls in type(exc).__mro__:
        if cls in STATUS_CODES:
            return STATUS_CODES[cls]
    return status.HTTP_400_BAD_REQUEST


async def domain_exception_handler(request: Request, exc: DomainException) -> JSONResponse:
    code = status_code_for(exc)
    if code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    else:
        logger.info("%s %s rejected (%s): %s", request.method, request.url.path, exc.code, exc.message)
    return JSONResponse(
        status_code=code,
        content={"error": exc.code, "message": exc.message, **exc.details()},
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed bodies and parameters get the same shape as ValidationError."""
    errors = exc.errors()
    fields = [".".join(str(part) for part in err["loc"] if part != "body") for err in errors]
    message = "; ".join(
        f"{field or 'body'}: {err['msg']}" for field, err in zip(fields, errors)
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": ValidationError.code,
            "message": message or "Invalid request",
            "fields": [f for f in fields if f],
        },
    )


def install(app: FastAPI) -> None:
    app.add_exception_handler(DomainException, domain_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
