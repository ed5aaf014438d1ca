"""Translate domain exceptions into JSON error responses.

Every failure leaves the API as ``{"error": {"kind", "message", ...}}``
so the storefront can branch on ``kind`` instead of parsing messages.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from atelier.domain.exceptions import DomainException, ValidationError

logger = logging.getLogger(__name__)

STATUS_BY_KIND = {
    "validation": 400,
    "authorization": 401,
    "forbidden": 403,
    "not_found": 404,
    "conflict": 409,
    "insufficient_stock": 409,
    "discount_rejected": 400,
    "trust_boundary": 409,
    "email_configuration": 500,
    "email_delivery": 502,
    "infrastructure": 503,
}


def error_response(exc: DomainException) -> JSONResponse:
    status_code = STATUS_BY_KIND.get(exc.kind, 500)
    body = {"kind": exc.kind, "message": str(exc), **exc.details()}
    headers = {"WWW-Authenticate": "Bearer"} if status_code == 401 else None
    return JSONResponse(status_code=status_code, content={"error": body}, headers=headers)


def register_error_handlers(app: FastAPI) -> None:

    @app.exception_handler(DomainException)
    async def handle_domain_exception(request: Request, exc: DomainException) -> JSONResponse:
        if STATUS_BY_KIND.get(exc.kind, 500) >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc)
        return error_response(exc)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'][1:]) or 'body'}: {err['msg']}"
            for err in exc.errors()
        )
        return error_response(ValidationError(problems or "Invalid request"))
