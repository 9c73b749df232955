"""Uniform error envelope for every HTTP failure.

Business exceptions propagate untouched out of commands and routes; the
handlers registered here translate them into
``{"success": false, "message": ...}`` with the matching status code.
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.integrations.fastapi import register_exception_handlers as register_protean_handlers
from starlette.exceptions import HTTPException as StarletteHTTPException

from marketplace.exceptions import (
    Forbidden,
    PaymentGatewayError,
    Unauthenticated,
    VerificationError,
    error_message,
)
from marketplace.utils.logging import get_logger

logger = get_logger(__name__)


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "message": message})


def _request_validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path"))
    return f"{location}: {first.get('msg')}" if location else str(first.get("msg"))


def register_exception_handlers(app: FastAPI) -> None:
    """Install the envelope handlers on ``app``.

    Protean's own handlers are installed first so any Protean exception not
    mapped below still gets a sensible status.
    """
    register_protean_handlers(app)

    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError):
        return error_response(400, error_message(exc))

    @app.exception_handler(RequestValidationError)
    async def request_validation_error_handler(request: Request, exc: RequestValidationError):
        return error_response(400, _request_validation_message(exc))

    @app.exception_handler(ObjectNotFoundError)
    async def not_found_handler(request: Request, exc: ObjectNotFoundError):
        return error_response(404, error_message(exc))

    @app.exception_handler(Unauthenticated)
    async def unauthenticated_handler(request: Request, exc: Unauthenticated):
        return error_response(401, exc.message)

    @app.exception_handler(VerificationError)
    async def verification_error_handler(request: Request, exc: VerificationError):
        logger.warning("webhook_verification_failed", reason=exc.message)
        return error_response(401, exc.message)

    @app.exception_handler(Forbidden)
    async def forbidden_handler(request: Request, exc: Forbidden):
        return error_response(403, exc.message)

    @app.exception_handler(PaymentGatewayError)
    async def payment_gateway_error_handler(request: Request, exc: PaymentGatewayError):
        logger.error("payment_gateway_error", reason=exc.message, path=request.url.path)
        return error_response(502, exc.message)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return error_response(exc.status_code, str(exc.detail))

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception):
        logger.exception("unhandled_error", path=request.url.path, method=request.method)
        return error_response(500, "Server Error")
