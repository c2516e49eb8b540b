"""Mapping from storefront errors to HTTP responses.

Every error body has the shape ``{"error": <message>, "code": <ErrorName>}``;
validation failures add ``"fields"`` with the per-field messages.
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.integrations.fastapi import register_exception_handlers

from storefront.exceptions import InternalError, InvalidRequest, StorefrontError
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def _first_message(messages) -> str:
    if isinstance(messages, dict):
        for value in messages.values():
            if isinstance(value, list | tuple) and value:
                return str(value[0])
            if value:
                return str(value)
    return "Validation error"


async def handle_storefront_error(request: Request, exc: StorefrontError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message, "code": exc.code})


async def handle_validation_error(request: Request, exc: ValidationError) -> JSONResponse:
    if isinstance(exc, InvalidRequest):
        message, code = exc.message, exc.code
    else:
        message, code = _first_message(exc.messages), "ValidationError"
    return JSONResponse(
        status_code=400,
        content={
            "error": message,
            "code": code,
            "fields": exc.messages,
        },
    )


async def handle_request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    fields = {}
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"] if part != "body")
        fields.setdefault(location or "request", []).append(error["msg"])
    return JSONResponse(
        status_code=400,
        content={"error": _first_message(fields), "code": "ValidationError", "fields": fields},
    )


async def handle_not_found(request: Request, exc: ObjectNotFoundError) -> JSONResponse:
    return JSONResponse(status_code=404, content={"error": "Not found", "code": "NotFound"})


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error", path=request.url.path, method=request.method)
    return JSONResponse(
        status_code=InternalError.status_code,
        content={"error": "Server error", "code": InternalError.code},
    )


def register_error_handlers(app: FastAPI) -> None:
    # Handlers added after Protean's replace them per exception type
    register_exception_handlers(app)
    app.add_exception_handler(StorefrontError, handle_storefront_error)
    app.add_exception_handler(ValidationError, handle_validation_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(ObjectNotFoundError, handle_not_found)
    app.add_exception_handler(Exception, handle_unexpected_error)
