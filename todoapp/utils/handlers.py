# todoapp/utils/handlers.py
# Exception handlers that render every failure in the response envelope
import logging

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

from todoapp.config.settings import settings
from todoapp.utils.errors import AppError

logger = logging.getLogger(__name__)


def error_response(status_code: int, message: str, errors=None, **extra) -> JSONResponse:
    body = {"success": False, "message": message, "errors": errors or []}
    body.update(extra)
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body))


async def app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    else:
        logger.info(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.message}")
    return error_response(exc.status_code, exc.message, exc.errors)


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    if exc.status_code == status.HTTP_404_NOT_FOUND and message == "Not Found":
        message = f"Route {request.url.path} not found"
    return error_response(exc.status_code, message)


async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = []
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        errors.append({"field": ".".join(location), "message": error.get("msg", "Invalid value")})
    return error_response(status.HTTP_400_BAD_REQUEST, "Validation failed", errors)


async def integrity_error_handler(request: Request, exc: IntegrityError):
    text = str(exc.orig).lower()
    if "unique" in text or "duplicate" in text:
        field = "email" if "email" in text else "field"
        return error_response(status.HTTP_409_CONFLICT, f"{field.capitalize()} already exists")
    logger.error(f"Integrity error on {request.method} {request.url.path}: {exc.orig}")
    return error_response(status.HTTP_400_BAD_REQUEST, "Request conflicts with stored data")


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    extra = {"detail": str(exc)} if settings.is_development() else {}
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error", **extra)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(IntegrityError, integrity_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
