"""Exception handlers rendering errors as ``{"error": ...}`` JSON bodies."""

import logging
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from app.utils.cookies import clear_session_cookie
from app.utils.exceptions import ApiError, InvalidSession

logger = logging.getLogger(__name__)

_LOCATIONS = {"body", "query", "path", "cookie", "header"}


def _field_names(exc: RequestValidationError) -> list:
    names = []
    for error in exc.errors():
        if error.get("type") == "json_invalid":
            continue
        name = ".".join(str(part) for part in error.get("loc", ()) if part not in _LOCATIONS)
        if name and name not in names:
            names.append(name)
    return names


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message} ({exc.details})")
    response = JSONResponse(status_code=exc.status_code, content=exc.to_body())
    if isinstance(exc, InvalidSession):
        clear_session_cookie(response, request.app.state.settings)
    return response


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    names = _field_names(exc)
    message = f"Missing or invalid fields: {', '.join(names)}" if names else "Invalid request body"
    logger.warning(f"{request.method} {request.url.path} rejected: {message}")
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": message})


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"Unhandled error in {request.method} {request.url.path}: {str(exc)}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error", "details": str(exc)},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
