# truekind/api/errors.py
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from truekind.domain.errors import StoreError
from truekind.utils.logging import get_logger
from truekind.utils.text import constant_case

logger = get_logger(__name__)

_LOCATION_ROOTS = {"body", "query", "path", "header", "cookie"}
_HTTP_CODES = {404: "NOT_FOUND", 405: "METHOD_NOT_ALLOWED"}


def error_body(message: str, code: str) -> dict:
    return {"error": message, "code": code}


def validation_code(error: dict) -> str:
    """Machine code for one pydantic error: custom codes pass through, others derive from the field."""
    kind = error.get("type", "")
    if kind.isupper():
        return kind
    fields = [part for part in error.get("loc", ()) if isinstance(part, str) and part not in _LOCATION_ROOTS]
    if kind == "json_invalid":
        return "INVALID_JSON"
    if not fields:
        return "MISSING_REQUIRED_FIELD" if kind == "missing" else "INVALID_REQUEST_BODY"
    field = constant_case(fields[-1])
    if kind == "missing":
        return f"MISSING_{field}"
    return f"INVALID_{field}"


def validation_message(error: dict) -> str:
    fields = [str(part) for part in error.get("loc", ()) if part not in _LOCATION_ROOTS]
    message = error.get("msg", "Invalid request")
    return f"{'.'.join(fields)}: {message}" if fields else message


def register_exception_handlers(app: FastAPI):
    @app.exception_handler(StoreError)
    async def store_error_handler(request: Request, exc: StoreError):
        return JSONResponse(status_code=exc.status_code, content=error_body(exc.message, exc.code))

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        first = exc.errors()[0]
        code = validation_code(first)
        logger.info(f"{request.method} {request.url.path} rejected: {code}")
        return JSONResponse(status_code=400, content=error_body(validation_message(first), code))

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        code = _HTTP_CODES.get(exc.status_code, "HTTP_ERROR")
        return JSONResponse(status_code=exc.status_code, content=error_body(str(exc.detail), code))

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return JSONResponse(status_code=500, content=error_body("Internal server error", "INTERNAL_SERVER_ERROR"))
