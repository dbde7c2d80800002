"""
Request-level concerns shared by every route: the optional x-api-key
check, security headers, request logging and the JSON error handlers.
"""
import hmac
import logging
import time

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from maps_api.core.config import settings
from maps_api.core.errors import MapsAPIError
from maps_api.core.logger import logs

SECURITY_HEADERS = {
    "Referrer-Policy": "no-referrer-when-downgrade",
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
}


class UnauthorizedError(MapsAPIError):
    status_code = 401
    error = "API key required"


async def validate_frontend_key(request: Request):
    """
    Dependency for the /api/maps routes. The x-api-key header must match
    FRONTEND_API_KEY unless ENVIRONMENT=development.
    """
    if request.method == "OPTIONS":
        return

    provided = request.headers.get("x-api-key")
    if settings.is_development:
        logs.log(logging.DEBUG, f"API key (optional in development): {'Provided' if provided else 'Not provided'}")
        return

    if not provided or not hmac.compare_digest(provided.encode(), settings.FRONTEND_API_KEY.encode()):
        logs.log(logging.WARNING, f"Rejected {request.method} {request.url.path}: missing or invalid x-api-key")
        raise UnauthorizedError("Include x-api-key header")


async def security_headers_middleware(request: Request, call_next):
    response = await call_next(request)
    for header, value in SECURITY_HEADERS.items():
        response.headers.setdefault(header, value)
    return response


async def log_requests_middleware(request: Request, call_next):
    start_time = time.time()
    response = await call_next(request)
    duration_ms = (time.time() - start_time) * 1000
    logs.log(
        logging.INFO,
        f"{request.method} {request.url.path} -> {response.status_code} ({duration_ms:.1f}ms)"
    )
    return response


def _validation_message(exc: RequestValidationError) -> str:
    """Readable "field: problem" summary of pydantic request errors."""
    parts = []
    for error in exc.errors():
        field = ".".join(str(p) for p in error.get("loc", ()) if p != "body")
        msg = error.get("msg", "invalid value")
        parts.append(f"{field}: {msg}" if field else msg)
    return "; ".join(parts) or "Invalid request"


def setup_error_handlers(app: FastAPI):
    @app.exception_handler(MapsAPIError)
    async def maps_api_error_handler(request: Request, exc: MapsAPIError):
        logs.log(logging.WARNING, f"{request.method} {request.url.path} - {exc.__class__.__name__}: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content=exc.to_envelope())

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content={"success": False, "error": "Invalid request", "message": _validation_message(exc)}
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404:
            content = {
                "success": False,
                "error": "Endpoint not found",
                "path": request.url.path,
                "method": request.method,
            }
        else:
            content = {"success": False, "error": str(exc.detail)}
        return JSONResponse(status_code=exc.status_code, content=content)

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        # Runs outside the CORS and header middleware, so set both here
        logs.exception(f"Unhandled error on {request.method} {request.url.path}: {str(exc)}")
        return JSONResponse(
            status_code=500,
            content={"success": False, "error": "Internal server error", "message": "An unexpected error occurred"},
            headers={**SECURITY_HEADERS, "Access-Control-Allow-Origin": "*"}
        )
