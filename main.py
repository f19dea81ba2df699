"""Hoaxify - user management REST service."""

import logging
import time
from contextlib import asynccontextmanager
from datetime import timedelta

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from app.config import get_settings
from app.database import SessionLocal
from app.errors import ApiError, ValidationError
from app.i18n import negotiate_locale, translate, translate_errors
from app.rate_limit import limiter
from app.routers import auth_router, password_router, users_router
from app.services.file_storage import get_file_storage_service
from app.services.token_cleanup import TokenCleanupTask

# Logging
logger = logging.getLogger("hoaxify")
logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create upload folders and run the token cleanup sweep for the app's lifetime."""
    for warning in settings.validate():
        logger.warning(warning)
    get_file_storage_service().ensure_directories()

    cleanup = TokenCleanupTask(
        session_factory=SessionLocal,
        interval_seconds=settings.TOKEN_CLEANUP_INTERVAL_SECONDS,
        max_age=timedelta(days=settings.AUTH_TOKEN_TTL_DAYS),
    )
    cleanup.start()
    app.state.token_cleanup = cleanup

    yield

    await cleanup.stop()


app = FastAPI(title="Hoaxify", version="0.1.0", lifespan=lifespan)
app.state.limiter = limiter


# --- Security headers middleware ---
class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        response.headers["Content-Security-Policy"] = "default-src 'none'; img-src 'self'"
        return response


# --- Request size limit middleware ---
class RequestSizeLimitMiddleware(BaseHTTPMiddleware):
    MAX_BODY_SIZE = 4 * 1024 * 1024  # 4MB, room for a 2MB image once base64 encoded

    async def dispatch(self, request: Request, call_next) -> Response:
        content_length = request.headers.get("content-length")
        if content_length and not content_length.isdigit():
            return JSONResponse(status_code=400, content=error_body(request, "validation_failure"))
        if content_length and int(content_length) > self.MAX_BODY_SIZE:
            return JSONResponse(status_code=413, content=error_body(request, "validation_failure"))
        return await call_next(request)


# --- Audit logging middleware ---
class AuditLogMiddleware(BaseHTTPMiddleware):
    AUDIT_PATHS = ("/api/1.0/users", "/api/1.0/auth", "/api/1.0/logout", "/api/1.0/password")

    async def dispatch(self, request: Request, call_next) -> Response:
        start = time.time()
        response = await call_next(request)
        duration_ms = (time.time() - start) * 1000

        path = request.url.path
        method = request.method
        if method in ("POST", "PUT", "DELETE") and path.startswith(self.AUDIT_PATHS):
            logger.info(
                "AUDIT %s %s -> %d (%.0fms) from %s",
                method,
                path,
                response.status_code,
                duration_ms,
                request.client.host if request.client else "unknown",
            )

        return response


app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(RequestSizeLimitMiddleware)
app.add_middleware(AuditLogMiddleware)

# Profile images
app.mount("/images", StaticFiles(directory=settings.profile_image_dir, check_dir=False), name="images")

# API routers
app.include_router(users_router)
app.include_router(auth_router)
app.include_router(password_router)


# --- Error responses ---
def error_body(request: Request, message_key: str, validation_errors: dict[str, str] | None = None) -> dict:
    """Build the {path, timestamp, message[, validationErrors]} error body in the request locale."""
    locale = negotiate_locale(request.headers.get("Accept-Language"))
    body: dict = {
        "path": request.url.path,
        "timestamp": int(time.time() * 1000),
        "message": translate(locale, message_key),
    }
    if validation_errors is not None:
        body["validationErrors"] = translate_errors(locale, validation_errors)
    return body


@app.exception_handler(ApiError)
async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    """Render service errors in the negotiated locale."""
    errors = exc.errors if isinstance(exc, ValidationError) else None
    return JSONResponse(status_code=exc.status_code, content=error_body(request, exc.message_key, errors))


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed bodies or parameters become a 400 in the same shape as field validation."""
    errors = {}
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ()) if part != "body"]
        errors[loc[-1] if loc else "body"] = "field_invalid"
    return JSONResponse(status_code=400, content=error_body(request, "validation_failure", errors))


@app.exception_handler(RateLimitExceeded)
async def rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Handle rate limit exceeded."""
    return JSONResponse(status_code=429, content=error_body(request, "rate_limit_exceeded"))


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Unknown routes and disallowed methods in the common error shape."""
    message_key = "resource_not_found" if exc.status_code == 404 else str(exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(request, message_key),
        headers=getattr(exc, "headers", None),
    )


# --- Health check ---
@app.get("/api/health")
def health_check() -> dict:
    """Health check endpoint."""
    return {"status": "ok", "app": "hoaxify", "version": "0.1.0"}
