"""
Portfolio CMS API

FastAPI application serving the portfolio resources:
1. Public list/detail reads, cached in Redis when available
2. Admin-only mutations guarded by a JWT bearer token
3. Uploaded media pushed to S3 (or the local filesystem in development)

Every error response has the shape ``{"error": "<message>"}``.
"""

import logging
import os
import sys
from contextlib import asynccontextmanager
from datetime import datetime

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy import text
from sqlalchemy.orm import Session
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.auth.jwt import AuthError
from src.cache.base import CacheBackend
from src.cache.redis_cache import close_redis_cache
from src.database.session import get_db, init_db
from src.media.storage import MediaStorage
from src.services.errors import ServiceError
from src.utils.config import get_settings

from api import auth, certificates, images, journey, landing_pages, linkedin, odoo, personal_info
from api.dependencies import get_cache, get_media

settings = get_settings()

# Configure logging to stdout
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    stream=sys.stdout,
    force=True,
)
logger = logging.getLogger(__name__)

# Quiet down chatty loggers
for noisy in ("botocore", "boto3", "urllib3", "httpx", "httpcore", "multipart"):
    logging.getLogger(noisy).setLevel(logging.WARNING)


# ============================================================================
# LIFESPAN
# ============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables on startup, release the cache pool on shutdown."""
    logger.info("Initializing database...")
    try:
        init_db()
    except Exception as e:
        # Requests will surface store errors as 500s; the process stays up
        logger.error(f"Database initialization failed: {e}")

    yield

    await close_redis_cache()
    logger.info("Shutdown complete")


# ============================================================================
# ERROR HANDLERS
# ============================================================================

def _error(status_code: int, error: str, headers=None, **extra) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": error, **extra}, headers=headers)


async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    return _error(exc.status_code, exc.message)


async def auth_error_handler(request: Request, exc: AuthError) -> JSONResponse:
    return _error(401, str(exc) or "Invalid credentials", headers={"WWW-Authenticate": "Bearer"})


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    message = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    if exc.status_code == 404 and message == "Not Found":
        message = "Route not found"
    return _error(exc.status_code, message, headers=getattr(exc, "headers", None))


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{location}: {first.get('msg')}" if location else first.get("msg", "Invalid request")
    else:
        message = "Invalid request"
    return _error(400, message)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    detail = str(exc) if get_settings().is_development else "Something went wrong"
    return _error(500, "Internal Server Error", message=detail)


# ============================================================================
# APPLICATION
# ============================================================================

def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.APP_TITLE,
        description="Portfolio content API: certificates, images, journey, landing pages, LinkedIn profile, Odoo modules, personal projects",
        version=settings.APP_VERSION,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(ServiceError, service_error_handler)
    app.add_exception_handler(AuthError, auth_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    for module in (auth, certificates, images, journey, landing_pages, linkedin, odoo, personal_info):
        app.include_router(module.router)

    @app.get("/api/health", tags=["Health"])
    async def health(
        db: Session = Depends(get_db),
        cache: CacheBackend = Depends(get_cache),
        media: MediaStorage = Depends(get_media),
    ):
        """Health check including store, cache and media host status."""
        try:
            db.execute(text("SELECT 1"))
            database = "connected"
        except Exception as e:
            logger.error(f"Health check database error: {e}")
            database = "disconnected"

        cache_health = await cache.health_check()
        media_health = await media.health_check()

        return {
            "status": "healthy" if database == "connected" else "degraded",
            "timestamp": datetime.utcnow().isoformat(),
            "version": settings.APP_VERSION,
            "services": {
                "database": database,
                "cache": cache_health.get("status", "connected" if cache_health.get("healthy") else "error"),
                "media": "available" if media_health.get("healthy") else "unavailable",
            },
        }

    if not os.getenv("MEDIA_S3_BUCKET"):
        app.mount(
            "/media",
            StaticFiles(directory=os.getenv("MEDIA_STORAGE_PATH", "media"), check_dir=False),
            name="media",
        )

    return app


app = create_app()


# ============================================================================
# RUN SERVER
# ============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "api.main:app",
        host="0.0.0.0",
        port=int(os.getenv("PORT", "5000")),
        reload=settings.is_development,
    )
