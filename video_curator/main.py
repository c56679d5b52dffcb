"""
Main FastAPI application
"""

import time
import structlog
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.gzip import GZipMiddleware

from video_curator.core.config import settings
from video_curator.core.error_handlers import register_error_handlers
from video_curator.core.logging_config import configure_logging
from video_curator.db.database import create_tables, dispose_engine
from video_curator.api.routes import api_router
from video_curator.middleware.body_limit import BodySizeLimitMiddleware
from video_curator.middleware.rate_limiting import RateLimitMiddleware
from video_curator.middleware.request_logging import RequestLoggingMiddleware
from video_curator.middleware.security import SecurityHeadersMiddleware
from video_curator.utils.date_utils import utc_now

# Configure structured logging
configure_logging(
    log_level=settings.LOG_LEVEL,
    log_dir=settings.LOG_DIR,
    log_to_file=settings.LOG_TO_FILE
)

logger = structlog.get_logger()

STARTED_AT = time.monotonic()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    logger.info("Starting Video Curator API...", environment=settings.ENVIRONMENT)
    try:
        await create_tables()
    except Exception as e:
        logger.error(f"Failed to start application: {e}")
        raise
    logger.info("Video Curator API started successfully!")

    yield

    logger.info("Shutting down Video Curator API...")
    await dispose_engine()


# Create FastAPI application
app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Video catalog API: browse, filter, upload and vote on videos",
    version=settings.VERSION,
    lifespan=lifespan
)

# Middleware runs in reverse order of registration: logging sees every response
app.add_middleware(GZipMiddleware, minimum_size=1000)

if settings.SECURITY_HEADERS_ENABLED:
    app.add_middleware(SecurityHeadersMiddleware, hsts=settings.is_production)

app.add_middleware(BodySizeLimitMiddleware, max_size=10 * 1024 * 1024)

if settings.RATE_LIMIT_ENABLED:
    app.add_middleware(
        RateLimitMiddleware,
        default_limit=settings.RATE_LIMIT_PER_WINDOW,
        default_window=settings.RATE_LIMIT_WINDOW_SECONDS
    )

# Any origin is accepted outside production
cors_origins = settings.cors_origin_list if settings.is_production else ["*"]
logger.info(f"CORS Origins configured: {cors_origins}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials="*" not in cors_origins,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)

app.add_middleware(RequestLoggingMiddleware)

# Register error handlers
register_error_handlers(app)

# Include API routes
app.include_router(api_router, prefix=settings.API_V1_PREFIX)


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "message": settings.PROJECT_NAME,
        "version": settings.VERSION,
        "docs": "/docs",
        "api": settings.API_V1_PREFIX
    }


@app.get("/health")
async def health_check():
    """Liveness check"""
    return {
        "status": "OK",
        "timestamp": utc_now().isoformat(),
        "uptime": round(time.monotonic() - STARTED_AT, 3),
        "service": "video-curator",
        "version": settings.VERSION,
        "environment": settings.ENVIRONMENT
    }
