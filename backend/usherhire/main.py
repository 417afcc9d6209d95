"""
Usher Hire API - Main Application Entry Point

Marketplace connecting event planners with event-staffing ushers:
- Accounts and profiles for ushers and planners
- Event posting with a draft -> published -> completed/cancelled lifecycle
- Applications (bookings) with a planner-driven approval workflow
- Post-event ratings aggregated into each usher's running rating
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from usherhire.core.config import get_settings
from usherhire.core.exceptions import UpstreamError
from usherhire.core.logging import setup_logging, get_logger
from usherhire.core.metrics import metrics_endpoint
from usherhire.api.router import api_router
from usherhire.api.middleware import RequestLoggingMiddleware
from usherhire.services.cache_service import get_redis, close_redis, get_cache_stats

settings = get_settings()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifecycle: startup and shutdown hooks."""
    setup_logging()

    logger.info(
        "application_starting",
        app=settings.APP_NAME,
        version=settings.APP_VERSION,
        environment=settings.ENVIRONMENT,
    )

    redis_client = await get_redis()
    if redis_client:
        logger.info("redis_ready")
    else:
        logger.warning("redis_unavailable", message="Running without cache or token revocation")

    yield

    await close_redis()
    logger.info("application_shutdown")


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Marketplace API for event planners and ushers",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Restrict in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(RequestLoggingMiddleware)

app.include_router(api_router)


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError):
    """Data store failures surface as 502 and are never retried."""
    logger.error("database_error", error_type=type(exc).__name__, error=str(exc))
    error = UpstreamError(f"{request.method} {request.url.path} failed: data store unavailable")
    return JSONResponse(status_code=error.status_code, content={"detail": error.detail})


@app.get("/health", tags=["Health"])
async def health_check():
    """Health check endpoint for Docker and load balancers."""
    cache_stats = await get_cache_stats()
    return {
        "status": "healthy",
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT,
        "cache": cache_stats,
    }


@app.get("/metrics", tags=["Health"], include_in_schema=False)
async def metrics():
    return metrics_endpoint()


@app.get("/", tags=["Root"])
async def root():
    return {
        "message": f"Welcome to {settings.APP_NAME}",
        "version": settings.APP_VERSION,
        "docs": "/docs",
    }
