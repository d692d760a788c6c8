"""Dealboard Backend -- FastAPI Application Entry Point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from dealboard.api.v1.router import api_v1_router
from dealboard.config import settings
from dealboard.core.exceptions import DealboardException
from dealboard.db.seed import seed_defaults
from dealboard.db.session import async_session_factory, engine
from dealboard.models import Base
from dealboard.schemas.common import ErrorResponse
from dealboard.services.cache_service import get_cache_service

# Configure logging
logging.basicConfig(
    level=logging.INFO if settings.DEBUG else logging.WARNING,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: startup and shutdown events."""
    logger.info("Starting Dealboard API server...")
    logger.info(f"Environment: {settings.ENVIRONMENT}")
    logger.info(f"Debug mode: {settings.DEBUG}")

    # Auto-create tables and starter rows on startup
    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables verified/created")

        async with async_session_factory() as session:
            await seed_defaults(session)
    except SQLAlchemyError as e:
        logger.error(f"Database init failed: {e}", exc_info=True)

    cache = get_cache_service()
    if await cache.health_check():
        logger.info("Redis cache connected successfully")
    else:
        logger.warning("Redis cache connection failed (will operate without caching)")

    yield

    logger.info("Shutting down Dealboard API server...")
    await cache.close()


app = FastAPI(
    title="Dealboard API",
    description="Community deals board with voting, moderation and curation",
    version="0.1.0",
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url="/redoc" if settings.DEBUG else None,
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(DealboardException)
async def dealboard_exception_handler(request: Request, exc: DealboardException):
    """Render application errors as the standard error envelope."""
    if exc.status_code >= 500:
        logger.warning(f"{exc.code} on {request.method} {request.url.path}: {exc.message}")
    body = ErrorResponse.from_exception(exc)
    return JSONResponse(status_code=exc.status_code, content=body.to_content())


# Register API v1 router
app.include_router(api_v1_router, prefix="/api/v1")


@app.get("/")
async def root():
    """Root endpoint with API information."""
    return {
        "name": "Dealboard API",
        "version": "0.1.0",
        "docs": "/docs" if settings.DEBUG else None,
        "health": "/api/v1/health",
    }
