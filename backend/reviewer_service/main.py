"""Reviewer Service API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map ReviewServiceError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Database initialized on startup and disposed on shutdown via lifespan
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from reviewer_service.api.error_handlers import register_error_handlers
from reviewer_service.api.routes import health, pull_requests, team, users
from reviewer_service.config import get_settings
from reviewer_service.infrastructure.database import init_db
from reviewer_service.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    manager = init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
        isolation_level=settings.database_isolation_level,
    )
    if settings.database_create_schema:
        await manager.create_schema()
    logger.info("Reviewer service started")
    yield
    await manager.dispose()
    logger.info("Reviewer service shutting down")


app = FastAPI(
    title="Reviewer Assignment API", version="1.0.0", lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(team.router)
app.include_router(users.router)
app.include_router(pull_requests.router)

register_error_handlers(app)
