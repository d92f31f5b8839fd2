"""Bloglist API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map BloglistError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Database initialized on startup via lifespan context manager
    - Testing routes only exist when settings.enable_testing_routes is true

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Optional ownership reconciliation on startup: repairs owner-lists left
      behind by partially applied mutations before traffic arrives
"""

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from app.api.error_handlers import register_error_handlers
from app.api.routes import blogs, health, login, testing, users
from app.config import get_settings
from app.infrastructure import database
from app.infrastructure.observability import log_requests, setup_logging
from app.infrastructure.repositories import SqlBlogStore, SqlUserStore
from app.services.reconcile_ownership import reconcile_ownership

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    database.init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    if settings.reconcile_on_startup:
        async with database.db_manager.session() as db:
            await reconcile_ownership(
                SqlBlogStore(db),
                SqlUserStore(db, max_retries=settings.owner_list_max_retries),
            )
    logger.info("Bloglist API started")
    yield
    await database.db_manager.dispose()
    logger.info("Bloglist API shutting down")


app = FastAPI(
    title="Bloglist API", version="1.0.0", lifespan=lifespan,
)

# CORS — configured from settings, not hardcoded
settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.middleware("http")(log_requests)

# Routes — explicit registration
app.include_router(health.router)
app.include_router(blogs.router)
app.include_router(users.router)
app.include_router(login.router)
if settings.enable_testing_routes:
    app.include_router(testing.router)

register_error_handlers(app)

# Static files — serves the frontend build in production
# ADR: mounted AFTER API routes so /api/v1/* takes precedence
if os.path.isdir("static"):
    app.mount("/", StaticFiles(directory="static", html=True), name="static")
