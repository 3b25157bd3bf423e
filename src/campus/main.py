"""FastAPI application factory."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI

from campus.announcements.router import router as announcements_router
from campus.attendance.router import router as attendance_router
from campus.cache import TTLCache
from campus.config import get_settings
from campus.coursework.router import assignments_router, exercises_router, projects_router
from campus.database import close_db, create_all, init_db
from campus.fees.router import router as fees_router
from campus.health.router import router as health_router
from campus.middleware import setup_middleware
from campus.notifications.router import router as notifications_router
from campus.points.router import router as points_router
from campus.rankings.router import router as rankings_router
from campus.redis_client import close_redis, init_redis
from campus.reports.router import router as reports_router
from campus.roadmap.router import router as roadmap_router
from campus.submissions.router import router as submissions_router

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup and shutdown lifecycle."""
    settings = get_settings()
    await init_db(settings.database_url)
    await init_redis(settings.redis_url)

    if settings.database_url.startswith("sqlite"):
        # Local databases are created from the models; Postgres goes through alembic.
        await create_all()
        logger.info("sqlite_schema_created")

    yield

    await close_db()
    await close_redis()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="Codetrain Campus API",
        description="Points, grading, roadmap and school administration for Codetrain",
        version=settings.app_version,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )
    app.state.rankings_cache = TTLCache(default_ttl=settings.rankings_cache_ttl_seconds)

    setup_middleware(app, settings)
    app.include_router(health_router, tags=["Health"])
    app.include_router(points_router)
    app.include_router(submissions_router)
    app.include_router(roadmap_router)
    app.include_router(notifications_router)
    app.include_router(attendance_router)
    app.include_router(assignments_router)
    app.include_router(exercises_router)
    app.include_router(projects_router)
    app.include_router(fees_router)
    app.include_router(rankings_router)
    app.include_router(reports_router)
    app.include_router(announcements_router)

    return app


app = create_app()
