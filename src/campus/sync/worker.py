"""arq worker that ships outbox events to the sync stream.

Runs as a separate process:

    arq campus.sync.worker.WorkerSettings
"""

from __future__ import annotations

import logging

import redis.asyncio as aioredis
from arq import cron
from arq.connections import RedisSettings
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from campus.config import get_settings
from campus.database import close_db, get_engine, init_db
from campus.sync.outbox import drain_outbox

logger = logging.getLogger(__name__)


async def startup(ctx: dict) -> None:  # type: ignore[type-arg]
    """Open the database engine and the stream Redis client."""
    settings = get_settings()
    await init_db(settings.database_url)
    ctx["session_factory"] = async_sessionmaker(
        get_engine(), class_=AsyncSession, expire_on_commit=False,
    )
    ctx["stream_redis"] = aioredis.from_url(
        settings.redis_url,
        encoding="utf-8",
        decode_responses=True,
        max_connections=5,
    )
    logger.info("Sync worker started (stream=%s)", settings.sync_stream)


async def shutdown(ctx: dict) -> None:  # type: ignore[type-arg]
    """Close the Redis client and dispose of the engine."""
    redis_client: aioredis.Redis | None = ctx.get("stream_redis")
    if redis_client:
        await redis_client.aclose()
    await close_db()
    logger.info("Sync worker shut down")


async def drain(ctx: dict) -> int:  # type: ignore[type-arg]
    """Ship one batch of pending outbox events."""
    settings = get_settings()
    async with ctx["session_factory"]() as db:
        return await drain_outbox(
            db,
            ctx["stream_redis"],
            settings.sync_stream,
            batch_size=settings.outbox_batch_size,
            maxlen=settings.sync_stream_maxlen,
        )


class WorkerSettings:
    """arq worker settings for the outbox drain."""

    functions = [drain]
    cron_jobs = [
        # Every 10 seconds
        cron(drain, second={0, 10, 20, 30, 40, 50}, run_at_startup=True),
    ]
    redis_settings = RedisSettings.from_dsn(get_settings().redis_url)
    on_startup = startup
    on_shutdown = shutdown
    max_jobs = 1
