"""Transactional outbox.

Points and submission changes add an OutboxEvent to the session that makes
the change, so the event exists if and only if the change committed. A
worker later ships pending events to a Redis stream for downstream
consumers (reporting, the legacy document store).
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from campus.db.models import OutboxEvent

logger = logging.getLogger(__name__)

TOPIC_POINTS_AWARDED = "points.awarded"
TOPIC_POINTS_REVOKED = "points.revoked"
TOPIC_SUBMISSION_CREATED = "submission.created"
TOPIC_SUBMISSION_GRADED = "submission.graded"
TOPIC_SUBMISSION_DELETED = "submission.deleted"


def enqueue(db: AsyncSession, topic: str, payload: dict[str, Any]) -> OutboxEvent:
    """Stage an event in the caller's transaction. Does not flush."""
    event = OutboxEvent(
        topic=topic,
        payload=payload,
        created_at=datetime.now(timezone.utc),
        attempts=0,
    )
    db.add(event)
    return event


async def pending_count(db: AsyncSession) -> int:
    """Number of events not yet shipped."""
    result = await db.execute(
        select(func.count()).select_from(OutboxEvent).where(OutboxEvent.dispatched_at.is_(None))
    )
    return result.scalar_one()


async def drain_outbox(
    db: AsyncSession,
    redis: Any,  # noqa: ANN401
    stream: str,
    batch_size: int = 100,
    maxlen: int | None = None,
) -> int:
    """Publish pending events in creation order. Returns the number shipped.

    Stops at the first publish failure so ordering is preserved; the failed
    event keeps its pending state and an incremented attempt count.
    """
    result = await db.execute(
        select(OutboxEvent)
        .where(OutboxEvent.dispatched_at.is_(None))
        .order_by(OutboxEvent.id)
        .limit(batch_size)
    )
    events = list(result.scalars().all())
    shipped = 0

    for event in events:
        event.attempts += 1
        fields = {
            "event_id": str(event.id),
            "topic": event.topic,
            "payload": json.dumps(event.payload, default=str),
            "created_at": event.created_at.isoformat(),
        }
        try:
            if maxlen is not None:
                await redis.xadd(stream, fields, maxlen=maxlen, approximate=True)
            else:
                await redis.xadd(stream, fields)
        except Exception:
            logger.warning("Outbox publish failed for event %s", event.id, exc_info=True)
            break
        event.dispatched_at = datetime.now(timezone.utc)
        shipped += 1

    await db.commit()
    if shipped:
        logger.info("Shipped %d outbox events to %s", shipped, stream)
    return shipped
