"""Notification creation and inbox queries.

``notify`` is the sink used by grading, attendance and fees: it never
raises, so a failed notification can not undo the work that triggered it.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from sqlalchemy import func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from campus.db.models import Notification

logger = logging.getLogger(__name__)


async def create_notification(
    db: AsyncSession,
    user_id: str,
    title: str,
    description: str | None = None,
    href: str | None = None,
) -> Notification:
    """Persist a notification. Flushes, does not commit."""
    notification = Notification(
        user_id=user_id,
        title=title,
        description=description,
        href=href,
        read=False,
        created_at=datetime.now(timezone.utc),
    )
    db.add(notification)
    await db.flush()
    return notification


async def notify(
    db: AsyncSession,
    user_id: str,
    title: str,
    description: str | None = None,
    href: str | None = None,
) -> Notification | None:
    """Create and commit a notification; log and swallow any failure.

    Call only after the triggering change has been committed: a failure here
    rolls the session back.
    """
    try:
        notification = await create_notification(db, user_id, title, description, href)
        await db.commit()
    except SQLAlchemyError:
        logger.warning("notification_failed user_id=%s title=%s", user_id, title, exc_info=True)
        await db.rollback()
        return None
    return notification


async def get_notifications(
    db: AsyncSession,
    user_id: str,
    page: int = 1,
    per_page: int = 20,
) -> tuple[list[Notification], int]:
    """Get user's notifications (paginated, most recent first)."""
    offset = (page - 1) * per_page

    total_result = await db.execute(
        select(func.count()).select_from(Notification).where(Notification.user_id == user_id)
    )
    total = total_result.scalar_one()

    result = await db.execute(
        select(Notification)
        .where(Notification.user_id == user_id)
        .order_by(Notification.created_at.desc(), Notification.id.desc())
        .offset(offset)
        .limit(per_page)
    )
    notifications = list(result.scalars().all())
    return notifications, total


async def get_unread_count(db: AsyncSession, user_id: str) -> int:
    result = await db.execute(
        select(func.count())
        .select_from(Notification)
        .where(Notification.user_id == user_id, Notification.read.is_(False))
    )
    return result.scalar_one()


async def mark_as_read(db: AsyncSession, user_id: str, notification_id: int) -> bool:
    """Mark a single notification as read. Returns True if found."""
    result = await db.execute(
        update(Notification)
        .where(Notification.id == notification_id, Notification.user_id == user_id)
        .values(read=True)
    )
    return result.rowcount > 0


async def mark_all_as_read(db: AsyncSession, user_id: str) -> int:
    """Mark all of a user's unread notifications as read. Returns the count."""
    result = await db.execute(
        update(Notification)
        .where(Notification.user_id == user_id, Notification.read.is_(False))
        .values(read=True)
    )
    return result.rowcount
