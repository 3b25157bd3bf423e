"""Announcements published by staff to a gen."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from campus.db.models import Announcement
from campus.errors import AnnouncementNotFoundError

EDITABLE_FIELDS = ("title", "content", "target_gen", "image_url")


async def list_announcements(
    db: AsyncSession,
    target_gen: str | None = None,
    author_id: str | None = None,
) -> list[Announcement]:
    """Announcements newest first."""
    query = select(Announcement)
    if target_gen is not None:
        query = query.where(Announcement.target_gen == target_gen)
    if author_id is not None:
        query = query.where(Announcement.author_id == author_id)
    result = await db.execute(query.order_by(Announcement.created_at.desc()))
    return list(result.scalars().all())


async def get_announcement(db: AsyncSession, announcement_id: str) -> Announcement:
    item = await db.get(Announcement, announcement_id)
    if item is None:
        msg = "Announcement not found"
        raise AnnouncementNotFoundError(msg)
    return item


async def create_announcement(
    db: AsyncSession,
    author_id: str,
    author: str,
    **fields: Any,  # noqa: ANN401
) -> Announcement:
    now = datetime.now(timezone.utc)
    item = Announcement(
        author_id=author_id,
        author=author,
        created_at=now,
        updated_at=now,
        **{k: v for k, v in fields.items() if k in EDITABLE_FIELDS},
    )
    db.add(item)
    await db.flush()
    return item


async def update_announcement(db: AsyncSession, announcement_id: str, **fields: Any) -> Announcement:  # noqa: ANN401
    item = await get_announcement(db, announcement_id)
    for name, value in fields.items():
        if name in EDITABLE_FIELDS:
            setattr(item, name, value)
    item.updated_at = datetime.now(timezone.utc)
    await db.flush()
    return item


async def delete_announcement(db: AsyncSession, announcement_id: str) -> None:
    item = await get_announcement(db, announcement_id)
    await db.delete(item)
    await db.flush()
