"""Assignments, class exercises and weekly projects.

All three share one table and differ only by ``kind``.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from campus.db.models import Coursework
from campus.errors import CourseworkNotFoundError

KINDS = ("assignment", "exercise", "project")
EDITABLE_FIELDS = ("title", "description", "target_gen", "subject", "week", "due_date")


async def list_coursework(db: AsyncSession, kind: str, target_gen: str | None = None) -> list[Coursework]:
    """Coursework of one kind, newest first."""
    query = select(Coursework).where(Coursework.kind == kind)
    if target_gen is not None:
        query = query.where(Coursework.target_gen == target_gen)
    result = await db.execute(query.order_by(Coursework.created_at.desc()))
    return list(result.scalars().all())


async def get_coursework(db: AsyncSession, kind: str, coursework_id: str) -> Coursework:
    item = await db.get(Coursework, coursework_id)
    if item is None or item.kind != kind:
        msg = f"{kind.capitalize()} not found."
        raise CourseworkNotFoundError(msg)
    return item


async def create_coursework(db: AsyncSession, kind: str, author_id: str, **fields: Any) -> Coursework:  # noqa: ANN401
    now = datetime.now(timezone.utc)
    item = Coursework(
        kind=kind,
        author_id=author_id,
        created_at=now,
        updated_at=now,
        **{k: v for k, v in fields.items() if k in EDITABLE_FIELDS},
    )
    db.add(item)
    await db.flush()
    return item


async def update_coursework(db: AsyncSession, kind: str, coursework_id: str, **fields: Any) -> Coursework:  # noqa: ANN401
    item = await get_coursework(db, kind, coursework_id)
    for name, value in fields.items():
        if name in EDITABLE_FIELDS:
            setattr(item, name, value)
    item.updated_at = datetime.now(timezone.utc)
    await db.flush()
    return item


async def delete_coursework(db: AsyncSession, kind: str, coursework_id: str) -> None:
    item = await get_coursework(db, kind, coursework_id)
    await db.delete(item)
    await db.flush()
