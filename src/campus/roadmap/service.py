"""Roadmap completion state, materials and the material view log."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from campus.db.models import Material, MaterialView, RoadmapWeekStatus
from campus.errors import MaterialNotFoundError, MaterialViewNotFoundError, UnknownWeekError
from campus.roadmap.curriculum import ROADMAP
from campus.roadmap.unlock import (
    current_week_key,
    is_known_week,
    sort_materials_by_roadmap,
    unlocked_materials,
    unlocked_week_keys,
    week_key,
)

logger = logging.getLogger(__name__)

MATERIAL_FIELDS = ("title", "subject", "week", "video_url", "slides_url", "order")


# --- Completion state ---


async def get_completed_weeks(db: AsyncSession, gen: str) -> set[str]:
    result = await db.execute(
        select(RoadmapWeekStatus.week_id).where(
            RoadmapWeekStatus.gen == gen,
            RoadmapWeekStatus.completed.is_(True),
        )
    )
    return {row[0] for row in result}


async def set_week_completion(
    db: AsyncSession,
    week_id: str,
    gen: str,
    completed: bool,
    updated_by: str,
) -> RoadmapWeekStatus:
    """Mark a week complete (or not) for one gen. Flushes, does not commit.

    Raises:
        UnknownWeekError: ``week_id`` is not a week of the curriculum.
    """
    if not is_known_week(week_id, ROADMAP):
        msg = f"Unknown roadmap week '{week_id}'"
        raise UnknownWeekError(msg)

    result = await db.execute(
        select(RoadmapWeekStatus).where(
            RoadmapWeekStatus.week_id == week_id,
            RoadmapWeekStatus.gen == gen,
        )
    )
    status = result.scalar_one_or_none()
    now = datetime.now(timezone.utc)
    if status is None:
        status = RoadmapWeekStatus(week_id=week_id, gen=gen)
        db.add(status)
    status.completed = completed
    status.updated_by = updated_by
    status.updated_at = now
    await db.flush()
    logger.info("Roadmap week %s set to completed=%s for gen %s", week_id, completed, gen)
    return status


async def get_status_map(db: AsyncSession) -> dict[str, dict[str, bool]]:
    """``{week_id: {gen: completed}}`` for every stored status."""
    result = await db.execute(select(RoadmapWeekStatus))
    status_map: dict[str, dict[str, bool]] = {}
    for row in result.scalars():
        status_map.setdefault(row.week_id, {})[row.gen] = row.completed
    return status_map


async def roadmap_progress(db: AsyncSession, gen: str) -> dict[str, Any]:
    """Completed, unlocked and current weeks for one gen."""
    completed = await get_completed_weeks(db, gen)
    return {
        "gen": gen,
        "completed": completed,
        "unlocked": unlocked_week_keys(completed, ROADMAP),
        "current": current_week_key(completed, ROADMAP),
    }


# --- Materials ---


async def list_materials(db: AsyncSession, subject: str | None = None) -> list[Material]:
    """All materials, roadmap-sorted."""
    query = select(Material)
    if subject is not None:
        query = query.where(Material.subject == subject)
    result = await db.execute(query.order_by(Material.order, Material.created_at))
    return sort_materials_by_roadmap(result.scalars().all(), ROADMAP)


async def get_material(db: AsyncSession, material_id: str) -> Material:
    material = await db.get(Material, material_id)
    if material is None:
        msg = "Material not found."
        raise MaterialNotFoundError(msg)
    return material


async def create_material(db: AsyncSession, **fields: Any) -> Material:  # noqa: ANN401
    material = Material(**{k: v for k, v in fields.items() if k in MATERIAL_FIELDS})
    db.add(material)
    await db.flush()
    return material


async def update_material(db: AsyncSession, material_id: str, **fields: Any) -> Material:  # noqa: ANN401
    material = await get_material(db, material_id)
    for name, value in fields.items():
        if name in MATERIAL_FIELDS:
            setattr(material, name, value)
    await db.flush()
    return material


async def delete_material(db: AsyncSession, material_id: str) -> None:
    material = await get_material(db, material_id)
    await db.delete(material)
    await db.flush()


async def materials_for_student(db: AsyncSession, gen: str) -> list[Material]:
    """Materials unlocked for ``gen``, in roadmap order."""
    completed = await get_completed_weeks(db, gen)
    materials = await list_materials(db)
    return unlocked_materials(completed, ROADMAP, materials)


# --- Views ---


async def track_material_view(
    db: AsyncSession,
    material_id: str,
    student_id: str,
    gen: str | None = None,
    duration: int = 0,
) -> MaterialView:
    """Append a view row. Flushes, does not commit.

    Raises:
        MaterialNotFoundError: no such material.
    """
    await get_material(db, material_id)
    view = MaterialView(
        material_id=material_id,
        student_id=student_id,
        gen=gen,
        duration=max(duration, 0),
        completed=False,
        viewed_at=datetime.now(timezone.utc),
    )
    db.add(view)
    await db.flush()
    return view


async def update_view_completion(
    db: AsyncSession,
    view_id: str,
    student_id: str,
    completed: bool,
    duration: int,
) -> MaterialView:
    """Update duration and completion of the caller's own view row."""
    view = await db.get(MaterialView, view_id)
    if view is None or view.student_id != student_id:
        msg = "Material view not found."
        raise MaterialViewNotFoundError(msg)
    view.completed = completed
    view.duration = max(duration, 0)
    await db.flush()
    return view


async def material_statuses(db: AsyncSession, gen: str, student_id: str) -> list[dict[str, Any]]:
    """Every material with unlock state and the student's view stats."""
    completed = await get_completed_weeks(db, gen)
    unlocked = unlocked_week_keys(completed, ROADMAP)
    current = current_week_key(completed, ROADMAP)
    materials = await list_materials(db)

    result = await db.execute(
        select(
            MaterialView.material_id,
            func.count(MaterialView.id),
            func.max(MaterialView.viewed_at),
        )
        .where(MaterialView.student_id == student_id)
        .group_by(MaterialView.material_id)
    )
    stats = {row[0]: (row[1], row[2]) for row in result}

    statuses = []
    for m in materials:
        key = week_key(m.subject, m.week)
        view_count, last_viewed_at = stats.get(m.id, (0, None))
        statuses.append({
            "id": m.id,
            "title": m.title,
            "subject": m.subject,
            "week": m.week,
            "gen": gen,
            "is_unlocked": key in unlocked,
            "is_current": key == current,
            "view_count": view_count,
            "last_viewed_at": last_viewed_at,
        })
    return statuses
