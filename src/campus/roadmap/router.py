"""Roadmap and materials API endpoints: 11 routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from campus.auth.dependencies import Principal, get_current_user, require
from campus.auth.roles import Permission
from campus.database import get_session
from campus.db.models import Material, MaterialView
from campus.errors import MaterialNotFoundError, MaterialViewNotFoundError, UnknownWeekError
from campus.roadmap.curriculum import ROADMAP
from campus.roadmap.schemas import (
    MaterialCreate,
    MaterialResponse,
    MaterialStatusResponse,
    MaterialUpdate,
    MaterialViewCreate,
    MaterialViewResponse,
    MaterialViewUpdate,
    RoadmapResponse,
    SubjectResponse,
    TopicResponse,
    WeekResponse,
    WeekStatusResponse,
    WeekStatusUpdate,
)
from campus.roadmap.service import (
    create_material,
    delete_material,
    get_status_map,
    list_materials,
    material_statuses,
    materials_for_student,
    roadmap_progress,
    set_week_completion,
    track_material_view,
    update_material,
    update_view_completion,
)
from campus.roadmap.unlock import week_key

router = APIRouter(prefix="/api/v1", tags=["Roadmap"])


def _material(m: Material) -> MaterialResponse:
    return MaterialResponse(
        id=m.id,
        title=m.title,
        subject=m.subject,
        week=m.week,
        video_url=m.video_url,
        slides_url=m.slides_url,
        order=m.order,
        created_at=m.created_at,
    )


def _view(v: MaterialView) -> MaterialViewResponse:
    return MaterialViewResponse(
        id=v.id,
        material_id=v.material_id,
        student_id=v.student_id,
        gen=v.gen,
        viewed_at=v.viewed_at,
        duration=v.duration,
        completed=v.completed,
    )


# ── Roadmap ──


@router.get("/roadmap", response_model=RoadmapResponse)
async def get_roadmap(
    gen: str = Query(..., min_length=1),
    _user: Principal = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    """Curriculum annotated with the gen's completed, unlocked and current weeks."""
    progress = await roadmap_progress(db, gen)
    subjects = []
    for subject in ROADMAP:
        weeks = []
        for week in subject.weeks:
            key = week_key(subject.title, week.title)
            weeks.append(WeekResponse(
                id=key,
                title=week.title,
                topics=[TopicResponse(id=t.id, title=t.title) for t in week.topics],
                completed=key in progress["completed"],
                unlocked=key in progress["unlocked"],
                current=key == progress["current"],
            ))
        subjects.append(SubjectResponse(title=subject.title, duration=subject.duration, weeks=weeks))
    return RoadmapResponse(gen=gen, subjects=subjects, current_week=progress["current"])


@router.get("/roadmap/status")
async def roadmap_status(
    _user: Principal = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> dict[str, dict[str, bool]]:
    """Completion map: week id to {gen: completed}."""
    return await get_status_map(db)


@router.put("/roadmap/status/{week_id}", response_model=WeekStatusResponse)
async def put_week_status(
    week_id: str,
    body: WeekStatusUpdate,
    user: Principal = Depends(require(Permission.MANAGE_ROADMAP)),
    db: AsyncSession = Depends(get_session),
):
    """Mark a roadmap week complete or incomplete for a gen."""
    try:
        status = await set_week_completion(db, week_id, body.gen, body.completed, user.uid)
    except UnknownWeekError as e:
        raise HTTPException(status_code=404, detail=e.message) from e
    await db.commit()
    return WeekStatusResponse(
        week_id=status.week_id,
        gen=status.gen,
        completed=status.completed,
        updated_by=status.updated_by,
        updated_at=status.updated_at,
    )


# ── Materials ──


@router.get("/materials", response_model=list[MaterialResponse])
async def get_materials(
    subject: str | None = Query(None),
    _user: Principal = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    """All materials in roadmap order."""
    return [_material(m) for m in await list_materials(db, subject)]


@router.post("/materials", response_model=MaterialResponse, status_code=201)
async def post_material(
    body: MaterialCreate,
    _user: Principal = Depends(require(Permission.MANAGE_MATERIALS)),
    db: AsyncSession = Depends(get_session),
):
    """Add a material to a roadmap week."""
    material = await create_material(db, **body.model_dump())
    await db.commit()
    return _material(material)


@router.get("/materials/unlocked", response_model=list[MaterialResponse])
async def get_unlocked_materials(
    gen: str = Query(..., min_length=1),
    _user: Principal = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    """Materials a gen can currently see."""
    return [_material(m) for m in await materials_for_student(db, gen)]


@router.get("/materials/status", response_model=list[MaterialStatusResponse])
async def get_material_statuses(
    gen: str = Query(..., min_length=1),
    user: Principal = Depends(require(Permission.SUBMIT_WORK)),
    db: AsyncSession = Depends(get_session),
):
    """Every material with unlock state and the caller's view stats."""
    return [MaterialStatusResponse(**s) for s in await material_statuses(db, gen, user.uid)]


@router.patch("/materials/views/{view_id}", response_model=MaterialViewResponse)
async def patch_view(
    view_id: str,
    body: MaterialViewUpdate,
    user: Principal = Depends(require(Permission.SUBMIT_WORK)),
    db: AsyncSession = Depends(get_session),
):
    """Record watch duration and completion for a view."""
    try:
        view = await update_view_completion(db, view_id, user.uid, body.completed, body.duration)
    except MaterialViewNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message) from e
    await db.commit()
    return _view(view)


@router.patch("/materials/{material_id}", response_model=MaterialResponse)
async def patch_material(
    material_id: str,
    body: MaterialUpdate,
    _user: Principal = Depends(require(Permission.MANAGE_MATERIALS)),
    db: AsyncSession = Depends(get_session),
):
    """Update a material."""
    try:
        material = await update_material(db, material_id, **body.model_dump(exclude_unset=True))
    except MaterialNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message) from e
    await db.commit()
    return _material(material)


@router.delete("/materials/{material_id}", status_code=200)
async def remove_material(
    material_id: str,
    _user: Principal = Depends(require(Permission.MANAGE_MATERIALS)),
    db: AsyncSession = Depends(get_session),
):
    """Delete a material."""
    try:
        await delete_material(db, material_id)
    except MaterialNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message) from e
    await db.commit()
    return {"detail": "Material deleted"}


@router.post("/materials/{material_id}/views", response_model=MaterialViewResponse, status_code=201)
async def post_view(
    material_id: str,
    body: MaterialViewCreate,
    user: Principal = Depends(require(Permission.SUBMIT_WORK)),
    db: AsyncSession = Depends(get_session),
):
    """Log that the caller opened a material."""
    try:
        view = await track_material_view(db, material_id, user.uid, body.gen, body.duration)
    except MaterialNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message) from e
    await db.commit()
    return _view(view)
