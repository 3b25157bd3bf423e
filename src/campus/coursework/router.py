"""Coursework API endpoints: 5 routes for each of assignments, exercises and projects."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from campus.auth.dependencies import Principal, get_current_user, require
from campus.auth.roles import Permission
from campus.coursework.schemas import CourseworkCreate, CourseworkResponse, CourseworkUpdate
from campus.coursework.service import (
    create_coursework,
    delete_coursework,
    get_coursework,
    list_coursework,
    update_coursework,
)
from campus.database import get_session
from campus.db.models import Coursework
from campus.errors import CourseworkNotFoundError


def _to_response(c: Coursework) -> CourseworkResponse:
    return CourseworkResponse(
        id=c.id,
        kind=c.kind,
        title=c.title,
        description=c.description,
        target_gen=c.target_gen,
        author_id=c.author_id,
        subject=c.subject,
        week=c.week,
        due_date=c.due_date,
        created_at=c.created_at,
        updated_at=c.updated_at,
    )


def build_router(kind: str, path: str, tag: str) -> APIRouter:
    """CRUD router for one coursework kind mounted at ``/api/v1/{path}``."""
    router = APIRouter(prefix="/api/v1", tags=[tag])

    @router.get(f"/{path}", response_model=list[CourseworkResponse])
    async def list_items(
        target_gen: str | None = Query(None),
        _user: Principal = Depends(get_current_user),
        db: AsyncSession = Depends(get_session),
    ):
        return [_to_response(c) for c in await list_coursework(db, kind, target_gen)]

    @router.post(f"/{path}", response_model=CourseworkResponse, status_code=201)
    async def create_item(
        body: CourseworkCreate,
        user: Principal = Depends(require(Permission.MANAGE_COURSEWORK)),
        db: AsyncSession = Depends(get_session),
    ):
        item = await create_coursework(db, kind, user.uid, **body.model_dump())
        await db.commit()
        return _to_response(item)

    @router.get(f"/{path}/{{item_id}}", response_model=CourseworkResponse)
    async def get_item(
        item_id: str,
        _user: Principal = Depends(get_current_user),
        db: AsyncSession = Depends(get_session),
    ):
        try:
            item = await get_coursework(db, kind, item_id)
        except CourseworkNotFoundError as e:
            raise HTTPException(status_code=404, detail=e.message) from e
        return _to_response(item)

    @router.patch(f"/{path}/{{item_id}}", response_model=CourseworkResponse)
    async def update_item(
        item_id: str,
        body: CourseworkUpdate,
        _user: Principal = Depends(require(Permission.MANAGE_COURSEWORK)),
        db: AsyncSession = Depends(get_session),
    ):
        try:
            item = await update_coursework(db, kind, item_id, **body.model_dump(exclude_unset=True))
        except CourseworkNotFoundError as e:
            raise HTTPException(status_code=404, detail=e.message) from e
        await db.commit()
        return _to_response(item)

    @router.delete(f"/{path}/{{item_id}}", status_code=200)
    async def delete_item(
        item_id: str,
        _user: Principal = Depends(require(Permission.MANAGE_COURSEWORK)),
        db: AsyncSession = Depends(get_session),
    ):
        try:
            await delete_coursework(db, kind, item_id)
        except CourseworkNotFoundError as e:
            raise HTTPException(status_code=404, detail=e.message) from e
        await db.commit()
        return {"detail": f"{kind.capitalize()} deleted"}

    return router


assignments_router = build_router("assignment", "assignments", "Assignments")
exercises_router = build_router("exercise", "exercises", "Exercises")
projects_router = build_router("project", "projects", "Projects")
