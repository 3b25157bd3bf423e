"""Announcement API endpoints: 5 routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from campus.announcements.schemas import AnnouncementCreate, AnnouncementResponse, AnnouncementUpdate
from campus.announcements.service import (
    create_announcement,
    delete_announcement,
    get_announcement,
    list_announcements,
    update_announcement,
)
from campus.auth.dependencies import Principal, get_current_user, require
from campus.auth.roles import Permission
from campus.database import get_session
from campus.db.models import Announcement
from campus.errors import AnnouncementNotFoundError

router = APIRouter(prefix="/api/v1", tags=["Announcements"])

_staff = require(Permission.MANAGE_ANNOUNCEMENTS)


def _to_response(a: Announcement) -> AnnouncementResponse:
    return AnnouncementResponse(
        id=a.id,
        title=a.title,
        content=a.content,
        author=a.author,
        author_id=a.author_id,
        target_gen=a.target_gen,
        image_url=a.image_url,
        created_at=a.created_at,
        updated_at=a.updated_at,
    )


@router.get("/announcements", response_model=list[AnnouncementResponse])
async def list_items(
    target_gen: str | None = Query(None),
    author_id: str | None = Query(None),
    _user: Principal = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    return [_to_response(a) for a in await list_announcements(db, target_gen, author_id)]


@router.post("/announcements", response_model=AnnouncementResponse, status_code=201)
async def create_item(
    body: AnnouncementCreate,
    user: Principal = Depends(_staff),
    db: AsyncSession = Depends(get_session),
):
    """Publish an announcement signed with the caller's name."""
    item = await create_announcement(db, user.uid, user.name or user.uid, **body.model_dump())
    await db.commit()
    return _to_response(item)


@router.get("/announcements/{announcement_id}", response_model=AnnouncementResponse)
async def get_item(
    announcement_id: str,
    _user: Principal = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    try:
        item = await get_announcement(db, announcement_id)
    except AnnouncementNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message) from e
    return _to_response(item)


@router.patch("/announcements/{announcement_id}", response_model=AnnouncementResponse)
async def update_item(
    announcement_id: str,
    body: AnnouncementUpdate,
    _user: Principal = Depends(_staff),
    db: AsyncSession = Depends(get_session),
):
    fields = body.model_dump(exclude_unset=True)
    # Only the image may be cleared; the required columns keep their value on null.
    fields = {k: v for k, v in fields.items() if v is not None or k == "image_url"}
    try:
        item = await update_announcement(db, announcement_id, **fields)
    except AnnouncementNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message) from e
    await db.commit()
    return _to_response(item)


@router.delete("/announcements/{announcement_id}", status_code=200)
async def delete_item(
    announcement_id: str,
    _user: Principal = Depends(_staff),
    db: AsyncSession = Depends(get_session),
):
    try:
        await delete_announcement(db, announcement_id)
    except AnnouncementNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message) from e
    await db.commit()
    return {"detail": "Announcement deleted"}
