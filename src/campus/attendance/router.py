"""Attendance API endpoints: 2 routes."""

from __future__ import annotations

from dataclasses import asdict

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from campus.attendance.schemas import AttendanceCreate, AttendanceRecordResponse, AttendanceResultResponse
from campus.attendance.service import list_attendance, mark_attendance
from campus.auth.dependencies import Principal, get_current_user, require
from campus.auth.roles import Permission
from campus.cache import TTLCache
from campus.database import get_session
from campus.dependencies import get_rankings_cache

router = APIRouter(prefix="/api/v1", tags=["Attendance"])


@router.post("/attendance", response_model=AttendanceResultResponse)
async def post_attendance(
    body: AttendanceCreate,
    user: Principal = Depends(require(Permission.SUBMIT_WORK)),
    db: AsyncSession = Depends(get_session),
    cache: TTLCache | None = Depends(get_rankings_cache),
):
    """Mark attendance for a class and leave feedback."""
    outcome = await mark_attendance(
        db,
        student_id=user.uid,
        student_name=body.student_name or user.name or user.uid,
        student_gen=body.student_gen,
        class_id=body.class_id,
        class_name=body.class_name,
        learned=body.learned,
        challenged=body.challenged,
        questions=body.questions,
        cache=cache,
    )
    if not outcome.success:
        return JSONResponse(status_code=500, content=asdict(outcome))
    return AttendanceResultResponse(**asdict(outcome))


@router.get("/attendance", response_model=list[AttendanceRecordResponse])
async def get_attendance(
    class_id: str | None = Query(None),
    gen: str | None = Query(None),
    student_id: str | None = Query(None),
    user: Principal = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    """Attendance records. Students only see their own."""
    if not user.can(Permission.VIEW_ALL_STUDENTS):
        student_id = user.uid
    records = await list_attendance(db, student_id, class_id, gen)
    return [
        AttendanceRecordResponse(
            id=r.id,
            student_id=r.student_id,
            student_name=r.student_name,
            student_gen=r.student_gen,
            class_id=r.class_id,
            class_name=r.class_name,
            learned=r.learned,
            challenged=r.challenged,
            questions=r.questions,
            submitted_at=r.submitted_at,
        )
        for r in records
    ]
