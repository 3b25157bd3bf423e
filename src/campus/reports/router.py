"""Student report API endpoints: 5 routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from campus.auth.dependencies import Principal, get_current_user, require
from campus.auth.roles import Permission
from campus.database import get_session
from campus.db.models import StudentReport
from campus.errors import ReportNotFoundError, StudentNotFoundError
from campus.reports.schemas import CategoryProgress, ReportCreate, ReportUpdate, StudentReportResponse
from campus.reports.service import create_report, get_report, list_reports, refresh_report, update_report

router = APIRouter(prefix="/api/v1", tags=["Student Reports"])

_staff = require(Permission.MANAGE_REPORTS)


def _to_response(r: StudentReport) -> StudentReportResponse:
    return StudentReportResponse(
        student_id=r.student_id,
        student_name=r.student_name,
        gen=r.gen,
        email=r.email,
        total_points=r.total_points,
        academics={key: CategoryProgress(**value) for key, value in r.academics.items()},
        strengths=list(r.strengths),
        areas_for_improvement=list(r.areas_for_improvement),
        achievements=list(r.achievements),
        recommendations=list(r.recommendations),
        teacher_comments=r.teacher_comments,
        created_at=r.created_at,
        updated_at=r.updated_at,
    )


@router.get("/student-reports", response_model=list[StudentReportResponse])
async def list_student_reports(
    gen: str | None = Query(None),
    student_id: str | None = Query(None),
    _user: Principal = Depends(require(Permission.VIEW_ALL_STUDENTS)),
    db: AsyncSession = Depends(get_session),
):
    """All reports, optionally for one gen or one student."""
    return [_to_response(r) for r in await list_reports(db, gen, student_id)]


@router.post("/student-reports", response_model=StudentReportResponse)
async def create_student_report(
    body: ReportCreate,
    _user: Principal = Depends(_staff),
    db: AsyncSession = Depends(get_session),
):
    """Create a student's report. An existing report is returned unchanged."""
    try:
        report, created = await create_report(db, body.student_id)
    except StudentNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message) from e
    if created:
        await db.commit()
    return _to_response(report)


@router.get("/student-reports/{student_id}", response_model=StudentReportResponse)
async def get_student_report(
    student_id: str,
    user: Principal = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    """One report. Students may only read their own."""
    if user.uid != student_id and not user.can(Permission.VIEW_ALL_STUDENTS):
        raise HTTPException(status_code=403, detail="You can only view your own report.")
    try:
        report = await get_report(db, student_id)
    except ReportNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message) from e
    return _to_response(report)


@router.patch("/student-reports/{student_id}", response_model=StudentReportResponse)
async def update_student_report(
    student_id: str,
    body: ReportUpdate,
    _user: Principal = Depends(_staff),
    db: AsyncSession = Depends(get_session),
):
    try:
        report = await update_report(db, student_id, **body.model_dump(exclude_none=True))
    except ReportNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message) from e
    await db.commit()
    return _to_response(report)


@router.post("/student-reports/{student_id}/refresh", response_model=StudentReportResponse)
async def refresh_student_report(
    student_id: str,
    _user: Principal = Depends(_staff),
    db: AsyncSession = Depends(get_session),
):
    """Recompute a report's academic section from the points ledger."""
    try:
        report = await refresh_report(db, student_id)
    except StudentNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message) from e
    await db.commit()
    return _to_response(report)
