"""Points API endpoints: 4 routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from campus.auth.dependencies import Principal, get_current_user, require
from campus.auth.roles import Permission
from campus.cache import TTLCache
from campus.database import get_session
from campus.dependencies import get_rankings_cache
from campus.errors import PointsTransactionError
from campus.points.activity import MANUAL_PREFIX
from campus.points.schemas import (
    AwardPointsRequest,
    PointEntryResponse,
    PointHistoryResponse,
    PointsAuditResponse,
    PointsResultResponse,
    RevokePointsRequest,
)
from campus.points.service import (
    audit_total,
    award_manual_points,
    award_points,
    get_point_history,
    revoke_points,
)

router = APIRouter(prefix="/api/v1", tags=["Points"])


def _failure(exc: PointsTransactionError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": exc.message},
    )


@router.post("/points/award", response_model=PointsResultResponse)
async def award(
    body: AwardPointsRequest,
    user: Principal = Depends(require(Permission.MANAGE_POINTS)),
    db: AsyncSession = Depends(get_session),
    cache: TTLCache | None = Depends(get_rankings_cache),
):
    """Award points for an activity. Ids starting with ``manual-`` (or no id) stack."""
    try:
        if body.activity_id is None or body.activity_id == MANUAL_PREFIX:
            result = await award_manual_points(
                db, body.student_id, body.points, body.reason, awarded_by=user.uid, cache=cache,
            )
        else:
            result = await award_points(
                db,
                body.student_id,
                body.points,
                body.reason,
                body.activity_id,
                awarded_by=user.uid,
                assignment_title=body.assignment_title,
                cache=cache,
            )
    except PointsTransactionError as e:
        return _failure(e)
    return PointsResultResponse(**result.as_dict())


@router.post("/points/revoke", response_model=PointsResultResponse)
async def revoke(
    body: RevokePointsRequest,
    _user: Principal = Depends(require(Permission.MANAGE_POINTS)),
    db: AsyncSession = Depends(get_session),
    cache: TTLCache | None = Depends(get_rankings_cache),
):
    """Revoke the points awarded for one activity."""
    try:
        result = await revoke_points(db, body.student_id, body.activity_id, cache=cache)
    except PointsTransactionError as e:
        return _failure(e)
    return PointsResultResponse(**result.as_dict())


@router.get("/points/{user_id}", response_model=PointHistoryResponse)
async def history(
    user_id: str,
    user: Principal = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    """Point history and total. Students may only read their own."""
    if user.uid != user_id and not user.can(Permission.VIEW_ALL_STUDENTS):
        raise HTTPException(status_code=403, detail="You can only view your own points.")

    entries, total = await get_point_history(db, user_id)
    return PointHistoryResponse(
        user_id=user_id,
        total_points=total,
        entries=[
            PointEntryResponse(
                id=e.id,
                activity_id=e.activity_id,
                points=e.points,
                reason=e.reason,
                assignment_title=e.assignment_title,
                awarded_by=e.awarded_by,
                awarded_at=e.awarded_at,
            )
            for e in entries
        ],
    )


@router.get("/points/{user_id}/audit", response_model=PointsAuditResponse)
async def audit(
    user_id: str,
    _user: Principal = Depends(require(Permission.AUDIT_POINTS)),
    db: AsyncSession = Depends(get_session),
):
    """Compare the stored total with the ledger sum. Reports drift, fixes nothing."""
    report = await audit_total(db, user_id)
    return PointsAuditResponse(user_id=user_id, consistent=report["drift"] == 0, **report)
