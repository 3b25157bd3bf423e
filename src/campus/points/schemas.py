"""Pydantic models for points endpoints."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

MAX_POINTS_PER_AWARD = 1000


class AwardPointsRequest(BaseModel):
    student_id: str = Field(min_length=1)
    points: float = Field(allow_inf_nan=False, ge=-MAX_POINTS_PER_AWARD, le=MAX_POINTS_PER_AWARD)
    reason: str = Field(min_length=1)
    activity_id: str | None = None
    assignment_title: str | None = None


class RevokePointsRequest(BaseModel):
    student_id: str = Field(min_length=1)
    activity_id: str = Field(min_length=1)


class PointsResultResponse(BaseModel):
    success: bool
    message: str
    total_points: float | None = None
    activity_id: str | None = None
    duplicate: bool = False


class PointEntryResponse(BaseModel):
    id: str
    activity_id: str
    points: float
    reason: str
    assignment_title: str | None = None
    awarded_by: str | None = None
    awarded_at: datetime


class PointHistoryResponse(BaseModel):
    user_id: str
    total_points: float
    entries: list[PointEntryResponse]


class PointsAuditResponse(BaseModel):
    user_id: str
    stored_total: float
    ledger_total: float
    drift: float
    consistent: bool
