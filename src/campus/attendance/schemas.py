"""Pydantic models for attendance endpoints."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class AttendanceCreate(BaseModel):
    student_gen: str = Field(min_length=1)
    student_name: str | None = None
    class_id: str = Field(min_length=1)
    class_name: str = Field(min_length=1)
    learned: str = Field(min_length=1)
    challenged: str = Field(min_length=1)
    questions: str | None = None


class AttendanceResultResponse(BaseModel):
    success: bool
    message: str
    record_id: str
    points_awarded: bool = False
    total_points: float | None = None


class AttendanceRecordResponse(BaseModel):
    id: str
    student_id: str
    student_name: str
    student_gen: str
    class_id: str
    class_name: str
    learned: str
    challenged: str
    questions: str | None = None
    submitted_at: datetime
