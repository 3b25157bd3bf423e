"""Pydantic models for student report endpoints."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class CategoryProgress(BaseModel):
    current: float
    total: float
    percentage: int


class ReportCreate(BaseModel):
    student_id: str = Field(min_length=1)


class ReportUpdate(BaseModel):
    strengths: list[str] | None = None
    areas_for_improvement: list[str] | None = None
    achievements: list[str] | None = None
    recommendations: list[str] | None = None
    teacher_comments: str | None = None


class StudentReportResponse(BaseModel):
    student_id: str
    student_name: str
    gen: str
    email: str | None = None
    total_points: float
    academics: dict[str, CategoryProgress]
    strengths: list[str]
    areas_for_improvement: list[str]
    achievements: list[str]
    recommendations: list[str]
    teacher_comments: str
    created_at: datetime
    updated_at: datetime
