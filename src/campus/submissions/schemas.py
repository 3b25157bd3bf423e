"""Pydantic models for submission endpoints."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class SubmissionCreate(BaseModel):
    assignment_id: str = Field(min_length=1)
    assignment_title: str = ""
    point_category: str = Field(min_length=1)
    student_gen: str = Field(min_length=1)
    student_name: str | None = None
    submission_link: str = ""
    submission_notes: str = ""
    image_url: str = ""


class GradeRequest(BaseModel):
    grade: str | None = None
    feedback: str | None = None


class SubmissionResponse(BaseModel):
    id: str
    student_id: str
    student_name: str
    student_gen: str
    assignment_id: str
    assignment_title: str
    submission_link: str
    submission_notes: str
    image_url: str
    point_category: str
    grade: str | None = None
    feedback: str | None = None
    graded_by: str | None = None
    graded_at: datetime | None = None
    submitted_at: datetime


class SubmissionListResponse(BaseModel):
    submissions: list[SubmissionResponse]
    total: int


class GradingResponse(BaseModel):
    success: bool
    message: str
    total_points: float | None = None
    points_awarded: bool = False
    submission: SubmissionResponse | None = None
