"""Pydantic models for roadmap and material endpoints."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class TopicResponse(BaseModel):
    id: str
    title: str


class WeekResponse(BaseModel):
    id: str
    title: str
    topics: list[TopicResponse]
    completed: bool = False
    unlocked: bool = False
    current: bool = False


class SubjectResponse(BaseModel):
    title: str
    duration: str
    weeks: list[WeekResponse]


class RoadmapResponse(BaseModel):
    gen: str
    subjects: list[SubjectResponse]
    current_week: str | None = None


class WeekStatusUpdate(BaseModel):
    gen: str = Field(min_length=1)
    completed: bool


class WeekStatusResponse(BaseModel):
    week_id: str
    gen: str
    completed: bool
    updated_by: str | None = None
    updated_at: datetime


class MaterialCreate(BaseModel):
    title: str = Field(min_length=1)
    subject: str = Field(min_length=1)
    week: str = Field(min_length=1)
    video_url: str | None = None
    slides_url: str | None = None
    order: int | None = None


class MaterialUpdate(BaseModel):
    title: str | None = None
    subject: str | None = None
    week: str | None = None
    video_url: str | None = None
    slides_url: str | None = None
    order: int | None = None


class MaterialResponse(BaseModel):
    id: str
    title: str
    subject: str
    week: str
    video_url: str | None = None
    slides_url: str | None = None
    order: int | None = None
    created_at: datetime


class MaterialStatusResponse(BaseModel):
    id: str
    title: str
    subject: str
    week: str
    gen: str
    is_unlocked: bool
    is_current: bool
    view_count: int = 0
    last_viewed_at: datetime | None = None


class MaterialViewCreate(BaseModel):
    gen: str | None = None
    duration: int = Field(default=0, ge=0)


class MaterialViewUpdate(BaseModel):
    completed: bool
    duration: int = Field(ge=0)


class MaterialViewResponse(BaseModel):
    id: str
    material_id: str
    student_id: str
    gen: str | None = None
    viewed_at: datetime
    duration: int
    completed: bool
