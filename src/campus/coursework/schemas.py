"""Pydantic models for coursework endpoints."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class CourseworkCreate(BaseModel):
    title: str = Field(min_length=1)
    description: str = Field(min_length=1)
    target_gen: str = Field(min_length=1)
    subject: str | None = None
    week: str | None = None
    due_date: datetime | None = None


class CourseworkUpdate(BaseModel):
    title: str | None = None
    description: str | None = None
    target_gen: str | None = None
    subject: str | None = None
    week: str | None = None
    due_date: datetime | None = None


class CourseworkResponse(BaseModel):
    id: str
    kind: str
    title: str
    description: str
    target_gen: str
    author_id: str
    subject: str | None = None
    week: str | None = None
    due_date: datetime | None = None
    created_at: datetime
    updated_at: datetime
