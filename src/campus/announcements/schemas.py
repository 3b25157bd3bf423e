"""Pydantic models for announcement endpoints."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class AnnouncementCreate(BaseModel):
    title: str = Field(min_length=1)
    content: str = Field(min_length=1)
    target_gen: str = Field(min_length=1)
    image_url: str | None = None


class AnnouncementUpdate(BaseModel):
    title: str | None = Field(default=None, min_length=1)
    content: str | None = Field(default=None, min_length=1)
    target_gen: str | None = Field(default=None, min_length=1)
    image_url: str | None = None


class AnnouncementResponse(BaseModel):
    id: str
    title: str
    content: str
    author: str
    author_id: str
    target_gen: str
    image_url: str | None = None
    created_at: datetime
    updated_at: datetime
