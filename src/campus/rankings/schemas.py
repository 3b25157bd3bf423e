"""Pydantic response models for the leaderboard."""

from __future__ import annotations

from pydantic import BaseModel


class RankingEntry(BaseModel):
    rank: int
    uid: str
    display_name: str | None = None
    gen: str | None = None
    total_points: float


class RankingsResponse(BaseModel):
    gen: str | None = None
    entries: list[RankingEntry]
