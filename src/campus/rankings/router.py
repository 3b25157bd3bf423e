"""Leaderboard API endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from campus.auth.dependencies import Principal, get_current_user
from campus.cache import TTLCache
from campus.config import get_settings
from campus.database import get_session
from campus.dependencies import get_rankings_cache
from campus.rankings.schemas import RankingEntry, RankingsResponse
from campus.rankings.service import leaderboard

router = APIRouter(prefix="/api/v1", tags=["Rankings"])


@router.get("/rankings", response_model=RankingsResponse)
async def get_rankings(
    gen: str | None = Query(None),
    limit: int = Query(50, ge=1, le=500),
    _user: Principal = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
    cache: TTLCache | None = Depends(get_rankings_cache),
):
    """Students ranked by total points."""
    rows = await leaderboard(db, cache, gen, limit, ttl=get_settings().rankings_cache_ttl_seconds)
    return RankingsResponse(gen=gen, entries=[RankingEntry(**r) for r in rows])
