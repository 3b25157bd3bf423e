"""Leaderboard of students by total points."""

from __future__ import annotations

from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from campus.cache import TTLCache
from campus.db.models import User

CACHE_PREFIX = "rankings:"


def rank_students(rows: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Assign 1-indexed ranks. Equal totals share a rank (1, 2, 2, 4)."""
    ordered = sorted(rows, key=lambda r: (-r["total_points"], (r.get("display_name") or "").lower(), r["uid"]))
    ranked: list[dict[str, Any]] = []
    previous_total: float | None = None
    previous_rank = 0
    for position, row in enumerate(ordered, start=1):
        rank = previous_rank if row["total_points"] == previous_total else position
        ranked.append({**row, "rank": rank})
        previous_total = row["total_points"]
        previous_rank = rank
    return ranked


async def _load_leaderboard(db: AsyncSession, gen: str | None, limit: int) -> list[dict[str, Any]]:
    query = select(User).where(User.role == "student")
    if gen is not None:
        query = query.where(User.gen == gen)
    result = await db.execute(query)
    rows = [
        {
            "uid": u.uid,
            "display_name": u.display_name,
            "gen": u.gen,
            "total_points": float(u.total_points or 0.0),
        }
        for u in result.scalars().all()
    ]
    return rank_students(rows)[:limit]


async def leaderboard(
    db: AsyncSession,
    cache: TTLCache | None = None,
    gen: str | None = None,
    limit: int = 50,
    ttl: float | None = None,
) -> list[dict[str, Any]]:
    """Ranked students, optionally limited to one gen. Cached when a cache is given."""
    if cache is None:
        return await _load_leaderboard(db, gen, limit)
    key = f"{CACHE_PREFIX}{gen or '*'}:{limit}"
    return await cache.get_or_set(key, lambda: _load_leaderboard(db, gen, limit), ttl)


def invalidate_rankings(cache: TTLCache | None) -> None:
    """Drop cached leaderboards after any change to point totals."""
    if cache is not None:
        cache.delete_prefix(CACHE_PREFIX)
