"""Shared FastAPI dependencies."""

from fastapi import Request

from campus.cache import TTLCache


def get_rankings_cache(request: Request) -> TTLCache | None:
    """The app-wide leaderboard cache, if the app was built with one."""
    return getattr(request.app.state, "rankings_cache", None)
