"""Roadmap unlock engine.

Pure functions of (completed week ids, curriculum). A gen sees every week up
to the last one its teacher marked complete, plus exactly one week after it.
Nothing here is cached or persisted; callers recompute on every request.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import NamedTuple, Protocol, TypeVar

from campus.roadmap.curriculum import RoadmapSubject

UNKNOWN_WEEK_ORDER = 999999


class WeekRef(NamedTuple):
    subject: str
    week: str

    @property
    def key(self) -> str:
        return week_key(self.subject, self.week)


class HasWeek(Protocol):
    subject: str
    week: str


M = TypeVar("M", bound=HasWeek)


def week_key(subject: str, week: str) -> str:
    """Composite id of a roadmap week.

    >>> week_key("HTML", "Week 1")
    'HTML-Week 1'
    """
    return f"{subject}-{week}"


def weeks_in_order(roadmap: Sequence[RoadmapSubject]) -> list[WeekRef]:
    """Every week of every subject, in declaration order."""
    return [WeekRef(subject.title, week.title) for subject in roadmap for week in subject.weeks]


def roadmap_order_map(roadmap: Sequence[RoadmapSubject]) -> dict[str, int]:
    return {ref.key: index for index, ref in enumerate(weeks_in_order(roadmap))}


def last_completed_index(completed: Iterable[str], order: Sequence[WeekRef]) -> int:
    """Position of the furthest completed week, or -1 when none is completed."""
    done = set(completed)
    last = -1
    for index, ref in enumerate(order):
        if ref.key in done:
            last = index
    return last


def unlocked_week_keys(completed: Iterable[str], roadmap: Sequence[RoadmapSubject]) -> set[str]:
    """Week ids visible to a gen.

    Weeks before the furthest completed week count as unlocked even if they
    were never marked, since completion is monotone in practice.
    """
    order = weeks_in_order(roadmap)
    if not order:
        return set()
    last = last_completed_index(completed, order)
    # Up to and including the last completed week, then one lookahead.
    return {ref.key for ref in order[: last + 2]}


def current_week_key(completed: Iterable[str], roadmap: Sequence[RoadmapSubject]) -> str | None:
    """The lookahead week, or None once every week is completed."""
    order = weeks_in_order(roadmap)
    nxt = last_completed_index(completed, order) + 1
    if nxt < len(order):
        return order[nxt].key
    return None


def unlocked_materials(
    completed: Iterable[str],
    roadmap: Sequence[RoadmapSubject],
    materials: Iterable[M],
) -> list[M]:
    """Materials whose week is unlocked, in their original order."""
    unlocked = unlocked_week_keys(completed, roadmap)
    return [m for m in materials if week_key(m.subject, m.week) in unlocked]


def sort_materials_by_roadmap(materials: Iterable[M], roadmap: Sequence[RoadmapSubject]) -> list[M]:
    """Stable sort by roadmap position. Materials of unknown weeks go last."""
    order = roadmap_order_map(roadmap)
    return sorted(materials, key=lambda m: order.get(week_key(m.subject, m.week), UNKNOWN_WEEK_ORDER))


def is_known_week(week_id: str, roadmap: Sequence[RoadmapSubject]) -> bool:
    return week_id in roadmap_order_map(roadmap)
