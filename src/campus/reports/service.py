"""Student progress reports built from the points ledger.

A report's academic section is recomputed from the ledger on every refresh.
Staff-written fields (strengths, comments and so on) are never touched by a
refresh.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from campus.db.models import PointEntry, StudentReport, User
from campus.errors import ReportNotFoundError, StudentNotFoundError

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = (
    "strengths",
    "areas_for_improvement",
    "achievements",
    "recommendations",
    "teacher_comments",
)


@dataclass(frozen=True)
class ReportCategory:
    key: str
    keywords: tuple[str, ...]
    target: float


# Matched against the lower-cased ledger reason; first match wins.
REPORT_CATEGORIES = (
    ReportCategory("attendance", ("attendance",), 50),
    ReportCategory("assignments", ("assignment",), 50),
    ReportCategory("exercises", ("exercise",), 50),
    ReportCategory("weekly_projects", ("weekly project",), 50),
    ReportCategory("monthly_projects", ("monthly", "personal project"), 10),
    ReportCategory("hundred_days_of_code", ("100 days",), 50),
    ReportCategory("code_review", ("code review",), 5),
    ReportCategory("final_project", ("final project",), 10),
    ReportCategory("soft_skills", ("soft skill",), 70),
    ReportCategory("mini_demo_days", ("demo",), 5),
)


def categorize(reason: str | None) -> str | None:
    """Report category for a ledger reason, or None when nothing matches.

    >>> categorize("Class Assignments")
    'assignments'
    >>> categorize("Helped a classmate") is None
    True
    """
    text = (reason or "").lower()
    for category in REPORT_CATEGORIES:
        if any(keyword in text for keyword in category.keywords):
            return category.key
    return None


def _percentage(current: float, target: float) -> int:
    # Half rounds up.
    return math.floor(current / target * 100 + 0.5)


def academic_performance(totals_by_reason: Iterable[tuple[str, float]]) -> dict[str, dict[str, Any]]:
    """Fold (reason, points) pairs into per-category progress against each target."""
    current = {category.key: 0.0 for category in REPORT_CATEGORIES}
    for reason, points in totals_by_reason:
        key = categorize(reason)
        if key is not None:
            current[key] += float(points)

    return {
        category.key: {
            "current": current[category.key],
            "total": category.target,
            "percentage": _percentage(current[category.key], category.target),
        }
        for category in REPORT_CATEGORIES
    }


async def _ledger_totals(db: AsyncSession, student_id: str) -> list[tuple[str, float]]:
    result = await db.execute(
        select(PointEntry.reason, func.sum(PointEntry.points))
        .where(PointEntry.user_id == student_id)
        .group_by(PointEntry.reason)
    )
    return [(reason, float(total)) for reason, total in result.all()]


async def _get_student(db: AsyncSession, student_id: str) -> User:
    user = await db.get(User, student_id, populate_existing=True)
    if user is None:
        msg = "User not found"
        raise StudentNotFoundError(msg)
    return user


async def list_reports(
    db: AsyncSession,
    gen: str | None = None,
    student_id: str | None = None,
) -> list[StudentReport]:
    """Reports ordered by student name."""
    query = select(StudentReport)
    if gen is not None:
        query = query.where(StudentReport.gen == gen)
    if student_id is not None:
        query = query.where(StudentReport.student_id == student_id)
    result = await db.execute(query.order_by(StudentReport.student_name, StudentReport.student_id))
    return list(result.scalars().all())


async def get_report(db: AsyncSession, student_id: str) -> StudentReport:
    report = await db.get(StudentReport, student_id)
    if report is None:
        msg = "Report not found"
        raise ReportNotFoundError(msg)
    return report


async def create_report(db: AsyncSession, student_id: str) -> tuple[StudentReport, bool]:
    """Create a student's report from the ledger, or return the existing one.

    Returns the report and whether it was created by this call.

    Raises:
        StudentNotFoundError: no user with this id.
    """
    existing = await db.get(StudentReport, student_id)
    if existing is not None:
        return existing, False

    user = await _get_student(db, student_id)
    now = datetime.now(timezone.utc)
    report = StudentReport(
        student_id=student_id,
        student_name=user.display_name or student_id,
        gen=user.gen or "Unknown",
        email=user.email,
        total_points=float(user.total_points or 0.0),
        academics=academic_performance(await _ledger_totals(db, student_id)),
        strengths=[],
        areas_for_improvement=[],
        achievements=[],
        recommendations=[],
        teacher_comments="",
        created_at=now,
        updated_at=now,
    )
    db.add(report)
    await db.flush()
    logger.info("Created report for %s", student_id)
    return report, True


async def refresh_report(db: AsyncSession, student_id: str) -> StudentReport:
    """Recompute the academic section and total from the ledger, creating the report if needed.

    Raises:
        StudentNotFoundError: no user with this id.
    """
    report, created = await create_report(db, student_id)
    if created:
        return report

    user = await _get_student(db, student_id)
    report.academics = academic_performance(await _ledger_totals(db, student_id))
    report.total_points = float(user.total_points or 0.0)
    report.updated_at = datetime.now(timezone.utc)
    await db.flush()
    logger.info("Refreshed report for %s", student_id)
    return report


async def update_report(db: AsyncSession, student_id: str, **fields: Any) -> StudentReport:  # noqa: ANN401
    """Write the staff-maintained parts of a report."""
    report = await get_report(db, student_id)
    for name, value in fields.items():
        if name in EDITABLE_FIELDS:
            setattr(report, name, value)
    report.updated_at = datetime.now(timezone.utc)
    await db.flush()
    return report
