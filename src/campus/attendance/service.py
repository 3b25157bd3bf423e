"""Class attendance: store the student's reflection, award one point per class per day."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timezone

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from campus.cache import TTLCache
from campus.config import get_settings
from campus.db.models import AttendanceRecord
from campus.errors import PointsTransactionError
from campus.points.activity import CLASS_ATTENDANCE, attendance_activity_id
from campus.points.service import award_points

logger = structlog.get_logger()


@dataclass
class AttendanceOutcome:
    success: bool
    message: str
    record_id: str
    points_awarded: bool = False
    total_points: float | None = None


async def mark_attendance(
    db: AsyncSession,
    *,
    student_id: str,
    student_name: str,
    student_gen: str,
    class_id: str,
    class_name: str,
    learned: str,
    challenged: str,
    questions: str | None = None,
    today: date | None = None,
    cache: TTLCache | None = None,
) -> AttendanceOutcome:
    """Save the attendance feedback, then award the attendance point once.

    The feedback is committed first and is kept even when the award fails
    or was already made today.
    """
    day = today or datetime.now(timezone.utc).date()
    record = AttendanceRecord(
        student_id=student_id,
        student_name=student_name,
        student_gen=student_gen,
        class_id=class_id,
        class_name=class_name,
        learned=learned,
        challenged=challenged,
        questions=questions,
        submitted_at=datetime.now(timezone.utc),
    )
    db.add(record)
    await db.commit()
    record_id = record.id

    try:
        result = await award_points(
            db,
            student_id,
            get_settings().attendance_points,
            CLASS_ATTENDANCE,
            attendance_activity_id(class_id, day),
            assignment_title=f"Attendance: {class_name}",
            cache=cache,
        )
    except PointsTransactionError as e:
        return AttendanceOutcome(success=False, message=e.message, record_id=record_id)

    if result.duplicate:
        logger.info("attendance_already_marked", student_id=student_id, class_id=class_id, day=day.isoformat())
        return AttendanceOutcome(
            success=True,
            message="Attendance already marked for this session today, but your feedback was saved.",
            record_id=record_id,
            total_points=result.total_points,
        )
    return AttendanceOutcome(
        success=True,
        message="Attendance marked and 1 point awarded!",
        record_id=record_id,
        points_awarded=True,
        total_points=result.total_points,
    )


async def list_attendance(
    db: AsyncSession,
    student_id: str | None = None,
    class_id: str | None = None,
    gen: str | None = None,
) -> list[AttendanceRecord]:
    """Attendance records, newest first."""
    query = select(AttendanceRecord)
    if student_id is not None:
        query = query.where(AttendanceRecord.student_id == student_id)
    if class_id is not None:
        query = query.where(AttendanceRecord.class_id == class_id)
    if gen is not None:
        query = query.where(AttendanceRecord.student_gen == gen)
    result = await db.execute(query.order_by(AttendanceRecord.submitted_at.desc()))
    return list(result.scalars().all())
