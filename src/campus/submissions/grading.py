"""Grading workflow: award points, grade, notify; revoke before delete.

Order matters. Points are awarded before the grade is written, so a grade
is never recorded for a submission whose award failed. A duplicate award
still counts as success: the points are already there.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from campus.cache import TTLCache
from campus.config import get_settings
from campus.db.models import Submission
from campus.errors import PointsTransactionError
from campus.notifications.service import notify
from campus.points.activity import HUNDRED_DAYS_OF_CODE, activity_id_for
from campus.points.service import award_points, revoke_points
from campus.submissions.service import delete_submission_record, get_submission
from campus.sync.outbox import TOPIC_SUBMISSION_GRADED, enqueue

logger = structlog.get_logger()

DEFAULT_GRADE = "Complete"


@dataclass
class GradingOutcome:
    success: bool
    message: str
    submission: Submission | None = None
    total_points: float | None = None
    points_awarded: bool = False


def points_for(point_category: str) -> float:
    """Points a graded submission is worth."""
    settings = get_settings()
    if point_category == HUNDRED_DAYS_OF_CODE:
        return settings.hundred_days_points
    return settings.graded_points


def submission_activity_id(submission: Submission) -> str:
    return activity_id_for(submission.point_category, submission.id, submission.assignment_title)


async def grade_submission(
    db: AsyncSession,
    submission_id: str,
    *,
    grader_id: str,
    grader_name: str | None = None,
    grade: str | None = None,
    feedback: str | None = None,
) -> Submission:
    """Record a grade and notify the student. Awards nothing.

    Raises:
        SubmissionNotFoundError: no such submission.
    """
    submission = await get_submission(db, submission_id)
    submission.grade = grade or DEFAULT_GRADE
    submission.feedback = feedback or ""
    submission.graded_by = grader_id
    submission.graded_at = datetime.now(timezone.utc)
    enqueue(db, TOPIC_SUBMISSION_GRADED, {
        "submission_id": submission.id,
        "student_id": submission.student_id,
        "grade": submission.grade,
        "graded_by": grader_id,
    })
    await db.commit()
    logger.info("submission_graded", submission_id=submission.id, grader_id=grader_id)

    delivered = await notify(
        db,
        submission.student_id,
        f"Graded: {submission.assignment_title}",
        f"Your submission has been graded by {grader_name or 'your teacher'}.",
        "/submissions",
    )
    if delivered is None:
        # The failed notification rolled the session back and expired the row.
        await db.refresh(submission)
    return submission


async def award_and_grade(
    db: AsyncSession,
    submission_id: str,
    *,
    grader_id: str,
    grader_name: str | None = None,
    grade: str | None = None,
    feedback: str | None = None,
    cache: TTLCache | None = None,
) -> GradingOutcome:
    """Award the submission's points, then grade it.

    Raises:
        SubmissionNotFoundError: no such submission.
    """
    submission = await get_submission(db, submission_id)
    activity_id = submission_activity_id(submission)
    points = points_for(submission.point_category)

    try:
        result = await award_points(
            db,
            submission.student_id,
            points,
            submission.point_category,
            activity_id,
            awarded_by=grader_id,
            assignment_title=submission.assignment_title,
            cache=cache,
        )
    except PointsTransactionError as e:
        logger.warning("grading_award_failed", submission_id=submission_id, error=e.message)
        return GradingOutcome(success=False, message=e.message)

    graded = await grade_submission(
        db,
        submission_id,
        grader_id=grader_id,
        grader_name=grader_name,
        grade=grade,
        feedback=feedback,
    )
    if result.duplicate:
        message = "Submission graded. Points were already awarded for this activity."
    else:
        message = "Submission graded and points awarded."
    return GradingOutcome(
        success=True,
        message=message,
        submission=graded,
        total_points=result.total_points,
        points_awarded=result.success,
    )


async def delete_submission(
    db: AsyncSession,
    submission_id: str,
    *,
    cache: TTLCache | None = None,
) -> GradingOutcome:
    """Delete a submission, revoking its points first if it was graded.

    A failed revoke leaves the submission in place.

    Raises:
        SubmissionNotFoundError: no such submission.
    """
    submission = await get_submission(db, submission_id)
    revoked = None
    if submission.grade is not None:
        try:
            revoked = await revoke_points(
                db, submission.student_id, submission_activity_id(submission), cache=cache,
            )
        except PointsTransactionError as e:
            logger.warning("submission_delete_revoke_failed", submission_id=submission_id, error=e.message)
            return GradingOutcome(success=False, message=e.message)
        submission = await get_submission(db, submission_id)

    await delete_submission_record(db, submission)
    await db.commit()
    logger.info("submission_deleted", submission_id=submission_id, revoked=revoked is not None)
    return GradingOutcome(
        success=True,
        message="Submission deleted.",
        total_points=revoked.total_points if revoked else None,
    )
