"""Points ledger: atomic award and revoke.

Each award writes one PointEntry and bumps users.total_points in the same
transaction. The (user_id, activity_id) unique constraint is the final
arbiter of idempotency, so two concurrent awards for one activity can never
both commit.
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from typing import Any

import structlog
from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from campus.cache import TTLCache
from campus.db.models import PointEntry, User
from campus.errors import PointsTransactionError, ValidationFailed
from campus.points.activity import MANUAL_AWARD, is_manual, manual_activity_id
from campus.rankings.service import invalidate_rankings
from campus.sync.outbox import TOPIC_POINTS_AWARDED, TOPIC_POINTS_REVOKED, enqueue

logger = structlog.get_logger()

AWARDED = "Points awarded successfully."
ALREADY_AWARDED = "Points for this activity have already been awarded"
REVOKED = "Points revoked successfully."
ALREADY_REVOKED = "Points already revoked or never existed."


@dataclass
class PointsResult:
    """Outcome envelope of an award or revoke."""

    success: bool
    message: str
    total_points: float | None = None
    activity_id: str | None = None
    duplicate: bool = False

    def as_dict(self) -> dict[str, Any]:
        return asdict(self)


async def get_entry(db: AsyncSession, user_id: str, activity_id: str) -> PointEntry | None:
    result = await db.execute(
        select(PointEntry).where(
            PointEntry.user_id == user_id,
            PointEntry.activity_id == activity_id,
        )
    )
    return result.scalar_one_or_none()


async def has_been_awarded(db: AsyncSession, user_id: str, activity_id: str) -> bool:
    """Whether a ledger entry exists for this (user, activity)."""
    return await get_entry(db, user_id, activity_id) is not None


async def _lock_user(db: AsyncSession, user_id: str) -> User | None:
    result = await db.execute(
        select(User)
        .where(User.uid == user_id)
        .with_for_update()
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def award_points(
    db: AsyncSession,
    student_id: str,
    points: float,
    reason: str,
    activity_id: str,
    *,
    awarded_by: str | None = None,
    assignment_title: str | None = None,
    cache: TTLCache | None = None,
) -> PointsResult:
    """Award points for one activity, at most once.

    Returns success=False with duplicate=True when the activity was already
    awarded; callers treat that as a non-fatal outcome. Activity ids starting
    with ``manual-`` get a random suffix and always stack.

    Raises:
        ValidationFailed: points is NaN or infinite.
        PointsTransactionError: the transaction aborted; nothing was applied.
    """
    if not math.isfinite(points):
        msg = "Points must be a finite number."
        raise ValidationFailed(msg)
    if is_manual(activity_id):
        activity_id = manual_activity_id(activity_id)

    try:
        existing = await get_entry(db, student_id, activity_id)
        if existing is not None:
            user = await db.get(User, student_id, populate_existing=True)
            logger.info("points_award_duplicate", student_id=student_id, activity_id=activity_id)
            return PointsResult(
                success=False,
                message=ALREADY_AWARDED,
                total_points=float(user.total_points) if user else 0.0,
                activity_id=activity_id,
                duplicate=True,
            )

        user = await _lock_user(db, student_id)
        if user is None:
            # First award for this student: start the aggregate at zero.
            user = User(uid=student_id, role="student", total_points=0.0)
            db.add(user)
            await db.flush()

        current_total = float(user.total_points or 0.0)
        now = datetime.now(timezone.utc)

        await db.execute(
            update(User)
            .where(User.uid == student_id)
            .values(total_points=User.total_points + points, updated_at=now)
        )
        db.add(PointEntry(
            user_id=student_id,
            activity_id=activity_id,
            points=points,
            reason=reason,
            assignment_title=assignment_title or reason,
            awarded_by=awarded_by,
            awarded_at=now,
        ))
        enqueue(db, TOPIC_POINTS_AWARDED, {
            "user_id": student_id,
            "activity_id": activity_id,
            "points": points,
            "reason": reason,
            "awarded_by": awarded_by,
        })
        await db.commit()
    except IntegrityError as exc:
        await db.rollback()
        if await has_been_awarded(db, student_id, activity_id):
            logger.info("points_award_race_lost", student_id=student_id, activity_id=activity_id)
            user = await db.get(User, student_id, populate_existing=True)
            return PointsResult(
                success=False,
                message=ALREADY_AWARDED,
                total_points=float(user.total_points) if user else 0.0,
                activity_id=activity_id,
                duplicate=True,
            )
        logger.error("points_award_integrity_error", student_id=student_id, activity_id=activity_id, exc_info=exc)
        msg = "Could not process points. Reason: integrity check failed"
        raise PointsTransactionError(msg) from exc
    except SQLAlchemyError as exc:
        await db.rollback()
        logger.error("points_award_failed", student_id=student_id, activity_id=activity_id, exc_info=exc)
        msg = f"Could not process points. Reason: {exc.__class__.__name__}"
        raise PointsTransactionError(msg) from exc

    invalidate_rankings(cache)
    logger.info(
        "points_awarded",
        student_id=student_id,
        activity_id=activity_id,
        points=points,
        awarded_by=awarded_by,
    )
    return PointsResult(
        success=True,
        message=AWARDED,
        total_points=current_total + points,
        activity_id=activity_id,
    )


async def award_manual_points(
    db: AsyncSession,
    student_id: str,
    points: float,
    reason: str,
    *,
    awarded_by: str,
    cache: TTLCache | None = None,
) -> PointsResult:
    """Staff-issued award outside any graded activity. Always stacks."""
    return await award_points(
        db,
        student_id,
        points,
        reason,
        MANUAL_AWARD,
        awarded_by=awarded_by,
        assignment_title=reason,
        cache=cache,
    )


async def revoke_points(
    db: AsyncSession,
    student_id: str,
    activity_id: str,
    *,
    cache: TTLCache | None = None,
) -> PointsResult:
    """Reverse the award for one activity.

    The amount reversed is the one stored on the ledger entry. Revoking an
    activity that has no entry succeeds without changing anything.

    Raises:
        PointsTransactionError: the transaction aborted; nothing was applied.
    """
    try:
        entry = await get_entry(db, student_id, activity_id)
        if entry is None:
            user = await db.get(User, student_id, populate_existing=True)
            return PointsResult(
                success=True,
                message=ALREADY_REVOKED,
                total_points=float(user.total_points) if user else 0.0,
                activity_id=activity_id,
            )

        user = await _lock_user(db, student_id)
        current_total = float(user.total_points or 0.0) if user else 0.0
        amount = float(entry.points)
        entry_id = entry.id

        # Delete by id first: only the revoke that actually removes the row decrements.
        deleted = await db.execute(delete(PointEntry).where(PointEntry.id == entry_id))
        if deleted.rowcount == 0:
            await db.rollback()
            return PointsResult(
                success=True,
                message=ALREADY_REVOKED,
                total_points=current_total,
                activity_id=activity_id,
            )

        await db.execute(
            update(User)
            .where(User.uid == student_id)
            .values(total_points=User.total_points - amount, updated_at=datetime.now(timezone.utc))
        )
        enqueue(db, TOPIC_POINTS_REVOKED, {
            "user_id": student_id,
            "activity_id": activity_id,
            "points": amount,
        })
        await db.commit()
    except SQLAlchemyError as exc:
        await db.rollback()
        logger.error("points_revoke_failed", student_id=student_id, activity_id=activity_id, exc_info=exc)
        msg = f"Could not process points. Reason: {exc.__class__.__name__}"
        raise PointsTransactionError(msg) from exc

    invalidate_rankings(cache)
    logger.info("points_revoked", student_id=student_id, activity_id=activity_id, points=amount)
    return PointsResult(
        success=True,
        message=REVOKED,
        total_points=current_total - amount,
        activity_id=activity_id,
    )


async def get_total(db: AsyncSession, user_id: str) -> float:
    """Stored aggregate total (0 for unknown users)."""
    user = await db.get(User, user_id, populate_existing=True)
    return float(user.total_points) if user else 0.0


async def get_point_history(db: AsyncSession, user_id: str) -> tuple[list[PointEntry], float]:
    """Ledger entries newest first, plus the stored total."""
    result = await db.execute(
        select(PointEntry)
        .where(PointEntry.user_id == user_id)
        .order_by(PointEntry.awarded_at.desc())
    )
    entries = list(result.scalars().all())
    return entries, await get_total(db, user_id)


async def audit_total(db: AsyncSession, user_id: str) -> dict[str, float]:
    """Compare the stored total with a re-sum of the ledger. Read-only."""
    result = await db.execute(
        select(func.coalesce(func.sum(PointEntry.points), 0.0)).where(PointEntry.user_id == user_id)
    )
    ledger_total = float(result.scalar_one())
    stored_total = await get_total(db, user_id)
    drift = round(stored_total - ledger_total, 6)
    if drift:
        logger.warning("points_drift_detected", user_id=user_id, stored=stored_total, ledger=ledger_total)
    return {"stored_total": stored_total, "ledger_total": ledger_total, "drift": drift}
