"""Activity ids: the deduplication keys of point-bearing actions.

The derivation is deterministic so a revoke can always find the entry the
matching award wrote.
"""

from __future__ import annotations

import uuid
from datetime import date

CLASS_ASSIGNMENTS = "Class Assignments"
CLASS_EXERCISES = "Class Exercises"
WEEKLY_PROJECTS = "Weekly Projects"
HUNDRED_DAYS_OF_CODE = "100 Days of Code"
CLASS_ATTENDANCE = "Class Attendance"

HUNDRED_DAYS_ASSIGNMENT_ID = "100-days-of-code"
HUNDRED_DAYS_TITLE_PREFIX = "100 Days of Code - "

MANUAL_PREFIX = "manual-"
MANUAL_AWARD = f"{MANUAL_PREFIX}award"

POINT_CATEGORIES = (
    CLASS_ATTENDANCE,
    CLASS_ASSIGNMENTS,
    CLASS_EXERCISES,
    WEEKLY_PROJECTS,
    HUNDRED_DAYS_OF_CODE,
)

_GRADED_PREFIXES = {
    CLASS_ASSIGNMENTS: "graded-submission",
    CLASS_EXERCISES: "graded-exercise",
    WEEKLY_PROJECTS: "graded-project",
}


def hundred_days_date(assignment_title: str) -> str:
    """Strip the '100 Days of Code - ' prefix, leaving the embedded date."""
    return assignment_title.replace(HUNDRED_DAYS_TITLE_PREFIX, "", 1)


def hundred_days_title(day: date | str) -> str:
    value = day.isoformat() if isinstance(day, date) else day
    return f"{HUNDRED_DAYS_TITLE_PREFIX}{value}"


def activity_id_for(point_category: str, submission_id: str, assignment_title: str = "") -> str:
    """Derive the ledger activity id for a graded submission.

    >>> activity_id_for("Class Exercises", "abc")
    'graded-exercise-abc'
    >>> activity_id_for("100 Days of Code", "abc", "100 Days of Code - 2024-01-01")
    '100-days-of-code-2024-01-01'
    """
    if point_category == HUNDRED_DAYS_OF_CODE:
        return f"{HUNDRED_DAYS_ASSIGNMENT_ID}-{hundred_days_date(assignment_title)}"
    prefix = _GRADED_PREFIXES.get(point_category, "graded-submission")
    return f"{prefix}-{submission_id}"


def attendance_activity_id(class_id: str, day: date) -> str:
    return f"attendance-{class_id}-{day.isoformat()}"


def is_manual(activity_id: str) -> bool:
    return activity_id.startswith(MANUAL_PREFIX)


def manual_activity_id(activity_id: str = MANUAL_AWARD) -> str:
    """Unique id for a manual award. Manual awards always stack."""
    return f"{activity_id}-{uuid.uuid4()}"
