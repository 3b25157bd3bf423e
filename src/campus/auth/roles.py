"""Closed set of user roles and the permission checks built on them.

Every authorization decision goes through ``can``; handlers never compare
role strings themselves.
"""

from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    STUDENT = "student"
    TEACHER = "teacher"
    ADMIN = "admin"

    @classmethod
    def parse(cls, value: str | None) -> Role:
        """Parse a role claim. Raises ValueError for anything unknown."""
        if value is None:
            msg = "Token has no role claim"
            raise ValueError(msg)
        try:
            return cls(value.lower())
        except ValueError:
            msg = f"Unknown role '{value}'"
            raise ValueError(msg) from None


class Permission(str, Enum):
    MANAGE_POINTS = "manage_points"
    GRADE_SUBMISSIONS = "grade_submissions"
    MANAGE_COURSEWORK = "manage_coursework"
    MANAGE_ROADMAP = "manage_roadmap"
    MANAGE_MATERIALS = "manage_materials"
    VIEW_ALL_STUDENTS = "view_all_students"
    MANAGE_FEES = "manage_fees"
    AUDIT_POINTS = "audit_points"
    MANAGE_REPORTS = "manage_reports"
    MANAGE_ANNOUNCEMENTS = "manage_announcements"
    SUBMIT_WORK = "submit_work"


_STAFF = frozenset({
    Permission.MANAGE_POINTS,
    Permission.GRADE_SUBMISSIONS,
    Permission.MANAGE_COURSEWORK,
    Permission.MANAGE_ROADMAP,
    Permission.MANAGE_MATERIALS,
    Permission.VIEW_ALL_STUDENTS,
    Permission.MANAGE_REPORTS,
    Permission.MANAGE_ANNOUNCEMENTS,
})


def permissions_for(role: Role) -> frozenset[Permission]:
    """Return the permission set granted to a role."""
    match role:
        case Role.STUDENT:
            return frozenset({Permission.SUBMIT_WORK})
        case Role.TEACHER:
            return _STAFF
        case Role.ADMIN:
            return _STAFF | {Permission.MANAGE_FEES, Permission.AUDIT_POINTS}


def can(role: Role, permission: Permission) -> bool:
    return permission in permissions_for(role)
