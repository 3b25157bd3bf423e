"""Closed role set and permission checks."""

from __future__ import annotations

import pytest

from campus.auth.roles import Permission, Role, can, permissions_for


class TestRoleParse:
    @pytest.mark.parametrize("value", ["student", "teacher", "admin", "ADMIN"])
    def test_known_roles(self, value):
        assert Role.parse(value).value == value.lower()

    @pytest.mark.parametrize("value", ["superuser", "", None])
    def test_unknown_roles_rejected(self, value):
        with pytest.raises(ValueError):
            Role.parse(value)


class TestPermissions:
    def test_student_can_only_submit(self):
        assert permissions_for(Role.STUDENT) == frozenset({Permission.SUBMIT_WORK})

    @pytest.mark.parametrize("role", [Role.TEACHER, Role.ADMIN])
    def test_staff_manage_points_and_grade(self, role):
        assert can(role, Permission.MANAGE_POINTS)
        assert can(role, Permission.GRADE_SUBMISSIONS)

    def test_fees_and_audit_are_admin_only(self):
        assert can(Role.ADMIN, Permission.MANAGE_FEES)
        assert can(Role.ADMIN, Permission.AUDIT_POINTS)
        assert not can(Role.TEACHER, Permission.MANAGE_FEES)
        assert not can(Role.TEACHER, Permission.AUDIT_POINTS)

    def test_student_cannot_award(self):
        assert not can(Role.STUDENT, Permission.MANAGE_POINTS)

    def test_reports_and_announcements_are_staff_only(self):
        for permission in (Permission.MANAGE_REPORTS, Permission.MANAGE_ANNOUNCEMENTS):
            assert can(Role.TEACHER, permission)
            assert can(Role.ADMIN, permission)
            assert not can(Role.STUDENT, permission)
