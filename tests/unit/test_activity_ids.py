"""Activity id derivation for graded work, attendance and manual awards."""

from __future__ import annotations

from datetime import date

import pytest

from campus.points.activity import (
    activity_id_for,
    attendance_activity_id,
    hundred_days_date,
    hundred_days_title,
    is_manual,
    manual_activity_id,
)
from campus.submissions.service import dedup_key, is_hundred_days


class TestActivityIdFor:
    @pytest.mark.parametrize(
        ("category", "expected"),
        [
            ("Class Assignments", "graded-submission-sub1"),
            ("Class Exercises", "graded-exercise-sub1"),
            ("Weekly Projects", "graded-project-sub1"),
            ("Something Else", "graded-submission-sub1"),
        ],
    )
    def test_graded_categories(self, category, expected):
        assert activity_id_for(category, "sub1", "Any title") == expected

    def test_hundred_days_uses_date_from_title(self):
        assert (
            activity_id_for("100 Days of Code", "sub1", "100 Days of Code - 2024-03-05")
            == "100-days-of-code-2024-03-05"
        )

    def test_hundred_days_ignores_submission_id(self):
        a = activity_id_for("100 Days of Code", "sub1", "100 Days of Code - 2024-03-05")
        b = activity_id_for("100 Days of Code", "sub2", "100 Days of Code - 2024-03-05")
        assert a == b


class TestHundredDays:
    def test_title_roundtrip(self):
        title = hundred_days_title(date(2024, 3, 5))
        assert title == "100 Days of Code - 2024-03-05"
        assert hundred_days_date(title) == "2024-03-05"

    def test_is_hundred_days(self):
        assert is_hundred_days("100-days-of-code")
        assert not is_hundred_days("assignment-1")


class TestDedupKey:
    def test_hundred_days_keyed_by_title(self):
        assert dedup_key("s1", "100-days-of-code", "100 Days of Code - 2024-03-05") == (
            "s1:title:100 Days of Code - 2024-03-05"
        )

    def test_others_keyed_by_assignment(self):
        assert dedup_key("s1", "a1", "Title one") == dedup_key("s1", "a1", "Title two")


class TestOtherIds:
    def test_attendance(self):
        assert attendance_activity_id("class-7", date(2024, 1, 9)) == "attendance-class-7-2024-01-09"

    def test_manual_ids_are_unique(self):
        a, b = manual_activity_id(), manual_activity_id()
        assert a != b
        assert a.startswith("manual-award-")
        assert is_manual(a)

    def test_manual_suffix_keeps_given_prefix(self):
        assert manual_activity_id("manual-bonus").startswith("manual-bonus-")

    def test_graded_ids_are_not_manual(self):
        assert not is_manual("graded-submission-x")
