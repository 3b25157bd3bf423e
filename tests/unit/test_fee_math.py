"""Fee arithmetic: amount due, status and statistics."""

from __future__ import annotations

from types import SimpleNamespace

import pytest

from campus.errors import ValidationFailed
from campus.fees.service import amount_due_for, compute_statistics, fee_status


class TestAmountDue:
    def test_no_scholarship(self):
        assert amount_due_for(1200.0) == 1200.0

    def test_full_scholarship(self):
        assert amount_due_for(1200.0, "full") == 0.0

    def test_partial_scholarship(self):
        assert amount_due_for(1200.0, "partial", 25) == pytest.approx(900.0)

    @pytest.mark.parametrize("pct", [None, 0, 150])
    def test_partial_needs_valid_percentage(self, pct):
        with pytest.raises(ValidationFailed):
            amount_due_for(1200.0, "partial", pct)

    def test_unknown_type(self):
        with pytest.raises(ValidationFailed):
            amount_due_for(1200.0, "half")


class TestStatus:
    def test_unpaid(self):
        assert fee_status(1000.0, 0.0) == "unpaid"

    def test_partial(self):
        assert fee_status(1000.0, 400.0) == "partial"

    def test_paid_exact_and_over(self):
        assert fee_status(1000.0, 1000.0) == "paid"
        assert fee_status(1000.0, 1100.0) == "paid"

    def test_nothing_due_is_paid(self):
        assert fee_status(0.0, 0.0) == "paid"


class TestStatistics:
    def test_totals(self):
        records = [
            SimpleNamespace(amount_due=1000.0, amount_paid=1000.0, balance=0.0, status="paid", scholarship_type="none"),
            SimpleNamespace(amount_due=500.0, amount_paid=100.0, balance=400.0, status="partial",
                            scholarship_type="partial"),
            SimpleNamespace(amount_due=0.0, amount_paid=0.0, balance=0.0, status="paid", scholarship_type="full"),
        ]
        stats = compute_statistics(records)
        assert stats["total_students"] == 3
        assert stats["total_fees_expected"] == 1500.0
        assert stats["total_collected"] == 1100.0
        assert stats["total_outstanding"] == 400.0
        assert stats["paid_count"] == 2
        assert stats["partial_count"] == 1
        assert stats["scholarship_count"] == 2
        assert stats["full_scholarship_count"] == 1
        assert stats["collection_rate"] == pytest.approx(1100.0 / 1500.0 * 100)

    def test_empty(self):
        stats = compute_statistics([])
        assert stats["total_students"] == 0
        assert stats["collection_rate"] == 0.0
