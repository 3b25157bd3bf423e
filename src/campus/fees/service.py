"""Fee records, payments and scholarships."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from campus.db.models import FeePayment, FeeRecord
from campus.errors import DuplicateFeeRecordError, FeeRecordNotFoundError, ValidationFailed
from campus.notifications.service import notify

logger = logging.getLogger(__name__)

SCHOLARSHIP_TYPES = ("none", "full", "partial")
PAYMENT_METHODS = ("cash", "bank_transfer", "mobile_money", "cheque", "other")


def amount_due_for(total_fees: float, scholarship_type: str = "none", percentage: float | None = None) -> float:
    """Fees owed after the scholarship.

    >>> amount_due_for(1000.0, "partial", 25)
    750.0
    >>> amount_due_for(1000.0, "full")
    0.0
    """
    if scholarship_type not in SCHOLARSHIP_TYPES:
        msg = f"Unknown scholarship type '{scholarship_type}'"
        raise ValidationFailed(msg)
    if scholarship_type == "full":
        return 0.0
    if scholarship_type == "partial":
        if percentage is None or not 0 < percentage <= 100:
            msg = "A partial scholarship needs a percentage between 0 and 100"
            raise ValidationFailed(msg)
        return total_fees * (1 - percentage / 100)
    return float(total_fees)


def fee_status(amount_due: float, amount_paid: float) -> str:
    """paid once nothing is owed, partial after any payment, else unpaid."""
    if amount_due - amount_paid <= 0:
        return "paid"
    if amount_paid > 0:
        return "partial"
    return "unpaid"


async def get_fee_record(db: AsyncSession, student_id: str) -> FeeRecord:
    record = await db.get(FeeRecord, student_id)
    if record is None:
        msg = "Student fee record not found"
        raise FeeRecordNotFoundError(msg)
    return record


async def list_fee_records(db: AsyncSession, gen: str | None = None) -> list[FeeRecord]:
    query = select(FeeRecord)
    if gen is not None:
        query = query.where(FeeRecord.gen == gen)
    result = await db.execute(query.order_by(FeeRecord.student_name))
    return list(result.scalars().all())


async def initialize_fees(
    db: AsyncSession,
    *,
    student_id: str,
    student_name: str,
    gen: str,
    email: str,
    total_fees: float,
    updated_by: str,
    currency: str = "GHS",
    payment_plan: str = "full",
    installment_count: int | None = None,
    scholarship_type: str = "none",
    scholarship_percentage: float | None = None,
) -> FeeRecord:
    """Open a fee account for a student.

    Raises:
        DuplicateFeeRecordError: the student already has one.
        ValidationFailed: inconsistent scholarship input.
    """
    if await db.get(FeeRecord, student_id) is not None:
        msg = "Fee record already exists for this student"
        raise DuplicateFeeRecordError(msg)

    amount_due = amount_due_for(total_fees, scholarship_type, scholarship_percentage)
    now = datetime.now(timezone.utc)
    record = FeeRecord(
        student_id=student_id,
        student_name=student_name,
        gen=gen,
        email=email,
        currency=currency,
        payment_plan=payment_plan,
        installment_count=installment_count,
        total_fees=total_fees,
        scholarship_type=scholarship_type,
        scholarship_percentage=scholarship_percentage if scholarship_type == "partial" else None,
        amount_due=amount_due,
        amount_paid=0.0,
        balance=amount_due,
        status=fee_status(amount_due, 0.0),
        created_at=now,
        updated_at=now,
        updated_by=updated_by,
        payments=[],
    )
    db.add(record)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        msg = "Fee record already exists for this student"
        raise DuplicateFeeRecordError(msg) from None
    logger.info("Initialized fees for %s: due %.2f %s", student_id, amount_due, currency)
    return record


async def update_scholarship(
    db: AsyncSession,
    student_id: str,
    scholarship_type: str,
    percentage: float | None,
    updated_by: str,
) -> FeeRecord:
    """Change the scholarship and recompute what is owed."""
    record = await get_fee_record(db, student_id)
    amount_due = amount_due_for(record.total_fees, scholarship_type, percentage)
    record.scholarship_type = scholarship_type
    record.scholarship_percentage = percentage if scholarship_type == "partial" else None
    record.amount_due = amount_due
    record.balance = amount_due - record.amount_paid
    record.status = fee_status(amount_due, record.amount_paid)
    record.updated_at = datetime.now(timezone.utc)
    record.updated_by = updated_by
    await db.commit()
    return record


async def record_payment(
    db: AsyncSession,
    student_id: str,
    *,
    amount: float,
    method: str,
    recorded_by: str,
    reference: str | None = None,
    notes: str | None = None,
) -> FeeRecord:
    """Append a payment, update the balance and tell the student."""
    if amount <= 0:
        msg = "Payment amount must be positive"
        raise ValidationFailed(msg)
    if method not in PAYMENT_METHODS:
        msg = f"Unknown payment method '{method}'"
        raise ValidationFailed(msg)

    record = await get_fee_record(db, student_id)
    now = datetime.now(timezone.utc)
    record.payments.append(FeePayment(
        amount=amount,
        method=method,
        reference=reference,
        notes=notes,
        recorded_by=recorded_by,
        paid_at=now,
    ))
    record.amount_paid += amount
    record.balance = record.amount_due - record.amount_paid
    record.status = fee_status(record.amount_due, record.amount_paid)
    record.last_payment_at = now
    record.updated_at = now
    record.updated_by = recorded_by
    await db.commit()

    currency, balance = record.currency, record.balance
    delivered = await notify(
        db,
        student_id,
        "Payment Recorded",
        f"A payment of {currency} {amount:.2f} has been recorded. Balance: {currency} {balance:.2f}",
        "/fees",
    )
    if delivered is None:
        await db.refresh(record)
    return record


def compute_statistics(records: Iterable[FeeRecord]) -> dict[str, Any]:
    """Totals across fee records."""
    records = list(records)
    expected = sum(r.amount_due for r in records)
    collected = sum(r.amount_paid for r in records)

    def count(status: str) -> int:
        return sum(1 for r in records if r.status == status)

    return {
        "total_students": len(records),
        "total_fees_expected": expected,
        "total_collected": collected,
        "total_outstanding": sum(r.balance for r in records),
        "paid_count": count("paid"),
        "partial_count": count("partial"),
        "unpaid_count": count("unpaid"),
        "overdue_count": count("overdue"),
        "scholarship_count": sum(1 for r in records if r.scholarship_type != "none"),
        "full_scholarship_count": sum(1 for r in records if r.scholarship_type == "full"),
        "collection_rate": (collected / expected) * 100 if expected > 0 else 0.0,
    }


async def fee_statistics(db: AsyncSession, gen: str | None = None) -> dict[str, Any]:
    return compute_statistics(await list_fee_records(db, gen))
