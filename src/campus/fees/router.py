"""Fee API endpoints: 6 routes, admin only."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from campus.auth.dependencies import Principal, require
from campus.auth.roles import Permission
from campus.database import get_session
from campus.db.models import FeeRecord
from campus.errors import DuplicateFeeRecordError, FeeRecordNotFoundError, ValidationFailed
from campus.fees.schemas import (
    FeeInitRequest,
    FeeRecordResponse,
    FeeStatisticsResponse,
    PaymentCreate,
    PaymentResponse,
    ScholarshipUpdate,
)
from campus.fees.service import (
    fee_statistics,
    get_fee_record,
    initialize_fees,
    list_fee_records,
    record_payment,
    update_scholarship,
)

router = APIRouter(prefix="/api/v1", tags=["Fees"])

_admin = require(Permission.MANAGE_FEES)


def _to_response(r: FeeRecord) -> FeeRecordResponse:
    return FeeRecordResponse(
        student_id=r.student_id,
        student_name=r.student_name,
        gen=r.gen,
        email=r.email,
        currency=r.currency,
        payment_plan=r.payment_plan,
        installment_count=r.installment_count,
        total_fees=r.total_fees,
        scholarship_type=r.scholarship_type,
        scholarship_percentage=r.scholarship_percentage,
        amount_due=r.amount_due,
        amount_paid=r.amount_paid,
        balance=r.balance,
        status=r.status,
        last_payment_at=r.last_payment_at,
        payments=[
            PaymentResponse(
                id=p.id,
                amount=p.amount,
                method=p.method,
                reference=p.reference,
                notes=p.notes,
                recorded_by=p.recorded_by,
                paid_at=p.paid_at,
            )
            for p in r.payments
        ],
        updated_at=r.updated_at,
        updated_by=r.updated_by,
    )


@router.get("/fees", response_model=list[FeeRecordResponse])
async def list_fees(
    gen: str | None = Query(None),
    _user: Principal = Depends(_admin),
    db: AsyncSession = Depends(get_session),
):
    """All fee records, optionally for one gen."""
    return [_to_response(r) for r in await list_fee_records(db, gen)]


@router.post("/fees", response_model=FeeRecordResponse, status_code=201)
async def init_fees(
    body: FeeInitRequest,
    user: Principal = Depends(_admin),
    db: AsyncSession = Depends(get_session),
):
    """Open a fee account for a student."""
    try:
        record = await initialize_fees(db, updated_by=user.uid, **body.model_dump())
    except DuplicateFeeRecordError as e:
        raise HTTPException(status_code=409, detail=e.message) from e
    except ValidationFailed as e:
        raise HTTPException(status_code=400, detail=e.message) from e
    return _to_response(record)


@router.get("/fees/statistics", response_model=FeeStatisticsResponse)
async def statistics(
    gen: str | None = Query(None),
    _user: Principal = Depends(_admin),
    db: AsyncSession = Depends(get_session),
):
    """Collection totals."""
    return FeeStatisticsResponse(**await fee_statistics(db, gen))


@router.get("/fees/{student_id}", response_model=FeeRecordResponse)
async def get_fees(
    student_id: str,
    _user: Principal = Depends(_admin),
    db: AsyncSession = Depends(get_session),
):
    """One student's fee record with payments."""
    try:
        record = await get_fee_record(db, student_id)
    except FeeRecordNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message) from e
    return _to_response(record)


@router.post("/fees/{student_id}/payments", response_model=FeeRecordResponse, status_code=201)
async def post_payment(
    student_id: str,
    body: PaymentCreate,
    user: Principal = Depends(_admin),
    db: AsyncSession = Depends(get_session),
):
    """Record a payment."""
    try:
        record = await record_payment(db, student_id, recorded_by=user.uid, **body.model_dump())
    except FeeRecordNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message) from e
    except ValidationFailed as e:
        raise HTTPException(status_code=400, detail=e.message) from e
    return _to_response(record)


@router.put("/fees/{student_id}/scholarship", response_model=FeeRecordResponse)
async def put_scholarship(
    student_id: str,
    body: ScholarshipUpdate,
    user: Principal = Depends(_admin),
    db: AsyncSession = Depends(get_session),
):
    """Change a student's scholarship."""
    try:
        record = await update_scholarship(
            db, student_id, body.scholarship_type, body.scholarship_percentage, user.uid,
        )
    except FeeRecordNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message) from e
    except ValidationFailed as e:
        raise HTTPException(status_code=400, detail=e.message) from e
    return _to_response(record)
