"""Pydantic models for fee endpoints."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

ScholarshipType = Literal["none", "full", "partial"]
PaymentMethod = Literal["cash", "bank_transfer", "mobile_money", "cheque", "other"]


class FeeInitRequest(BaseModel):
    student_id: str = Field(min_length=1)
    student_name: str = Field(min_length=1)
    gen: str = Field(min_length=1)
    email: str = Field(min_length=3)
    total_fees: float = Field(ge=0)
    currency: str = "GHS"
    payment_plan: Literal["full", "installment"] = "full"
    installment_count: int | None = Field(default=None, ge=1)
    scholarship_type: ScholarshipType = "none"
    scholarship_percentage: float | None = Field(default=None, gt=0, le=100)


class ScholarshipUpdate(BaseModel):
    scholarship_type: ScholarshipType
    scholarship_percentage: float | None = Field(default=None, gt=0, le=100)


class PaymentCreate(BaseModel):
    amount: float = Field(gt=0)
    method: PaymentMethod
    reference: str | None = None
    notes: str | None = None


class PaymentResponse(BaseModel):
    id: str
    amount: float
    method: str
    reference: str | None = None
    notes: str | None = None
    recorded_by: str
    paid_at: datetime


class FeeRecordResponse(BaseModel):
    student_id: str
    student_name: str
    gen: str
    email: str
    currency: str
    payment_plan: str
    installment_count: int | None = None
    total_fees: float
    scholarship_type: str
    scholarship_percentage: float | None = None
    amount_due: float
    amount_paid: float
    balance: float
    status: str
    last_payment_at: datetime | None = None
    payments: list[PaymentResponse] = []
    updated_at: datetime
    updated_by: str | None = None


class FeeStatisticsResponse(BaseModel):
    total_students: int
    total_fees_expected: float
    total_collected: float
    total_outstanding: float
    paid_count: int
    partial_count: int
    unpaid_count: int
    overdue_count: int
    scholarship_count: int
    full_scholarship_count: int
    collection_rate: float
