"""ORM models for the campus database.

One relational database is the single source of truth. User ids are the
opaque ``uid`` strings issued by the identity provider.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from campus.db.base import Base


def _uuid() -> str:
    return str(uuid.uuid4())


def _now() -> datetime:
    return datetime.now(timezone.utc)


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------


class User(Base):
    """Per-user aggregate: role, cohort and the denormalized point total."""

    __tablename__ = "users"

    uid: Mapped[str] = mapped_column(String(128), primary_key=True)
    display_name: Mapped[str | None] = mapped_column(String(128), nullable=True)
    email: Mapped[str | None] = mapped_column(String(320), nullable=True)
    role: Mapped[str] = mapped_column(String(16), nullable=False, default="student")
    gen: Mapped[str | None] = mapped_column(String(32), nullable=True, index=True)
    total_points: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=_now)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=_now)

    point_entries: Mapped[list[PointEntry]] = relationship(
        "PointEntry", back_populates="user", cascade="all, delete-orphan"
    )


# ---------------------------------------------------------------------------
# Points ledger
# ---------------------------------------------------------------------------


class PointEntry(Base):
    """One point award. At most one row per (user, activity)."""

    __tablename__ = "point_entries"
    __table_args__ = (UniqueConstraint("user_id", "activity_id", name="uq_point_entries_user_activity"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    user_id: Mapped[str] = mapped_column(String(128), ForeignKey("users.uid", ondelete="CASCADE"), nullable=False)
    activity_id: Mapped[str] = mapped_column(String(256), nullable=False)
    points: Mapped[float] = mapped_column(Float, nullable=False)
    reason: Mapped[str] = mapped_column(String(128), nullable=False)
    assignment_title: Mapped[str | None] = mapped_column(String(256), nullable=True)
    awarded_by: Mapped[str | None] = mapped_column(String(128), nullable=True)
    awarded_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=_now)

    user: Mapped[User] = relationship("User", back_populates="point_entries")


# ---------------------------------------------------------------------------
# Submissions
# ---------------------------------------------------------------------------


class Submission(Base):
    """A student's submission for an assignment, exercise, project or daily post."""

    __tablename__ = "submissions"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    student_id: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    student_name: Mapped[str] = mapped_column(String(128), nullable=False)
    student_gen: Mapped[str] = mapped_column(String(32), nullable=False, index=True)
    assignment_id: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    assignment_title: Mapped[str] = mapped_column(String(256), nullable=False)
    submission_link: Mapped[str] = mapped_column(Text, nullable=False, default="")
    submission_notes: Mapped[str] = mapped_column(Text, nullable=False, default="")
    image_url: Mapped[str] = mapped_column(Text, nullable=False, default="")
    point_category: Mapped[str] = mapped_column(String(64), nullable=False)
    grade: Mapped[str | None] = mapped_column(String(64), nullable=True)
    feedback: Mapped[str | None] = mapped_column(Text, nullable=True)
    graded_by: Mapped[str | None] = mapped_column(String(128), nullable=True)
    graded_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    submitted_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=_now, index=True)
    dedup_key: Mapped[str] = mapped_column(String(512), nullable=False, unique=True)


# ---------------------------------------------------------------------------
# Roadmap & materials
# ---------------------------------------------------------------------------


class RoadmapWeekStatus(Base):
    """Teacher-marked completion of one roadmap week for one gen."""

    __tablename__ = "roadmap_status"
    __table_args__ = (UniqueConstraint("week_id", "gen", name="uq_roadmap_status_week_gen"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    week_id: Mapped[str] = mapped_column(String(256), nullable=False)
    gen: Mapped[str] = mapped_column(String(32), nullable=False, index=True)
    completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    updated_by: Mapped[str | None] = mapped_column(String(128), nullable=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=_now)


class Material(Base):
    """Learning material attached to one roadmap week."""

    __tablename__ = "materials"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    title: Mapped[str] = mapped_column(String(256), nullable=False)
    subject: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    week: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    video_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    slides_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    order: Mapped[int | None] = mapped_column(Integer, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=_now)


class MaterialView(Base):
    """Append-only log of a student opening a material."""

    __tablename__ = "material_views"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    material_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("materials.id", ondelete="CASCADE"), nullable=False, index=True
    )
    student_id: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    gen: Mapped[str | None] = mapped_column(String(32), nullable=True)
    viewed_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=_now)
    duration: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)


# ---------------------------------------------------------------------------
# Notifications
# ---------------------------------------------------------------------------


class Notification(Base):
    """Persisted in-app notification."""

    __tablename__ = "notifications"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(256), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    href: Mapped[str | None] = mapped_column(String(256), nullable=True)
    read: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=_now)


# ---------------------------------------------------------------------------
# Attendance
# ---------------------------------------------------------------------------


class AttendanceRecord(Base):
    """Class attendance with the student's reflection."""

    __tablename__ = "attendance"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    student_id: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    student_name: Mapped[str] = mapped_column(String(128), nullable=False)
    student_gen: Mapped[str] = mapped_column(String(32), nullable=False)
    class_id: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    class_name: Mapped[str] = mapped_column(String(256), nullable=False)
    learned: Mapped[str] = mapped_column(Text, nullable=False)
    challenged: Mapped[str] = mapped_column(Text, nullable=False)
    questions: Mapped[str | None] = mapped_column(Text, nullable=True)
    submitted_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=_now)


# ---------------------------------------------------------------------------
# Coursework
# ---------------------------------------------------------------------------


class Coursework(Base):
    """Assignment, class exercise or weekly project published to a gen."""

    __tablename__ = "coursework"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    kind: Mapped[str] = mapped_column(String(16), nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(256), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    target_gen: Mapped[str] = mapped_column(String(32), nullable=False, index=True)
    author_id: Mapped[str] = mapped_column(String(128), nullable=False)
    subject: Mapped[str | None] = mapped_column(String(128), nullable=True)
    week: Mapped[str | None] = mapped_column(String(128), nullable=True)
    due_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=_now)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=_now)


# ---------------------------------------------------------------------------
# Fees
# ---------------------------------------------------------------------------


class FeeRecord(Base):
    """Fee account for one student."""

    __tablename__ = "fee_records"

    student_id: Mapped[str] = mapped_column(String(128), primary_key=True)
    student_name: Mapped[str] = mapped_column(String(128), nullable=False)
    gen: Mapped[str] = mapped_column(String(32), nullable=False, index=True)
    email: Mapped[str] = mapped_column(String(320), nullable=False)
    currency: Mapped[str] = mapped_column(String(8), nullable=False, default="GHS")
    payment_plan: Mapped[str] = mapped_column(String(16), nullable=False, default="full")
    installment_count: Mapped[int | None] = mapped_column(Integer, nullable=True)
    total_fees: Mapped[float] = mapped_column(Float, nullable=False)
    scholarship_type: Mapped[str] = mapped_column(String(16), nullable=False, default="none")
    scholarship_percentage: Mapped[float | None] = mapped_column(Float, nullable=True)
    amount_due: Mapped[float] = mapped_column(Float, nullable=False)
    amount_paid: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    balance: Mapped[float] = mapped_column(Float, nullable=False)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default="unpaid", index=True)
    last_payment_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=_now)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=_now)
    updated_by: Mapped[str | None] = mapped_column(String(128), nullable=True)

    payments: Mapped[list[FeePayment]] = relationship(
        "FeePayment",
        back_populates="fee_record",
        cascade="all, delete-orphan",
        order_by="FeePayment.paid_at",
        lazy="selectin",
    )


class FeePayment(Base):
    """A single recorded payment against a fee record."""

    __tablename__ = "fee_payments"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    student_id: Mapped[str] = mapped_column(
        String(128), ForeignKey("fee_records.student_id", ondelete="CASCADE"), nullable=False, index=True
    )
    amount: Mapped[float] = mapped_column(Float, nullable=False)
    method: Mapped[str] = mapped_column(String(32), nullable=False)
    reference: Mapped[str | None] = mapped_column(String(128), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    recorded_by: Mapped[str] = mapped_column(String(128), nullable=False)
    paid_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=_now)

    fee_record: Mapped[FeeRecord] = relationship("FeeRecord", back_populates="payments")


# ---------------------------------------------------------------------------
# Student reports
# ---------------------------------------------------------------------------


class StudentReport(Base):
    """Progress report for one student.

    ``academics`` is derived from the points ledger on every refresh; the
    remaining fields are written by staff and survive a refresh.
    """

    __tablename__ = "student_reports"

    student_id: Mapped[str] = mapped_column(String(128), primary_key=True)
    student_name: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    gen: Mapped[str] = mapped_column(String(32), nullable=False, index=True)
    email: Mapped[str | None] = mapped_column(String(320), nullable=True)
    total_points: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    academics: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    strengths: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    areas_for_improvement: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    achievements: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    recommendations: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    teacher_comments: Mapped[str] = mapped_column(Text, nullable=False, default="")
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=_now)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=_now)


# ---------------------------------------------------------------------------
# Announcements
# ---------------------------------------------------------------------------


class Announcement(Base):
    """Notice published by staff to one gen."""

    __tablename__ = "announcements"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    title: Mapped[str] = mapped_column(String(256), nullable=False, index=True)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    author: Mapped[str] = mapped_column(String(128), nullable=False)
    author_id: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    target_gen: Mapped[str] = mapped_column(String(32), nullable=False, index=True)
    image_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=_now, index=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=_now)


# ---------------------------------------------------------------------------
# Sync outbox
# ---------------------------------------------------------------------------


class OutboxEvent(Base):
    """Change event written in the same transaction as the change it describes."""

    __tablename__ = "outbox_events"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    topic: Mapped[str] = mapped_column(String(64), nullable=False)
    payload: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=_now)
    dispatched_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True, index=True)
    attempts: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
