"""Roadmap status, materials, notifications, attendance, coursework and fees.

Revision ID: 002_campus_tables
Revises: 001_points_and_submissions
Create Date: 2026-10-19
"""

from collections.abc import Sequence

from alembic import op

revision: str = "002_campus_tables"
down_revision: str | None = "001_points_and_submissions"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    # --- Roadmap ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS roadmap_status (
            id SERIAL PRIMARY KEY,
            week_id VARCHAR(256) NOT NULL,
            gen VARCHAR(32) NOT NULL,
            completed BOOLEAN NOT NULL DEFAULT false,
            updated_by VARCHAR(128),
            updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_roadmap_status_week_gen UNIQUE (week_id, gen)
        )
    """)
    op.execute("CREATE INDEX IF NOT EXISTS ix_roadmap_status_gen ON roadmap_status(gen)")

    op.execute("""
        CREATE TABLE IF NOT EXISTS materials (
            id VARCHAR(36) PRIMARY KEY,
            title VARCHAR(256) NOT NULL,
            subject VARCHAR(128) NOT NULL,
            week VARCHAR(128) NOT NULL,
            video_url TEXT,
            slides_url TEXT,
            "order" INTEGER,
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
    """)
    op.execute("CREATE INDEX IF NOT EXISTS ix_materials_subject ON materials(subject)")
    op.execute("CREATE INDEX IF NOT EXISTS ix_materials_week ON materials(week)")

    op.execute("""
        CREATE TABLE IF NOT EXISTS material_views (
            id VARCHAR(36) PRIMARY KEY,
            material_id VARCHAR(36) NOT NULL REFERENCES materials(id) ON DELETE CASCADE,
            student_id VARCHAR(128) NOT NULL,
            gen VARCHAR(32),
            viewed_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            duration INTEGER NOT NULL DEFAULT 0,
            completed BOOLEAN NOT NULL DEFAULT false
        )
    """)
    op.execute("CREATE INDEX IF NOT EXISTS ix_material_views_material_id ON material_views(material_id)")
    op.execute("CREATE INDEX IF NOT EXISTS ix_material_views_student_id ON material_views(student_id)")

    # --- Notifications ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS notifications (
            id SERIAL PRIMARY KEY,
            user_id VARCHAR(128) NOT NULL,
            title VARCHAR(256) NOT NULL,
            description TEXT,
            href VARCHAR(256),
            read BOOLEAN NOT NULL DEFAULT false,
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
    """)
    op.execute("CREATE INDEX IF NOT EXISTS ix_notifications_user_id ON notifications(user_id)")

    # --- Attendance ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS attendance (
            id VARCHAR(36) PRIMARY KEY,
            student_id VARCHAR(128) NOT NULL,
            student_name VARCHAR(128) NOT NULL,
            student_gen VARCHAR(32) NOT NULL,
            class_id VARCHAR(128) NOT NULL,
            class_name VARCHAR(256) NOT NULL,
            learned TEXT NOT NULL,
            challenged TEXT NOT NULL,
            questions TEXT,
            submitted_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
    """)
    op.execute("CREATE INDEX IF NOT EXISTS ix_attendance_student_id ON attendance(student_id)")
    op.execute("CREATE INDEX IF NOT EXISTS ix_attendance_class_id ON attendance(class_id)")

    # --- Coursework ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS coursework (
            id VARCHAR(36) PRIMARY KEY,
            kind VARCHAR(16) NOT NULL,
            title VARCHAR(256) NOT NULL,
            description TEXT NOT NULL,
            target_gen VARCHAR(32) NOT NULL,
            author_id VARCHAR(128) NOT NULL,
            subject VARCHAR(128),
            week VARCHAR(128),
            due_date TIMESTAMPTZ,
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
    """)
    op.execute("CREATE INDEX IF NOT EXISTS ix_coursework_kind ON coursework(kind)")
    op.execute("CREATE INDEX IF NOT EXISTS ix_coursework_target_gen ON coursework(target_gen)")

    # --- Fees ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS fee_records (
            student_id VARCHAR(128) PRIMARY KEY,
            student_name VARCHAR(128) NOT NULL,
            gen VARCHAR(32) NOT NULL,
            email VARCHAR(320) NOT NULL,
            currency VARCHAR(8) NOT NULL DEFAULT 'GHS',
            payment_plan VARCHAR(16) NOT NULL DEFAULT 'full',
            installment_count INTEGER,
            total_fees DOUBLE PRECISION NOT NULL,
            scholarship_type VARCHAR(16) NOT NULL DEFAULT 'none',
            scholarship_percentage DOUBLE PRECISION,
            amount_due DOUBLE PRECISION NOT NULL,
            amount_paid DOUBLE PRECISION NOT NULL DEFAULT 0,
            balance DOUBLE PRECISION NOT NULL,
            status VARCHAR(16) NOT NULL DEFAULT 'unpaid',
            last_payment_at TIMESTAMPTZ,
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            updated_by VARCHAR(128)
        )
    """)
    op.execute("CREATE INDEX IF NOT EXISTS ix_fee_records_gen ON fee_records(gen)")
    op.execute("CREATE INDEX IF NOT EXISTS ix_fee_records_status ON fee_records(status)")

    op.execute("""
        CREATE TABLE IF NOT EXISTS fee_payments (
            id VARCHAR(36) PRIMARY KEY,
            student_id VARCHAR(128) NOT NULL REFERENCES fee_records(student_id) ON DELETE CASCADE,
            amount DOUBLE PRECISION NOT NULL,
            method VARCHAR(32) NOT NULL,
            reference VARCHAR(128),
            notes TEXT,
            recorded_by VARCHAR(128) NOT NULL,
            paid_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
    """)
    op.execute("CREATE INDEX IF NOT EXISTS ix_fee_payments_student_id ON fee_payments(student_id)")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS fee_payments")
    op.execute("DROP TABLE IF EXISTS fee_records")
    op.execute("DROP TABLE IF EXISTS coursework")
    op.execute("DROP TABLE IF EXISTS attendance")
    op.execute("DROP TABLE IF EXISTS notifications")
    op.execute("DROP TABLE IF EXISTS material_views")
    op.execute("DROP TABLE IF EXISTS materials")
    op.execute("DROP TABLE IF EXISTS roadmap_status")
