"""Users, the points ledger, submissions and the sync outbox.

Revision ID: 001_points_and_submissions
Revises: None
Create Date: 2026-10-19
"""

from collections.abc import Sequence

from alembic import op

revision: str = "001_points_and_submissions"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    # --- Users ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS users (
            uid VARCHAR(128) PRIMARY KEY,
            display_name VARCHAR(128),
            email VARCHAR(320),
            role VARCHAR(16) NOT NULL DEFAULT 'student',
            gen VARCHAR(32),
            total_points DOUBLE PRECISION NOT NULL DEFAULT 0,
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
    """)
    op.execute("CREATE INDEX IF NOT EXISTS ix_users_gen ON users(gen)")

    # --- Points ledger ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS point_entries (
            id VARCHAR(36) PRIMARY KEY,
            user_id VARCHAR(128) NOT NULL REFERENCES users(uid) ON DELETE CASCADE,
            activity_id VARCHAR(256) NOT NULL,
            points DOUBLE PRECISION NOT NULL,
            reason VARCHAR(128) NOT NULL,
            assignment_title VARCHAR(256),
            awarded_by VARCHAR(128),
            awarded_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_point_entries_user_activity UNIQUE (user_id, activity_id)
        )
    """)

    # --- Submissions ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS submissions (
            id VARCHAR(36) PRIMARY KEY,
            student_id VARCHAR(128) NOT NULL,
            student_name VARCHAR(128) NOT NULL,
            student_gen VARCHAR(32) NOT NULL,
            assignment_id VARCHAR(128) NOT NULL,
            assignment_title VARCHAR(256) NOT NULL,
            submission_link TEXT NOT NULL DEFAULT '',
            submission_notes TEXT NOT NULL DEFAULT '',
            image_url TEXT NOT NULL DEFAULT '',
            point_category VARCHAR(64) NOT NULL,
            grade VARCHAR(64),
            feedback TEXT,
            graded_by VARCHAR(128),
            graded_at TIMESTAMPTZ,
            submitted_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            dedup_key VARCHAR(512) NOT NULL UNIQUE
        )
    """)
    op.execute("CREATE INDEX IF NOT EXISTS ix_submissions_student_id ON submissions(student_id)")
    op.execute("CREATE INDEX IF NOT EXISTS ix_submissions_student_gen ON submissions(student_gen)")
    op.execute("CREATE INDEX IF NOT EXISTS ix_submissions_assignment_id ON submissions(assignment_id)")
    op.execute("CREATE INDEX IF NOT EXISTS ix_submissions_submitted_at ON submissions(submitted_at)")

    # --- Sync outbox ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS outbox_events (
            id SERIAL PRIMARY KEY,
            topic VARCHAR(64) NOT NULL,
            payload JSON NOT NULL,
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            dispatched_at TIMESTAMPTZ,
            attempts INTEGER NOT NULL DEFAULT 0
        )
    """)
    op.execute("CREATE INDEX IF NOT EXISTS ix_outbox_events_dispatched_at ON outbox_events(dispatched_at)")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS outbox_events")
    op.execute("DROP TABLE IF EXISTS submissions")
    op.execute("DROP TABLE IF EXISTS point_entries")
    op.execute("DROP TABLE IF EXISTS users")
