"""Student reports and announcements.

Revision ID: 003_reports_and_announcements
Revises: 002_campus_tables
Create Date: 2026-10-19
"""

from collections.abc import Sequence

from alembic import op

revision: str = "003_reports_and_announcements"
down_revision: str | None = "002_campus_tables"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE IF NOT EXISTS student_reports (
            student_id VARCHAR(128) PRIMARY KEY,
            student_name VARCHAR(128) NOT NULL,
            gen VARCHAR(32) NOT NULL,
            email VARCHAR(320),
            total_points DOUBLE PRECISION NOT NULL DEFAULT 0,
            academics JSON NOT NULL DEFAULT '{}',
            strengths JSON NOT NULL DEFAULT '[]',
            areas_for_improvement JSON NOT NULL DEFAULT '[]',
            achievements JSON NOT NULL DEFAULT '[]',
            recommendations JSON NOT NULL DEFAULT '[]',
            teacher_comments TEXT NOT NULL DEFAULT '',
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
    """)
    op.execute("CREATE INDEX IF NOT EXISTS ix_student_reports_gen ON student_reports(gen)")
    op.execute("CREATE INDEX IF NOT EXISTS ix_student_reports_student_name ON student_reports(student_name)")

    op.execute("""
        CREATE TABLE IF NOT EXISTS announcements (
            id VARCHAR(36) PRIMARY KEY,
            title VARCHAR(256) NOT NULL,
            content TEXT NOT NULL,
            author VARCHAR(128) NOT NULL,
            author_id VARCHAR(128) NOT NULL,
            target_gen VARCHAR(32) NOT NULL,
            image_url TEXT,
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
    """)
    op.execute("CREATE INDEX IF NOT EXISTS ix_announcements_title ON announcements(title)")
    op.execute("CREATE INDEX IF NOT EXISTS ix_announcements_author_id ON announcements(author_id)")
    op.execute("CREATE INDEX IF NOT EXISTS ix_announcements_target_gen ON announcements(target_gen)")
    op.execute("CREATE INDEX IF NOT EXISTS ix_announcements_created_at ON announcements(created_at)")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS announcements")
    op.execute("DROP TABLE IF EXISTS student_reports")
