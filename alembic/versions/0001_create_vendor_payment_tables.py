"""create vendor payment submission tables"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa


revision = "0001_vendor_payments"
down_revision = None
branch_labels: tuple[str, ...] | None = None
depends_on: tuple[str, ...] | None = None


def upgrade() -> None:
    op.create_table(
        "vendor_payment_submissions",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("cf_email", sa.String(length=255), nullable=False),
        sa.Column("cf_name", sa.String(length=255), nullable=False),
        sa.Column("cf_tier", sa.String(length=64), nullable=False),
        sa.Column("total_pay", sa.Float, nullable=False),
        sa.Column("submission_date", sa.Date(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=False), nullable=False),
    )
    op.create_index("ix_vendor_payment_submissions_cf_email", "vendor_payment_submissions", ["cf_email"])
    op.create_index(
        "ix_vendor_payment_submissions_submission_date", "vendor_payment_submissions", ["submission_date"]
    )

    op.create_table(
        "vendor_payment_entries",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column(
            "submission_id",
            sa.Integer,
            sa.ForeignKey("vendor_payment_submissions.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("task_name", sa.String(length=255), nullable=False),
        sa.Column("project_name", sa.String(length=255), nullable=True),
        sa.Column("work_hours", sa.Float, nullable=True),
        sa.Column("rate", sa.Float, nullable=True),
        sa.Column("entry_pay", sa.Float, nullable=True),
    )
    op.create_index("ix_vendor_payment_entries_submission_id", "vendor_payment_entries", ["submission_id"])


def downgrade() -> None:
    op.drop_index("ix_vendor_payment_entries_submission_id", table_name="vendor_payment_entries")
    op.drop_table("vendor_payment_entries")
    op.drop_index("ix_vendor_payment_submissions_submission_date", table_name="vendor_payment_submissions")
    op.drop_index("ix_vendor_payment_submissions_cf_email", table_name="vendor_payment_submissions")
    op.drop_table("vendor_payment_submissions")
