"""add vendor payment email delivery log"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa


revision = "0002_email_logs"
down_revision = "0001_vendor_payments"
branch_labels: tuple[str, ...] | None = None
depends_on: tuple[str, ...] | None = None


def upgrade() -> None:
    # No unique key on (project_name, cf_email, month): failed and pending
    # attempts for the same key are kept alongside the eventual sent row.
    op.create_table(
        "vendor_payment_email_logs",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("project_name", sa.String(length=255), nullable=False),
        sa.Column("cf_email", sa.String(length=255), nullable=False),
        sa.Column("month", sa.Date(), nullable=False),
        sa.Column("status", sa.String(length=16), nullable=False),
        sa.Column("sent_at", sa.DateTime(timezone=False), nullable=True),
        sa.Column("error_message", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=False), nullable=False),
    )
    op.create_index("ix_vendor_payment_email_logs_cf_email", "vendor_payment_email_logs", ["cf_email"])
    op.create_index(
        "ix_vendor_payment_email_logs_month_status", "vendor_payment_email_logs", ["month", "status"]
    )


def downgrade() -> None:
    op.drop_index("ix_vendor_payment_email_logs_month_status", table_name="vendor_payment_email_logs")
    op.drop_index("ix_vendor_payment_email_logs_cf_email", table_name="vendor_payment_email_logs")
    op.drop_table("vendor_payment_email_logs")
