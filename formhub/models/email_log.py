"""Delivery ledger for monthly vendor payment summary emails."""

from __future__ import annotations

from datetime import date, datetime, timezone
from enum import Enum
from typing import Optional

from sqlalchemy import Index
from sqlmodel import Field, SQLModel


class DeliveryStatus(str, Enum):
    PENDING = "pending"
    SENT = "sent"
    FAILED = "failed"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class VendorPaymentEmailLog(SQLModel, table=True):
    """One delivery attempt for a (project, person, month) summary.

    A ``sent`` row is proof of delivery and blocks any further send for the
    same key; ``failed`` and ``pending`` rows do not.
    """

    __tablename__ = "vendor_payment_email_logs"
    __table_args__ = (Index("ix_vendor_payment_email_logs_month_status", "month", "status"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    project_name: str = Field(max_length=255)
    cf_email: str = Field(max_length=255, index=True)
    month: date = Field(description="First day of the summarized month")
    status: str = Field(max_length=16, description="pending|sent|failed")
    sent_at: Optional[datetime] = Field(default=None)
    error_message: Optional[str] = Field(default=None)
    created_at: datetime = Field(default_factory=_utcnow, nullable=False)


__all__ = ["DeliveryStatus", "VendorPaymentEmailLog"]
