"""Vendor payment submission models."""

from datetime import date, datetime, timezone
from typing import List, Optional

from sqlmodel import Field, Relationship, SQLModel


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class VendorPaymentSubmission(SQLModel, table=True):
    """One vendor payment form post by a coach or facilitator."""

    __tablename__ = "vendor_payment_submissions"

    id: Optional[int] = Field(default=None, primary_key=True)
    cf_email: str = Field(index=True, max_length=255)
    cf_name: str = Field(default="", max_length=255)
    cf_tier: str = Field(default="", max_length=64)
    total_pay: float = Field(default=0.0, description="Submission-level total (informational)")
    submission_date: date = Field(index=True, description="Date the work was performed")
    created_at: datetime = Field(default_factory=_utcnow, nullable=False)

    entries: List["VendorPaymentEntry"] = Relationship(
        back_populates="submission",
        sa_relationship_kwargs={
            "cascade": "all, delete-orphan",
            "order_by": "VendorPaymentEntry.id",
        },
    )


class VendorPaymentEntry(SQLModel, table=True):
    """Task/hours/rate line item belonging to exactly one submission."""

    __tablename__ = "vendor_payment_entries"

    id: Optional[int] = Field(default=None, primary_key=True)
    submission_id: int = Field(
        foreign_key="vendor_payment_submissions.id", index=True, ondelete="CASCADE"
    )
    task_name: str = Field(max_length=255)
    project_name: Optional[str] = Field(default=None, max_length=255)
    work_hours: Optional[float] = Field(default=None)
    rate: Optional[float] = Field(default=None)
    entry_pay: Optional[float] = Field(default=None, description="work_hours * rate")

    submission: Optional[VendorPaymentSubmission] = Relationship(back_populates="entries")


class VendorPaymentEntryRead(SQLModel):
    id: int
    task_name: str
    project_name: Optional[str] = None
    work_hours: Optional[float] = None
    rate: Optional[float] = None
    entry_pay: Optional[float] = None


class VendorPaymentSubmissionRead(SQLModel):
    id: int
    cf_email: str
    cf_name: str
    cf_tier: str
    total_pay: float
    submission_date: date
    created_at: datetime
    entries: List[VendorPaymentEntryRead] = []


__all__ = [
    "VendorPaymentSubmission",
    "VendorPaymentEntry",
    "VendorPaymentEntryRead",
    "VendorPaymentSubmissionRead",
]
