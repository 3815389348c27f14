"""Vendor payment submission store."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Iterable, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import selectinload
from sqlmodel import Session, select

from formhub.models import VendorPaymentEntry, VendorPaymentSubmission

logger = logging.getLogger(__name__)


@dataclass
class EntryInput:
    task_name: str
    work_hours: float
    rate: float
    project_name: Optional[str] = None


class SubmissionRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def list_between(self, start: date, end: date) -> list[VendorPaymentSubmission]:
        """Submissions whose work date falls in ``[start, end)``, entries loaded."""
        statement = (
            select(VendorPaymentSubmission)
            .where(VendorPaymentSubmission.submission_date >= start)
            .where(VendorPaymentSubmission.submission_date < end)
            .options(selectinload(VendorPaymentSubmission.entries))
            .order_by(VendorPaymentSubmission.submission_date, VendorPaymentSubmission.id)
        )
        return list(self.session.exec(statement).all())

    def create(
        self,
        cf_email: str,
        cf_name: str,
        cf_tier: str,
        entries: Iterable[EntryInput],
        submission_date: date | None = None,
    ) -> VendorPaymentSubmission:
        submission = VendorPaymentSubmission(
            cf_email=cf_email,
            cf_name=cf_name,
            cf_tier=cf_tier,
            submission_date=submission_date or datetime.now(timezone.utc).date(),
        )
        total = 0.0
        for item in entries:
            pay = item.work_hours * item.rate
            total += pay
            submission.entries.append(
                VendorPaymentEntry(
                    task_name=item.task_name,
                    project_name=item.project_name,
                    work_hours=item.work_hours,
                    rate=item.rate,
                    entry_pay=pay,
                )
            )
        submission.total_pay = total
        try:
            self.session.add(submission)
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            logger.error("Failed to create vendor payment submission for %s", cf_email, exc_info=True)
            raise
        self.session.refresh(submission)
        logger.info(
            "Created vendor payment submission %s for %s with %d entries",
            submission.id,
            cf_email,
            len(submission.entries),
        )
        return submission

    def get(self, submission_id: int) -> VendorPaymentSubmission | None:
        statement = (
            select(VendorPaymentSubmission)
            .where(VendorPaymentSubmission.id == submission_id)
            .options(selectinload(VendorPaymentSubmission.entries))
        )
        return self.session.exec(statement).first()

    def list_by_email(self, email: str) -> list[VendorPaymentSubmission]:
        statement = (
            select(VendorPaymentSubmission)
            .where(VendorPaymentSubmission.cf_email == email)
            .options(selectinload(VendorPaymentSubmission.entries))
            .order_by(VendorPaymentSubmission.created_at.desc(), VendorPaymentSubmission.id.desc())
        )
        return list(self.session.exec(statement).all())

    def delete(self, submission_id: int) -> bool:
        submission = self.session.get(VendorPaymentSubmission, submission_id)
        if submission is None:
            return False
        try:
            self.session.delete(submission)
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            logger.error("Failed to delete vendor payment submission %s", submission_id, exc_info=True)
            raise
        logger.info("Deleted vendor payment submission %s", submission_id)
        return True


__all__ = ["EntryInput", "SubmissionRepository"]
