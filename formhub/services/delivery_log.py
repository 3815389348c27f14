"""Delivery ledger access and the already-sent filter."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Iterable, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from formhub.models import DeliveryStatus, VendorPaymentEmailLog
from formhub.services.aggregation import PersonProjectSummary, ProjectGroup

logger = logging.getLogger(__name__)


def delivery_key(project_name: str, email: str) -> str:
    return f"{project_name}|{email}"


@dataclass
class PendingDelivery:
    project_name: str
    summary: PersonProjectSummary


class DeliveryLogRepository:
    """Reads and writes ``vendor_payment_email_logs`` rows.

    Writes commit immediately and roll back on failure so one bad item does
    not poison the session for the rest of the batch.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def insert(
        self,
        project_name: str,
        email: str,
        month: date,
        status: DeliveryStatus,
        error_message: str | None = None,
    ) -> Optional[int]:
        row = VendorPaymentEmailLog(
            project_name=project_name,
            cf_email=email,
            month=month,
            status=status.value,
            error_message=error_message,
        )
        try:
            self.session.add(row)
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            raise
        return row.id

    def update(self, log_id: int, **fields: Any) -> None:
        try:
            row = self.session.get(VendorPaymentEmailLog, log_id)
            if row is None:
                raise ValueError(f"email_log_not_found: {log_id}")
            for name, value in fields.items():
                if isinstance(value, DeliveryStatus):
                    value = value.value
                setattr(row, name, value)
            self.session.add(row)
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            raise

    def mark_sent(self, log_id: int, sent_at: datetime) -> None:
        self.update(log_id, status=DeliveryStatus.SENT, sent_at=sent_at)

    def mark_failed(self, log_id: int, message: str) -> None:
        self.update(log_id, status=DeliveryStatus.FAILED, error_message=message)

    def list_for_month(self, month: date, status: DeliveryStatus | None = None) -> list[VendorPaymentEmailLog]:
        statement = select(VendorPaymentEmailLog).where(VendorPaymentEmailLog.month == month)
        if status is not None:
            statement = statement.where(VendorPaymentEmailLog.status == status.value)
        statement = statement.order_by(VendorPaymentEmailLog.id)
        return list(self.session.exec(statement).all())

    def sent_keys(self, month: date) -> set[str]:
        rows = self.list_for_month(month, DeliveryStatus.SENT)
        return {delivery_key(row.project_name, row.cf_email) for row in rows}


def pending_deliveries(projects: dict[str, ProjectGroup], sent: Iterable[str]) -> list[PendingDelivery]:
    """Project/person pairs without a ``sent`` row, in aggregation order."""
    sent_set = set(sent)
    pending: list[PendingDelivery] = []
    for project_name, group in projects.items():
        for summary in group.people:
            if delivery_key(project_name, summary.cf_email) in sent_set:
                logger.info("Skipping already-sent summary: %s / %s", summary.cf_email, project_name)
                continue
            pending.append(PendingDelivery(project_name=project_name, summary=summary))
    return pending


__all__ = ["DeliveryLogRepository", "PendingDelivery", "delivery_key", "pending_deliveries"]
