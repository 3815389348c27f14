"""Vendor payment submission endpoints."""

from __future__ import annotations

import logging
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from pydantic import BaseModel, Field
from sqlmodel import Session

from formhub.api.deps import get_db
from formhub.models import DeliveryStatus, VendorPaymentEmailLog, VendorPaymentSubmissionRead
from formhub.services.delivery_log import DeliveryLogRepository
from formhub.services.submissions import EntryInput, SubmissionRepository

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/vendor-payments", tags=["vendor-payments"])


class EntryPayload(BaseModel):
    task_name: str = Field(min_length=1)
    project_name: Optional[str] = None
    work_hours: float = Field(ge=0, allow_inf_nan=False)
    rate: float = Field(ge=0, allow_inf_nan=False)


class SubmissionPayload(BaseModel):
    cf_email: str = Field(min_length=3)
    cf_name: str = ""
    cf_tier: str = ""
    submission_date: Optional[date] = Field(
        default=None, description="Date the work was performed; defaults to today"
    )
    entries: List[EntryPayload] = Field(min_length=1)


@router.post("", response_model=VendorPaymentSubmissionRead, status_code=201)
def create_submission(payload: SubmissionPayload, session: Session = Depends(get_db)):
    repo = SubmissionRepository(session)
    return repo.create(
        cf_email=payload.cf_email,
        cf_name=payload.cf_name,
        cf_tier=payload.cf_tier,
        submission_date=payload.submission_date,
        entries=[
            EntryInput(
                task_name=entry.task_name,
                project_name=entry.project_name,
                work_hours=entry.work_hours,
                rate=entry.rate,
            )
            for entry in payload.entries
        ],
    )


@router.get("", response_model=List[VendorPaymentSubmissionRead])
def list_submissions(email: str = Query(..., min_length=3), session: Session = Depends(get_db)):
    """Payment request history for one person, newest first."""
    return SubmissionRepository(session).list_by_email(email)


@router.get("/email-logs", response_model=List[VendorPaymentEmailLog])
def list_email_logs(
    month: date = Query(..., description="First day of the summarized month"),
    status: Optional[DeliveryStatus] = None,
    session: Session = Depends(get_db),
) -> List[VendorPaymentEmailLog]:
    return DeliveryLogRepository(session).list_for_month(month, status)


@router.get("/{submission_id}", response_model=VendorPaymentSubmissionRead)
def get_submission(submission_id: int, session: Session = Depends(get_db)):
    submission = SubmissionRepository(session).get(submission_id)
    if not submission:
        raise HTTPException(status_code=404, detail="submission_not_found")
    return submission


@router.delete("/{submission_id}", status_code=204)
def delete_submission(submission_id: int, session: Session = Depends(get_db)) -> Response:
    if not SubmissionRepository(session).delete(submission_id):
        raise HTTPException(status_code=404, detail="submission_not_found")
    return Response(status_code=204)


__all__ = ["router"]
