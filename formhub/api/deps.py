"""API dependencies."""

from __future__ import annotations

from collections.abc import Generator

from fastapi import Depends, Request
from sqlmodel import Session

from formhub.core.config import Settings
from formhub.db.session import get_session
from formhub.services.summary_job import VendorPaymentSummaryJob


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_db(request: Request) -> Generator[Session, None, None]:
    with get_session(request.app.state.engine) as session:
        yield session


def get_summary_job(request: Request, session: Session = Depends(get_db)) -> VendorPaymentSummaryJob:
    state = request.app.state
    return VendorPaymentSummaryJob(
        settings=state.settings,
        session=session,
        renderer=state.report_renderer,
        notifier=state.notifier,
        continuation=state.continuation,
    )
