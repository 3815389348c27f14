"""Shared fixtures: in-memory database, settings and collaborator doubles."""

from __future__ import annotations

from datetime import date
from typing import Iterable, Optional

import pytest
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

import formhub.models  # noqa: F401
from formhub.core.config import Settings
from formhub.models import VendorPaymentEntry, VendorPaymentSubmission
from formhub.services.aggregation import PersonProjectSummary


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        database_url="sqlite://",
        summary_batch_size=15,
        summary_email_delay_ms=0,
        public_base_url="",
        service_token="",
        resend_api_key="",
    )


def make_submission(
    email: str,
    day: date,
    entries: Iterable[tuple],
    name: str = "",
    tier: str = "T1",
) -> VendorPaymentSubmission:
    """Build an unsaved submission; entries are (task, project, hours, rate, pay)."""
    submission = VendorPaymentSubmission(
        cf_email=email,
        cf_name=name or email.split("@")[0].title(),
        cf_tier=tier,
        submission_date=day,
    )
    total = 0.0
    for task, project, hours, rate, pay in entries:
        submission.entries.append(
            VendorPaymentEntry(task_name=task, project_name=project, work_hours=hours, rate=rate, entry_pay=pay)
        )
        if isinstance(pay, (int, float)):
            total += pay
    submission.total_pay = total
    return submission


def save(session: Session, *submissions: VendorPaymentSubmission) -> None:
    for submission in submissions:
        session.add(submission)
    session.commit()


class FakeRenderer:
    def __init__(self, fail_for: Iterable[tuple[str, str]] = ()) -> None:
        self.calls: list[tuple[str, str, Optional[int]]] = []
        self.fail_for = set(fail_for)

    def __call__(self, project_name: str, summary: PersonProjectSummary, log_id: Optional[int]) -> bytes:
        self.calls.append((project_name, summary.cf_email, log_id))
        if (project_name, summary.cf_email) in self.fail_for:
            raise RuntimeError(f"render failed for {summary.cf_email}")
        return b"%PDF-1.4 fake"


class FakeNotifier:
    def __init__(self, fail_for: Iterable[tuple[str, str]] = ()) -> None:
        self.sent: list[tuple[str, str, bytes]] = []
        self.fail_for = set(fail_for)

    async def __call__(self, project_name: str, summary: PersonProjectSummary, pdf: bytes) -> None:
        if (project_name, summary.cf_email) in self.fail_for:
            raise RuntimeError("provider rejected message")
        self.sent.append((project_name, summary.cf_email, pdf))


class FakeContinuation:
    def __init__(self, dispatched: bool = True) -> None:
        self.calls = 0
        self.dispatched = dispatched

    def schedule(self) -> bool:
        self.calls += 1
        return self.dispatched


class RecordingSleep:
    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)
