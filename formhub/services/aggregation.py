"""Group a month of vendor payment submissions into per-project, per-person summaries."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Iterable

from formhub.models import VendorPaymentSubmission

logger = logging.getLogger(__name__)

UNASSIGNED_PROJECT = "Unassigned"


def coerce_amount(value: Any, fallback: float = 0.0) -> float:
    """Return ``value`` as a float, or ``fallback`` when it is not a finite number.

    Used for entry pay, hours and rate so aggregation and reporting see the
    same numbers. Booleans are not numbers here.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return fallback
    if not math.isfinite(value):
        return fallback
    return float(value)


@dataclass
class DetailedEntry:
    task_name: str
    work_hours: float
    rate: float
    entry_pay: float
    submission_date: date


@dataclass
class PersonProjectSummary:
    """One person's work on one project for the summarized month."""

    cf_name: str
    cf_email: str
    cf_tier: str
    submission_date: date
    total_pay_for_project: float = 0.0
    detailed_entries: list[DetailedEntry] = field(default_factory=list)

    def add_entry(self, task_name: str, work_hours: float, rate: float, entry_pay: float, submission_date: date) -> None:
        # Same task on the same day collapses into one row
        for existing in self.detailed_entries:
            if existing.task_name == task_name and existing.submission_date == submission_date:
                existing.work_hours += work_hours
                existing.entry_pay += entry_pay
                break
        else:
            self.detailed_entries.append(
                DetailedEntry(
                    task_name=task_name,
                    work_hours=work_hours,
                    rate=rate,
                    entry_pay=entry_pay,
                    submission_date=submission_date,
                )
            )
        self.total_pay_for_project += entry_pay


@dataclass
class ProjectGroup:
    project_name: str
    people: list[PersonProjectSummary] = field(default_factory=list)

    def person(self, email: str) -> PersonProjectSummary | None:
        for summary in self.people:
            if summary.cf_email == email:
                return summary
        return None


def group_submissions(submissions: Iterable[VendorPaymentSubmission]) -> dict[str, ProjectGroup]:
    """Build ``project name -> ProjectGroup`` in discovery order.

    People within a project keep the order in which they were first seen.
    """
    projects: dict[str, ProjectGroup] = {}
    for submission in submissions:
        for entry in submission.entries or []:
            project_name = entry.project_name or UNASSIGNED_PROJECT
            group = projects.get(project_name)
            if group is None:
                group = ProjectGroup(project_name=project_name)
                projects[project_name] = group

            summary = group.person(submission.cf_email)
            if summary is None:
                summary = PersonProjectSummary(
                    cf_name=submission.cf_name,
                    cf_email=submission.cf_email,
                    cf_tier=submission.cf_tier,
                    submission_date=submission.submission_date,
                )
                group.people.append(summary)

            summary.add_entry(
                task_name=entry.task_name,
                work_hours=coerce_amount(entry.work_hours),
                rate=coerce_amount(entry.rate),
                entry_pay=coerce_amount(entry.entry_pay),
                submission_date=submission.submission_date,
            )

    logger.info("Grouped entries into %d projects", len(projects))
    return projects


__all__ = [
    "UNASSIGNED_PROJECT",
    "DetailedEntry",
    "PersonProjectSummary",
    "ProjectGroup",
    "coerce_amount",
    "group_submissions",
]
