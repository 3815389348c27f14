"""Grouping of monthly submissions into per-project, per-person summaries."""

import math
from datetime import date

import pytest

from formhub.services.aggregation import UNASSIGNED_PROJECT, coerce_amount, group_submissions

from .conftest import make_submission

JAN_5 = date(2025, 1, 5)
JAN_6 = date(2025, 1, 6)


def test_same_task_same_date_merges_into_one_row():
    submissions = [
        make_submission("a@x.org", JAN_5, [("Coaching", "Alpha", 2, 50, 100)]),
        make_submission("a@x.org", JAN_5, [("Coaching", "Alpha", 1, 50, 50)]),
    ]

    projects = group_submissions(submissions)

    assert list(projects) == ["Alpha"]
    people = projects["Alpha"].people
    assert len(people) == 1
    summary = people[0]
    assert summary.cf_email == "a@x.org"
    assert summary.total_pay_for_project == 150
    assert len(summary.detailed_entries) == 1
    entry = summary.detailed_entries[0]
    assert entry.task_name == "Coaching"
    assert entry.work_hours == 3
    assert entry.entry_pay == 150
    assert entry.rate == 50
    assert entry.submission_date == JAN_5


def test_different_dates_or_tasks_stay_separate():
    submissions = [
        make_submission("a@x.org", JAN_5, [("Coaching", "Alpha", 2, 50, 100), ("Design", "Alpha", 1, 40, 40)]),
        make_submission("a@x.org", JAN_6, [("Coaching", "Alpha", 1, 50, 50)]),
    ]

    summary = group_submissions(submissions)["Alpha"].people[0]

    rows = [(e.task_name, e.submission_date, e.work_hours) for e in summary.detailed_entries]
    assert rows == [("Coaching", JAN_5, 2), ("Design", JAN_5, 1), ("Coaching", JAN_6, 1)]
    assert summary.total_pay_for_project == 190


def test_total_equals_sum_of_detailed_entries():
    submissions = [
        make_submission("a@x.org", JAN_5, [("Coaching", "Alpha", 1.5, 33.33, 49.995)]),
        make_submission("a@x.org", JAN_5, [("Coaching", "Alpha", 0.25, 33.33, 8.3325)]),
        make_submission("a@x.org", JAN_6, [("Review", "Alpha", 2, 10.1, 20.2)]),
    ]

    summary = group_submissions(submissions)["Alpha"].people[0]

    assert summary.total_pay_for_project == pytest.approx(sum(e.entry_pay for e in summary.detailed_entries))
    assert summary.detailed_entries[0].entry_pay == 49.995 + 8.3325


def test_missing_project_name_groups_under_unassigned():
    submissions = [
        make_submission("a@x.org", JAN_5, [("Coaching", None, 1, 50, 50), ("Coaching", "", 1, 50, 50)]),
    ]

    projects = group_submissions(submissions)

    assert list(projects) == [UNASSIGNED_PROJECT]
    assert projects[UNASSIGNED_PROJECT].people[0].detailed_entries[0].work_hours == 2


def test_non_numeric_pay_counts_as_zero_without_dropping_entry():
    submissions = [
        make_submission(
            "a@x.org",
            JAN_5,
            [("Coaching", "Alpha", 1, 50, None), ("Design", "Alpha", 1, 50, math.nan), ("Ops", "Alpha", 1, 50, 25)],
        ),
    ]

    summary = group_submissions(submissions)["Alpha"].people[0]

    assert [e.task_name for e in summary.detailed_entries] == ["Coaching", "Design", "Ops"]
    assert [e.entry_pay for e in summary.detailed_entries] == [0.0, 0.0, 25.0]
    assert summary.total_pay_for_project == 25.0


def test_projects_and_people_keep_discovery_order():
    submissions = [
        make_submission("b@x.org", JAN_5, [("Coaching", "Beta", 1, 10, 10), ("Coaching", "Alpha", 1, 10, 10)]),
        make_submission("a@x.org", JAN_6, [("Coaching", "Alpha", 1, 10, 10)], name="Ann", tier="T2"),
    ]

    projects = group_submissions(submissions)

    assert list(projects) == ["Beta", "Alpha"]
    assert [p.cf_email for p in projects["Alpha"].people] == ["b@x.org", "a@x.org"]
    ann = projects["Alpha"].people[1]
    assert (ann.cf_name, ann.cf_tier, ann.submission_date) == ("Ann", "T2", JAN_6)


def test_person_summary_keeps_first_submission_date():
    submissions = [
        make_submission("a@x.org", JAN_5, [("Coaching", "Alpha", 1, 10, 10)]),
        make_submission("a@x.org", JAN_6, [("Coaching", "Alpha", 1, 10, 10)]),
    ]

    assert group_submissions(submissions)["Alpha"].people[0].submission_date == JAN_5


def test_no_submissions_gives_empty_mapping():
    assert group_submissions([]) == {}


@pytest.mark.parametrize(
    "value, expected",
    [
        (12, 12.0),
        (2.5, 2.5),
        (None, 0.0),
        ("15", 0.0),
        (math.nan, 0.0),
        (math.inf, 0.0),
        (-math.inf, 0.0),
        (True, 0.0),
    ],
)
def test_coerce_amount(value, expected):
    assert coerce_amount(value) == expected
