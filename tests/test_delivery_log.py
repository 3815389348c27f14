"""Delivery ledger repository and the already-sent filter."""

from datetime import date, datetime, timezone

from formhub.models import DeliveryStatus, VendorPaymentEmailLog
from formhub.services.aggregation import group_submissions
from formhub.services.delivery_log import DeliveryLogRepository, delivery_key, pending_deliveries

from .conftest import make_submission

JAN = date(2025, 1, 1)
FEB = date(2025, 2, 1)


def test_insert_and_mark_sent(session):
    repo = DeliveryLogRepository(session)
    log_id = repo.insert("Alpha", "a@x.org", JAN, DeliveryStatus.PENDING)
    assert log_id is not None

    sent_at = datetime(2025, 2, 6, 12, 0, tzinfo=timezone.utc)
    repo.mark_sent(log_id, sent_at)

    row = session.get(VendorPaymentEmailLog, log_id)
    assert row.status == "sent"
    assert row.sent_at.replace(tzinfo=None) == sent_at.replace(tzinfo=None)
    assert row.error_message is None


def test_mark_failed_records_message(session):
    repo = DeliveryLogRepository(session)
    log_id = repo.insert("Alpha", "a@x.org", JAN, DeliveryStatus.PENDING)

    repo.mark_failed(log_id, "render failed")

    row = session.get(VendorPaymentEmailLog, log_id)
    assert row.status == "failed"
    assert row.error_message == "render failed"


def test_sent_keys_only_counts_sent_rows_for_the_month(session):
    repo = DeliveryLogRepository(session)
    sent_id = repo.insert("Alpha", "a@x.org", JAN, DeliveryStatus.PENDING)
    repo.mark_sent(sent_id, datetime.now(timezone.utc))
    repo.insert("Alpha", "b@x.org", JAN, DeliveryStatus.FAILED, error_message="boom")
    repo.insert("Beta", "c@x.org", JAN, DeliveryStatus.PENDING)
    other_month = repo.insert("Beta", "d@x.org", FEB, DeliveryStatus.PENDING)
    repo.mark_sent(other_month, datetime.now(timezone.utc))

    assert repo.sent_keys(JAN) == {"Alpha|a@x.org"}
    assert repo.sent_keys(FEB) == {"Beta|d@x.org"}


def test_list_for_month_filters_by_status(session):
    repo = DeliveryLogRepository(session)
    repo.insert("Alpha", "a@x.org", JAN, DeliveryStatus.FAILED, error_message="x")
    repo.insert("Alpha", "a@x.org", JAN, DeliveryStatus.PENDING)

    assert [row.status for row in repo.list_for_month(JAN)] == ["failed", "pending"]
    assert [row.status for row in repo.list_for_month(JAN, DeliveryStatus.FAILED)] == ["failed"]


def test_pending_deliveries_skips_sent_pairs_in_order():
    day = date(2025, 1, 10)
    projects = group_submissions(
        [
            make_submission("a@x.org", day, [("Coaching", "Alpha", 1, 10, 10), ("Coaching", "Beta", 1, 10, 10)]),
            make_submission("b@x.org", day, [("Coaching", "Alpha", 1, 10, 10)]),
        ]
    )

    pending = pending_deliveries(projects, {delivery_key("Alpha", "a@x.org")})

    assert [(p.project_name, p.summary.cf_email) for p in pending] == [
        ("Alpha", "b@x.org"),
        ("Beta", "a@x.org"),
    ]


def test_pending_deliveries_with_nothing_sent_keeps_everything():
    day = date(2025, 1, 10)
    projects = group_submissions([make_submission("a@x.org", day, [("Coaching", "Alpha", 1, 10, 10)])])

    assert len(pending_deliveries(projects, set())) == 1
