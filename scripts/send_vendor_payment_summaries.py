"""Run the monthly vendor payment summary job from the command line."""

from __future__ import annotations

import argparse
import asyncio
import json
from datetime import date

from formhub.core.config import Settings
from formhub.core.logging_config import setup_logging
from formhub.db.session import build_engine, get_session, init_db
from formhub.services.continuation import NoContinuation
from formhub.services.notifier import EmailNotifier
from formhub.services.pdf_report import SummaryReportRenderer
from formhub.services.summary_job import VendorPaymentSummaryJob, run_until_complete


async def _run(settings: Settings, today: date | None, until_complete: bool) -> None:
    engine = build_engine(settings)
    init_db(engine)
    renderer = SummaryReportRenderer(org_name=settings.report_org_name)
    notifier = EmailNotifier(settings)

    with get_session(engine) as session:

        def make_job() -> VendorPaymentSummaryJob:
            return VendorPaymentSummaryJob(
                settings=settings,
                session=session,
                renderer=renderer,
                notifier=notifier,
                continuation=NoContinuation(),
            )

        if until_complete:
            results = await run_until_complete(make_job, today=today)
        else:
            results = [await make_job().run(today)]

    for result in results:
        print(json.dumps(result.as_payload()))


def main() -> None:
    parser = argparse.ArgumentParser(description="Email last month's vendor payment summaries.")
    parser.add_argument(
        "--until-complete",
        action="store_true",
        help="Keep running batches in-process until nothing is pending (default: one batch).",
    )
    parser.add_argument(
        "--today",
        type=date.fromisoformat,
        default=None,
        help="Pretend today is YYYY-MM-DD; the previous calendar month is summarized.",
    )
    args = parser.parse_args()

    settings = Settings()
    setup_logging(service_name=settings.service_name, level=settings.log_level)
    asyncio.run(_run(settings, args.today, args.until_complete))


if __name__ == "__main__":
    main()
