"""Monthly vendor payment summary job.

Each invocation recomputes the previous month's per-project, per-person
summaries from the submission store, drops the pairs the delivery log already
marks as ``sent``, and emails at most one batch of the rest. Items are handled
one at a time with a fixed delay to stay under the email provider's rate
limit. When work remains, the next invocation is scheduled through the
continuation and this one returns without waiting for it.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Any, Awaitable, Callable, Optional, Protocol

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from formhub.core.config import Settings
from formhub.core.logging_config import delivery_context
from formhub.models import DeliveryStatus
from formhub.services.aggregation import PersonProjectSummary, group_submissions
from formhub.services.delivery_log import DeliveryLogRepository, PendingDelivery, delivery_key, pending_deliveries
from formhub.services.submissions import SubmissionRepository

logger = logging.getLogger(__name__)

Renderer = Callable[[str, PersonProjectSummary, Optional[int]], bytes]
Notifier = Callable[[str, PersonProjectSummary, bytes], Awaitable[None]]


class Continuation(Protocol):
    def schedule(self) -> bool: ...


def previous_month_window(today: date) -> tuple[date, date]:
    """Return ``(first of previous month, first of current month)``."""
    current = today.replace(day=1)
    if current.month == 1:
        previous = current.replace(year=current.year - 1, month=12)
    else:
        previous = current.replace(month=current.month - 1)
    return previous, current


def error_message(error: BaseException) -> str:
    text = str(error)
    if text:
        return text
    return type(error).__name__ or "Unknown error occurred"


@dataclass
class BatchResult:
    message: str
    processed: int = 0
    failed: int = 0
    attempted: int = 0
    remaining: int = 0
    nothing_to_do: bool = False

    @property
    def all_complete(self) -> bool:
        return self.remaining == 0

    def as_payload(self) -> dict[str, Any]:
        if self.nothing_to_do:
            return {"message": self.message}
        return {
            "message": self.message,
            "batchComplete": True,
            "processedInThisBatch": self.processed,
            "failedInThisBatch": self.failed,
            "totalAttemptedInThisBatch": self.attempted,
            "remainingAfterBatch": self.remaining,
            "allComplete": self.all_complete,
            "nextBatchTriggered": self.remaining > 0,
        }


class VendorPaymentSummaryJob:
    def __init__(
        self,
        settings: Settings,
        session: Session,
        renderer: Renderer,
        notifier: Notifier,
        continuation: Continuation,
        clock: Callable[[], datetime] | None = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        self.settings = settings
        self.submissions = SubmissionRepository(session)
        self.delivery_log = DeliveryLogRepository(session)
        self.session = session
        self.renderer = renderer
        self.notifier = notifier
        self.continuation = continuation
        self.clock = clock or (lambda: datetime.now(timezone.utc))
        self.sleep = sleep
        # Keys delivered by earlier batches of the same in-process run
        self.already_sent: set[str] = set()
        self.delivered: set[str] = set()

    async def run(self, today: date | None = None) -> BatchResult:
        month_start, month_end = previous_month_window(today or self.clock().date())
        logger.info("Processing submissions for previous month: %s to %s", month_start, month_end)

        # Fetch failures here are fatal for the invocation
        submissions = self.submissions.list_between(month_start, month_end)
        logger.info("Found %d submissions", len(submissions))
        if not submissions:
            return BatchResult(
                message=f"No submissions found for the previous month. {month_start} to {month_end}",
                nothing_to_do=True,
            )

        projects = group_submissions(submissions)

        try:
            sent = self.delivery_log.sent_keys(month_start)
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.error("Error fetching sent email logs, treating as none sent: %s", exc)
            sent = set()
        sent |= self.already_sent
        logger.info("Found %d already-sent email logs for %s", len(sent), month_start)

        pending = pending_deliveries(projects, sent)
        batch = pending[: self.settings.summary_batch_size]
        remaining = len(pending) - len(batch)
        logger.info(
            "Total pending emails: %d; processing batch of %d (%d will remain)",
            len(pending),
            len(batch),
            remaining,
        )

        result = BatchResult(message="", remaining=remaining)
        for item in batch:
            result.attempted += 1
            if await self._process(item, month_start):
                result.processed += 1
            else:
                result.failed += 1

        if remaining > 0:
            logger.info("Remaining emails to process: %d; triggering next batch", remaining)
            if not self.continuation.schedule():
                logger.error(
                    "Next batch was not triggered; %d pending emails wait for the next scheduled run", remaining
                )
        else:
            logger.info("No remaining emails. Batch processing complete")

        result.message = (
            f"Batch processing completed. Processed: {result.processed}, "
            f"Failed: {result.failed}, Remaining: {remaining}."
        )
        logger.info(result.message)
        return result

    async def _process(self, item: PendingDelivery, month: date) -> bool:
        """Send one summary; returns whether the email went out."""
        project_name = item.project_name
        email = item.summary.cf_email
        context = delivery_context(project_name, email)
        logger.info("Processing %s for project %s", email, project_name, extra=context)

        try:
            log_id = self.delivery_log.insert(project_name, email, month, DeliveryStatus.PENDING)
        except Exception as exc:
            logger.error("Error creating 'pending' log for %s/%s: %s", email, project_name, exc, extra=context)
            return False
        context = delivery_context(project_name, email, log_id)
        logger.info("Pending log %s created for %s/%s", log_id, email, project_name, extra=context)

        try:
            pdf = await asyncio.to_thread(self.renderer, project_name, item.summary, log_id)
            logger.info("PDF generated for %s/%s", email, project_name)
            await self.notifier(project_name, item.summary, pdf)
            logger.info("Email sent to %s for project %s", email, project_name, extra=context)
            self.delivered.add(delivery_key(project_name, email))
        except Exception as exc:
            logger.error(
                "Error processing email for %s on project %s: %s", email, project_name, exc, exc_info=True, extra=context
            )
            self._record_failure(item, month, log_id, exc)
            await self._pause()
            return False

        try:
            self.delivery_log.mark_sent(log_id, self.clock())
            logger.info("Log %s updated to 'sent' for %s/%s", log_id, email, project_name, extra=context)
        except Exception as exc:
            # The email is out; a stuck 'pending' row only risks a resend later
            logger.error(
                "Error updating log %s to 'sent' for %s/%s: %s", log_id, email, project_name, exc, extra=context
            )

        await self._pause()
        return True

    def _record_failure(self, item: PendingDelivery, month: date, log_id: Optional[int], exc: Exception) -> None:
        project_name = item.project_name
        email = item.summary.cf_email
        message = error_message(exc)
        if log_id is not None:
            try:
                self.delivery_log.mark_failed(log_id, message)
                logger.info("Log %s updated to 'failed' for %s/%s", log_id, email, project_name)
            except Exception as update_exc:
                logger.error(
                    "CRITICAL: could not mark log %s as 'failed' for %s/%s: %s",
                    log_id,
                    email,
                    project_name,
                    update_exc,
                )
            return

        logger.error("No log id for %s/%s; inserting a substitute 'failed' row", email, project_name)
        try:
            self.delivery_log.insert(
                project_name,
                email,
                month,
                DeliveryStatus.FAILED,
                error_message=f"Processing failed before log ID obtained: {message}",
            )
        except Exception as insert_exc:
            logger.error(
                "CRITICAL: failed to insert substitute 'failed' log for %s/%s: %s", email, project_name, insert_exc
            )

    async def _pause(self) -> None:
        await self.sleep(self.settings.summary_email_delay_ms / 1000.0)


async def run_until_complete(
    make_job: Callable[[], VendorPaymentSummaryJob],
    today: date | None = None,
    max_batches: int = 100,
) -> list[BatchResult]:
    """Run batches back to back in this process instead of re-invoking over HTTP.

    Keys delivered by earlier batches are treated as sent even when their log
    row never reached ``sent``, so nobody is emailed twice in one run. Stops
    when nothing is left, when a batch sends nothing, or when the backlog
    stops shrinking.
    """
    results: list[BatchResult] = []
    delivered: set[str] = set()
    previous_remaining: Optional[int] = None
    while len(results) < max_batches:
        job = make_job()
        job.already_sent |= delivered
        result = await job.run(today)
        delivered |= job.delivered
        results.append(result)
        if result.nothing_to_do or result.all_complete:
            break
        if result.processed == 0:
            logger.error("Batch sent nothing; stopping with %d emails still pending", result.remaining)
            break
        if previous_remaining is not None and result.remaining >= previous_remaining:
            logger.error("Backlog did not shrink; stopping with %d emails still pending", result.remaining)
            break
        previous_remaining = result.remaining
    return results


__all__ = [
    "BatchResult",
    "VendorPaymentSummaryJob",
    "error_message",
    "previous_month_window",
    "run_until_complete",
]
