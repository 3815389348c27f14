"""Endpoint that runs one batch of the monthly vendor payment summary job."""

from __future__ import annotations

import hmac
import logging
import traceback
from typing import Optional

from fastapi import APIRouter, Depends, Header
from fastapi.responses import JSONResponse

from formhub.api.deps import get_settings, get_summary_job
from formhub.core.config import SUMMARY_FUNCTION_PATH, Settings
from formhub.services.summary_job import VendorPaymentSummaryJob, error_message

logger = logging.getLogger(__name__)

router = APIRouter(tags=["summaries"])


def _authorized(settings: Settings, authorization: Optional[str]) -> bool:
    if not settings.service_token:
        return True
    expected = f"Bearer {settings.service_token}"
    return authorization is not None and hmac.compare_digest(authorization.encode(), expected.encode())


@router.post(SUMMARY_FUNCTION_PATH)
async def send_vendor_payment_summaries(
    authorization: Optional[str] = Header(default=None),
    settings: Settings = Depends(get_settings),
    job: VendorPaymentSummaryJob = Depends(get_summary_job),
) -> JSONResponse:
    if not _authorized(settings, authorization):
        logger.warning("Rejected summary job invocation with missing or invalid credential")
        return JSONResponse({"error": "Unauthorized"}, status_code=401)

    try:
        result = await job.run()
    except Exception as exc:
        logger.error("Global error in summary job: %s", exc, exc_info=True)
        return JSONResponse(
            {
                "error": error_message(exc),
                "stack": "".join(traceback.format_exception(type(exc), exc, exc.__traceback__)),
                "name": type(exc).__name__,
            },
            status_code=500,
        )
    return JSONResponse(result.as_payload(), status_code=200)


@router.api_route(
    SUMMARY_FUNCTION_PATH,
    methods=["GET", "HEAD", "PUT", "PATCH", "DELETE", "OPTIONS"],
    include_in_schema=False,
)
async def reject_method() -> JSONResponse:
    logger.info("Invalid request method for summary job")
    return JSONResponse({"error": "Method not allowed"}, status_code=405)


__all__ = ["router"]
