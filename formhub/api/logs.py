"""Recent log records, filterable down to one recipient's deliveries."""

from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, Query

from formhub.core.logging_config import get_log_buffer

router = APIRouter(prefix="/logs", tags=["logs"])


@router.get("")
def list_logs(
    limit: int = Query(100, ge=1, le=500),
    level: Optional[str] = Query(None, description="e.g. ERROR"),
    cf_email: Optional[str] = Query(None, description="Only records about this recipient"),
) -> dict[str, list[dict[str, Any]]]:
    return {"logs": get_log_buffer(limit=limit, level=level, cf_email=cf_email)}


__all__ = ["router"]
