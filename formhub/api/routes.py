"""Health endpoint."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from formhub.api.deps import get_db, get_settings
from formhub.core.config import Settings

logger = logging.getLogger(__name__)

health_router = APIRouter(tags=["system"])


@health_router.get("/health", summary="Service and database health")
def healthcheck(
    settings: Settings = Depends(get_settings),
    session: Session = Depends(get_db),
) -> dict[str, str]:
    try:
        session.execute(text("SELECT 1"))
        database = "ok"
    except SQLAlchemyError as exc:
        logger.warning("Health check could not reach the database: %s", exc)
        database = "unavailable"
    return {"status": "ok", "version": settings.app_version, "database": database}
