"""Form Hub FastAPI application package."""

import logging

from fastapi import FastAPI

from .api import api_router
from .core.config import Settings
from .core.logging_config import setup_logging
from .db.session import build_engine, init_db
from .services.continuation import HttpContinuation
from .services.notifier import EmailNotifier
from .services.pdf_report import SummaryReportRenderer


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or Settings()
    setup_logging(service_name=settings.service_name, level=settings.log_level)
    logger = logging.getLogger(__name__)
    logger.info("Initializing %s API", settings.app_name)

    app = FastAPI(title=settings.app_name, version=settings.app_version)
    app.state.settings = settings
    app.state.engine = build_engine(settings)
    app.state.report_renderer = SummaryReportRenderer(org_name=settings.report_org_name)
    app.state.notifier = EmailNotifier(settings)
    app.state.continuation = HttpContinuation(settings)
    app.include_router(api_router, prefix=settings.api_prefix)

    @app.get("/", include_in_schema=False)
    async def root() -> dict[str, str]:
        """Provide a friendly landing response for the bare hostname."""

        return {
            "message": (
                f"{settings.app_name} API is online. Try GET "
                f"{settings.api_prefix}/health for a health check."
            )
        }

    @app.on_event("startup")
    def _init_database() -> None:
        init_db(app.state.engine)

    return app


__all__ = ["create_app"]
