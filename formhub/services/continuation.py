"""Scheduling of the next summary batch."""

from __future__ import annotations

import asyncio
import logging

import httpx

from formhub.core.config import Settings

logger = logging.getLogger(__name__)


class HttpContinuation:
    """Re-POSTs the summary job endpoint without waiting for its response.

    The request runs on a background task; a read timeout only means the next
    batch is still running on the other side.
    """

    def __init__(self, settings: Settings, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self.settings = settings
        self._transport = transport
        self._tasks: set[asyncio.Task] = set()

    def schedule(self) -> bool:
        url = self.settings.summary_function_url
        token = self.settings.service_token
        if not url or not token:
            logger.error("Cannot trigger next batch: PUBLIC_BASE_URL or SERVICE_TOKEN is not configured")
            return False

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.error("Cannot trigger next batch: no running event loop")
            return False

        task = loop.create_task(self._post(url, token))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        logger.info("Triggered next batch via %s", url)
        return True

    async def _post(self, url: str, token: str) -> None:
        headers = {"Authorization": f"Bearer {token}", "Content-Type": "application/json"}
        try:
            async with httpx.AsyncClient(timeout=self.settings.self_trigger_timeout, transport=self._transport) as client:
                response = await client.post(url, json={}, headers=headers)
            if response.status_code >= 400:
                logger.error("Next batch invocation returned %s: %s", response.status_code, response.text[:500])
        except httpx.ReadTimeout:
            logger.info("Next batch invocation still running after %.1fs; not waiting", self.settings.self_trigger_timeout)
        except httpx.HTTPError as exc:
            logger.error("Failed to trigger next batch: %s", exc, exc_info=True)


class NoContinuation:
    """Used by in-process runners that loop over batches themselves."""

    def schedule(self) -> bool:
        return False


__all__ = ["HttpContinuation", "NoContinuation"]
