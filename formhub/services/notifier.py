"""Outbound email for monthly vendor payment summaries."""

from __future__ import annotations

import asyncio
import base64
import logging
import smtplib
from email.message import EmailMessage
from html import escape

import httpx

from formhub.core.config import Settings
from formhub.services.aggregation import PersonProjectSummary

logger = logging.getLogger(__name__)


class EmailDeliveryError(RuntimeError):
    """The email provider rejected or could not accept the message."""


def summary_subject(project_name: str) -> str:
    return f"Vendor Payment Summary - {project_name}"


def summary_filename(project_name: str, summary: PersonProjectSummary) -> str:
    month = summary.submission_date.strftime("%Y-%m")
    slug = "".join(ch if ch.isalnum() else "-" for ch in project_name).strip("-") or "project"
    return f"vendor-payment-{slug}-{month}.pdf"


def summary_html(project_name: str, summary: PersonProjectSummary) -> str:
    month = summary.submission_date.strftime("%B %Y")
    name = escape(summary.cf_name or summary.cf_email)
    return (
        f"<p>Hi {name},</p>"
        f"<p>Attached is your vendor payment summary for <b>{escape(project_name)}</b> "
        f"covering {month}.</p>"
        f"<p>Total for this project: <b>${summary.total_pay_for_project:,.2f}</b></p>"
        "<p>Please reply to this email if anything looks incorrect.</p>"
    )


class EmailNotifier:
    """Sends the summary PDF through Resend (HTTP) or a plain SMTP relay."""

    def __init__(self, settings: Settings, client: httpx.AsyncClient | None = None) -> None:
        self.settings = settings
        self._client = client

    async def __call__(self, project_name: str, summary: PersonProjectSummary, pdf: bytes) -> None:
        await self.send(project_name, summary, pdf)

    async def send(self, project_name: str, summary: PersonProjectSummary, pdf: bytes) -> None:
        channel = self.settings.email_channel.lower()
        if channel == "resend":
            await self._send_resend(project_name, summary, pdf)
        elif channel == "smtp":
            await asyncio.to_thread(self._send_smtp, project_name, summary, pdf)
        else:
            raise EmailDeliveryError(f"Unsupported email channel: {self.settings.email_channel}")

    async def _send_resend(self, project_name: str, summary: PersonProjectSummary, pdf: bytes) -> None:
        if not self.settings.resend_api_key:
            raise EmailDeliveryError("RESEND_API_KEY is not configured")
        payload = {
            "from": self.settings.email_from,
            "to": [summary.cf_email],
            "subject": summary_subject(project_name),
            "html": summary_html(project_name, summary),
            "attachments": [
                {
                    "filename": summary_filename(project_name, summary),
                    "content": base64.b64encode(pdf).decode("ascii"),
                }
            ],
        }
        headers = {"Authorization": f"Bearer {self.settings.resend_api_key}"}
        if self._client is not None:
            response = await self._client.post(
                self.settings.resend_api_url, json=payload, headers=headers, timeout=self.settings.email_timeout
            )
        else:
            async with httpx.AsyncClient() as client:
                response = await client.post(
                    self.settings.resend_api_url, json=payload, headers=headers, timeout=self.settings.email_timeout
                )
        if response.status_code >= 400:
            logger.error("Resend rejected email to %s: %s %s", summary.cf_email, response.status_code, response.text[:500])
            raise EmailDeliveryError(f"Resend returned {response.status_code}: {response.text[:200]}")
        logger.info("Resend accepted email to %s for project %s", summary.cf_email, project_name)

    def _send_smtp(self, project_name: str, summary: PersonProjectSummary, pdf: bytes) -> None:
        msg = EmailMessage()
        msg["From"] = self.settings.email_from
        msg["To"] = summary.cf_email
        msg["Subject"] = summary_subject(project_name)
        msg.set_content(f"Your vendor payment summary for {project_name} is attached.\n")
        msg.add_alternative(summary_html(project_name, summary), subtype="html")
        msg.add_attachment(
            pdf,
            maintype="application",
            subtype="pdf",
            filename=summary_filename(project_name, summary),
        )
        try:
            with smtplib.SMTP(self.settings.smtp_host, self.settings.smtp_port, timeout=self.settings.email_timeout) as smtp:
                smtp.send_message(msg)
        except (smtplib.SMTPException, OSError) as exc:
            raise EmailDeliveryError(f"SMTP delivery failed: {exc}") from exc
        logger.info("SMTP accepted email to %s for project %s", summary.cf_email, project_name)


__all__ = ["EmailDeliveryError", "EmailNotifier", "summary_filename", "summary_html", "summary_subject"]
