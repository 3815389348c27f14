"""PDF rendering for a person's monthly project summary."""

from __future__ import annotations

import io
import logging
from typing import Optional
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER, TA_RIGHT
from reportlab.lib.pagesizes import letter
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from formhub.services.aggregation import PersonProjectSummary

logger = logging.getLogger(__name__)


def _money(value: float) -> str:
    return f"${value:,.2f}"


def _hours(value: float) -> str:
    return f"{value:g}"


class SummaryReportRenderer:
    """Renders one PersonProjectSummary into a single-document PDF."""

    def __init__(self, org_name: str = "Form Hub") -> None:
        self.org_name = org_name

    def __call__(self, project_name: str, summary: PersonProjectSummary, log_id: Optional[int]) -> bytes:
        return self.render(project_name, summary, log_id)

    def render(self, project_name: str, summary: PersonProjectSummary, log_id: Optional[int]) -> bytes:
        buffer = io.BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=letter,
            rightMargin=36,
            leftMargin=36,
            topMargin=36,
            bottomMargin=36,
            title=f"Vendor Payment Summary - {project_name}",
        )
        styles = getSampleStyleSheet()
        title_style = ParagraphStyle(
            "SummaryTitle", parent=styles["Heading2"], alignment=TA_CENTER, textColor=colors.HexColor("#1f4e79")
        )
        body = styles["BodyText"]
        meta_right = ParagraphStyle("MetaRight", parent=body, alignment=TA_RIGHT)
        footer = ParagraphStyle("Footer", parent=body, fontSize=8, textColor=colors.HexColor("#6b7280"))

        month_label = summary.submission_date.strftime("%B %Y")
        story = [
            Paragraph(escape(f"{self.org_name} - Vendor Payment Summary"), title_style),
            Spacer(1, 6),
        ]

        header_tbl = Table(
            [
                [
                    Paragraph(
                        f"<b>{escape(summary.cf_name or summary.cf_email)}</b><br/>"
                        f"{escape(summary.cf_email)}<br/>{escape(summary.cf_tier or '')}",
                        body,
                    ),
                    Paragraph(f"<b>Project</b><br/>{escape(project_name)}<br/>{month_label}", meta_right),
                ]
            ],
            colWidths=[doc.width * 0.6, doc.width * 0.4],
        )
        header_tbl.setStyle(
            TableStyle(
                [
                    ("VALIGN", (0, 0), (-1, -1), "TOP"),
                    ("LEFTPADDING", (0, 0), (-1, -1), 0),
                    ("RIGHTPADDING", (0, 0), (-1, -1), 0),
                ]
            )
        )
        story.append(header_tbl)
        story.append(Spacer(1, 12))

        rows = [["DATE", "TASK", "HOURS", "RATE", "PAY"]]
        for entry in sorted(summary.detailed_entries, key=lambda e: e.submission_date):
            rows.append(
                [
                    entry.submission_date.isoformat(),
                    Paragraph(escape(entry.task_name), body),
                    _hours(entry.work_hours),
                    _money(entry.rate),
                    _money(entry.entry_pay),
                ]
            )
        rows.append(["", "Total", "", "", _money(summary.total_pay_for_project)])

        line_tbl = Table(rows, colWidths=[1.1 * inch, 3.0 * inch, 0.9 * inch, 1.0 * inch, 1.2 * inch])
        line_tbl.setStyle(
            TableStyle(
                [
                    ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#eef3f8")),
                    ("TEXTCOLOR", (0, 0), (-1, 0), colors.HexColor("#1f4e79")),
                    ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
                    ("FONTNAME", (0, -1), (-1, -1), "Helvetica-Bold"),
                    ("FONTSIZE", (0, 0), (-1, -1), 9),
                    ("LINEBELOW", (0, 0), (-1, 0), 0.5, colors.HexColor("#cbd5e1")),
                    ("LINEBELOW", (0, 1), (-1, -2), 0.5, colors.HexColor("#e2e8f0")),
                    ("LINEABOVE", (0, -1), (-1, -1), 0.75, colors.HexColor("#94a3b8")),
                    ("ALIGN", (2, 0), (-1, -1), "RIGHT"),
                    ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
                ]
            )
        )
        story.append(line_tbl)
        story.append(Spacer(1, 18))
        story.append(Paragraph(f"Reference #{log_id if log_id is not None else 'n/a'}", footer))

        doc.build(story)
        pdf = buffer.getvalue()
        logger.debug("Rendered %d byte PDF for %s / %s", len(pdf), summary.cf_email, project_name)
        return pdf


__all__ = ["SummaryReportRenderer"]
