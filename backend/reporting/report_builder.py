"""
Build report HTML (live preview) and PDF (paginated export) from a report payload.

Export sequence: validate -> hydrate assets -> render head + body -> build
pagination fragments -> print engine -> PdfExport. Validation failures stop
before any fetch or browser launch.
"""
from __future__ import annotations

import logging
from typing import Any, Optional

import httpx
from pydantic import BaseModel

from models import Report, validate_report

from .assets import hydrate_report
from .format_utils import safe_filename
from .pagination import footer_template, header_template
from .print_engine import PdfOptions, PlaywrightPrintEngine, PrintEngine
from .renderers import render_body, render_head
from .template import PRINT_HIDE_FIXED_BANDS, html_shell

logger = logging.getLogger(__name__)

DEFAULT_FILENAME = "report"


class PdfExport(BaseModel):
    filename: str
    content: bytes

    @property
    def content_disposition(self) -> str:
        name = self.filename.replace('"', "")
        return f'inline; filename="{name}"'


def pdf_filename(report: Report) -> str:
    return f"{safe_filename(report.reportName, default=DEFAULT_FILENAME)}.pdf"


def pdf_options(report: Report) -> PdfOptions:
    page = report.configs.page
    return PdfOptions(format=page.size, landscape=page.orientation == "landscape")


def render_report_html(report: Report) -> str:
    """Preview document for an already-validated report."""
    return html_shell(render_head(report), render_body(report))


def render_print_html(report: Report) -> str:
    """Document handed to the print engine: preview bands hidden under print media."""
    return html_shell(render_head(report) + PRINT_HIDE_FIXED_BANDS, render_body(report))


def build_report_html(raw: Any) -> str:
    """Validate raw input and return the live-preview HTML. Raises ReportValidationError."""
    return render_report_html(validate_report(raw))


async def build_report_pdf(
    raw: Any,
    engine: Optional[PrintEngine] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> PdfExport:
    """
    Validate, hydrate and print a report.

    Raises ReportValidationError (client input) or ExportFailure (print engine).
    Unreachable images never raise; they are dropped from the output.
    """
    report = validate_report(raw)
    report = await hydrate_report(report, client=client)

    html = render_print_html(report)
    options = pdf_options(report)
    engine = engine or PlaywrightPrintEngine()
    logger.info(
        "Printing report=%r components=%d format=%s landscape=%s",
        report.reportName, len(report.components), options.format, options.landscape,
    )
    content = await engine.render_pdf(
        html,
        options,
        header_template(report),
        footer_template(report),
    )
    return PdfExport(filename=pdf_filename(report), content=content)
