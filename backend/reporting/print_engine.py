"""
Print engine binding: HTML + page geometry + header/footer fragments -> PDF bytes.

Chromium is driven through Playwright. One browser per call; it is never
shared across requests and is closed on every exit path.
"""
from __future__ import annotations

import logging
import os
from typing import Literal, Protocol

from pydantic import BaseModel, ConfigDict, Field

from .errors import ExportFailure, RenderFailure

logger = logging.getLogger(__name__)

PDF_BROWSER_ARGS = [
    a.strip()
    for a in os.environ.get("PDF_BROWSER_ARGS", "--no-sandbox,--disable-setuid-sandbox").split(",")
    if a.strip()
]

_ZERO_MARGIN = {"top": "0mm", "bottom": "0mm", "left": "0mm", "right": "0mm"}


class PdfOptions(BaseModel):
    """Page geometry handed to the print engine."""
    model_config = ConfigDict(frozen=True)

    format: Literal["A4", "Letter"] = "A4"
    landscape: bool = False
    print_background: bool = True
    display_header_footer: bool = True
    # Content is flush; the header/footer fragments reserve their own band.
    margin: dict[str, str] = Field(default_factory=lambda: dict(_ZERO_MARGIN))
    prefer_css_page_size: bool = False

    @property
    def is_letter(self) -> bool:
        return self.format == "Letter"


class PrintEngine(Protocol):
    async def render_pdf(
        self,
        html: str,
        options: PdfOptions,
        header_template: str,
        footer_template: str,
    ) -> bytes:
        ...


def _log_page_error(error: object) -> None:
    logger.error("%s", RenderFailure(f"pageerror: {error}"))


def _log_console(msg) -> None:
    if msg.type == "error":
        logger.error("%s", RenderFailure(f"console: {msg.text}"))


class PlaywrightPrintEngine:
    """Headless Chromium via playwright.async_api."""

    def __init__(self, launch_args: list[str] | None = None):
        self.launch_args = list(PDF_BROWSER_ARGS if launch_args is None else launch_args)

    async def render_pdf(
        self,
        html: str,
        options: PdfOptions,
        header_template: str,
        footer_template: str,
    ) -> bytes:
        try:
            from playwright.async_api import async_playwright
        except ImportError as e:
            raise ExportFailure(
                "Playwright is required for PDF. Install: pip install playwright && playwright install chromium"
            ) from e

        try:
            async with async_playwright() as p:
                browser = await p.chromium.launch(headless=True, args=self.launch_args)
                try:
                    page = await browser.new_page()
                    page.on("pageerror", _log_page_error)
                    page.on("console", _log_console)
                    await page.set_content(html, wait_until="load")
                    await page.wait_for_load_state("networkidle")
                    await page.emulate_media(media="print")
                    return await page.pdf(
                        header_template=header_template,
                        footer_template=footer_template,
                        **options.model_dump(),
                    )
                finally:
                    await browser.close()
        except ExportFailure:
            raise
        except Exception as e:
            raise ExportFailure(str(e) or e.__class__.__name__) from e
