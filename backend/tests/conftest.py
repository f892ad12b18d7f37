"""Add backend to path so 'from models import' resolves when run from project root."""
import os
import sys

import pytest

_backend_dir = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if _backend_dir not in sys.path:
    sys.path.insert(0, _backend_dir)


@pytest.fixture
def minimal_payload() -> dict:
    return {
        "company": "Acme Logistics",
        "reportName": "Quarterly Review",
        "components": [{"type": "para", "props": {"text": "Hello"}}],
    }


class FakePrintEngine:
    """Records every call instead of launching a browser."""

    def __init__(self, content: bytes = b"%PDF-1.7 fake", error: Exception | None = None):
        self.content = content
        self.error = error
        self.calls: list[dict] = []

    async def render_pdf(self, html, options, header_template, footer_template):
        self.calls.append(
            {
                "html": html,
                "options": options,
                "header_template": header_template,
                "footer_template": footer_template,
            }
        )
        if self.error is not None:
            raise self.error
        return self.content


@pytest.fixture
def fake_engine() -> FakePrintEngine:
    return FakePrintEngine()
