"""Error taxonomy for the render and export pipeline."""
from __future__ import annotations

from typing import Any


class ReportValidationError(ValueError):
    """Malformed or incomplete report input. Never reaches rendering."""

    def __init__(self, issues: list[dict[str, Any]]):
        self.issues = issues
        paths = ", ".join(i["path"] or "<root>" for i in issues[:5])
        more = f" (+{len(issues) - 5} more)" if len(issues) > 5 else ""
        super().__init__(f"Invalid report payload at: {paths}{more}")

    @property
    def paths(self) -> list[str]:
        return [i["path"] for i in self.issues]


class AssetUnavailable(Exception):
    """An image reference could not be fetched. Absorbed by the hydrator."""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"{url}: {reason}")


class RenderFailure(Exception):
    """Page-level script or console error reported while the print engine loaded content."""


class ExportFailure(RuntimeError):
    """The print engine could not produce a PDF."""

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(detail)
