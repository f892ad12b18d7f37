"""
Text helpers shared by the renderers and pagination templates.

escape() is the single chokepoint for user-supplied text entering markup.
"""
from __future__ import annotations

import re
import unicodedata
from datetime import date, datetime
from typing import Any, Optional

_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")

_ESCAPES = (
    ("&", "&amp;"),
    ("<", "&lt;"),
    (">", "&gt;"),
    ('"', "&quot;"),
    ("'", "&#39;"),
)


def escape(value: Any) -> str:
    """HTML-escape any value; None becomes an empty string."""
    if value is None:
        return ""
    text = str(value)
    for raw, entity in _ESCAPES:
        text = text.replace(raw, entity)
    return text


def tw(*classes: Optional[str]) -> str:
    """Join class tokens, dropping empty ones. Overrides go last and never replace the base."""
    return " ".join(escape(c) for c in classes if c)


def align_flex(align: str) -> str:
    """Tailwind justify-* class for an alignment token."""
    if align == "left":
        return "justify-start"
    if align == "center":
        return "justify-center"
    return "justify-end"


def justify_css(align: str) -> str:
    """Raw CSS justify-content value, for fragments rendered without Tailwind."""
    if align == "left":
        return "flex-start"
    if align == "right":
        return "flex-end"
    return "center"


def css_value(value: Any) -> str:
    """Value interpolated into a <style> block, where entities are not decoded."""
    if value is None:
        return ""
    return re.sub(r"[<>\"'{}\\\n\r]", "", str(value))


def today() -> date:
    return date.today()


def format_display_date(value: Optional[str]) -> str:
    """
    "YYYY-MM-DD..." -> "DD Mon YYYY". Missing -> today. Unparseable -> escaped raw text.

    Returned text is already markup-safe.
    """
    if not value:
        d = today()
    else:
        try:
            d = datetime.strptime(value[:10], "%Y-%m-%d").date()
        except ValueError:
            return escape(value)
    return f"{d.day:02d} {_MONTHS[d.month - 1]} {d.year}"


def cell_text(value: Any) -> str:
    """Table cell as display text: None -> "", integral floats without a trailing .0."""
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def safe_filename(raw: str, default: str = "report") -> str:
    """Filesystem- and header-safe base name derived from a report name."""
    text = unicodedata.normalize("NFKD", raw or "")
    text = "".join(ch for ch in text if not unicodedata.combining(ch))
    text = re.sub(r"[^A-Za-z0-9._-]+", "_", text)
    text = re.sub(r"[._-]*_[._-]*", "_", text)
    text = re.sub(r"([.-])\1+", r"\1", text)
    text = text.strip("._-")
    return text or default
