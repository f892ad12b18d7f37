"""
Header/footer fragments for the print engine.

The engine evaluates each fragment once per physical page in an isolated
context: no access to the document stylesheet or Tailwind, so everything is
inline-styled. Counter placeholders become the engine's pageNumber/totalPages
spans.
"""
from __future__ import annotations

import re

from models import Report

from .format_utils import escape, justify_css

EMPTY_FRAGMENT = "<div></div>"
DEFAULT_FOOTER_TEXT = "Page {{page}} of {{pages}}"

# Adjacent plain spaces collapse around the injected counter spans ("Page1of5").
PAGE_MARKER = '&nbsp;<span class="pageNumber"></span>&nbsp;'
PAGES_MARKER = '&nbsp;<span class="totalPages"></span>'

_LEADING_PAGE = re.compile(r"^Page\b", re.IGNORECASE)
_WORD_OF = re.compile(r"\bof\b", re.IGNORECASE)


def _band_style(report: Report, align: str, rule: str, extra: str = "") -> str:
    return (
        "font-size:10px;"
        f"color:{escape(report.colors.text)};"
        "width:100%;"
        "padding:4px 0;"
        "display:flex;"
        "align-items:center;"
        f"justify-content:{justify_css(align)};"
        f"{rule}:1px solid {escape(report.colors.border)};"
        f"font-family:{escape(report.configs.font.family)};"
        "margin:0 15mm;"
        f"{extra}"
    )


def header_template(report: Report) -> str:
    """Logo (optional) then header image or escaped report name."""
    header = report.configs.header
    if not header.visible:
        return EMPTY_FRAGMENT
    assets = report.assets
    logo = ""
    if assets.logo:
        logo = f'<img src="{escape(assets.logo)}" style="height:14px;margin-right:8px;" />'
    if assets.headerImage:
        title = f'<img src="{escape(assets.headerImage)}" style="height:18px;" />'
    else:
        title = f'<div style="font-weight:600;">{escape(report.reportName)}</div>'
    return f"""
<div style="{_band_style(report, header.align, "border-bottom")}">
  {logo}{title}
</div>"""


def footer_text_markup(text: str) -> str:
    """Escape footer text and swap {{page}}/{{pages}} for engine counter spans."""
    html = escape(text or DEFAULT_FOOTER_TEXT)
    html = html.replace("{{pages}}", PAGES_MARKER).replace("{{page}}", PAGE_MARKER)
    html = _LEADING_PAGE.sub(lambda m: f'<span style="padding-right:2px;">{m.group(0)}</span>', html, count=1)
    html = _WORD_OF.sub(lambda m: f'<span style="padding:0 2px;">{m.group(0)}</span>', html, count=1)
    return html


def footer_template(report: Report) -> str:
    """Footer image (optional) then the counter-expanded footer text."""
    footer = report.configs.footer
    if not footer.visible:
        return EMPTY_FRAGMENT
    image = ""
    if report.assets.footerImage:
        image = f'<img src="{escape(report.assets.footerImage)}" style="height:14px;margin-right:8px;" />'
    style = _band_style(report, footer.align, "border-top", "font-variant-numeric:tabular-nums;")
    return f"""
<div style="{style}">
  {image}{footer_text_markup(footer.text)}
</div>"""
