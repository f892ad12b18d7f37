"""
Component renderers: (component, report) -> HTML fragment.

All renderers are pure. Class lists are the structural base for each slot
followed by the component's style override for that slot (tw() appends, it
never removes base tokens). Dynamic text only enters markup through escape().
"""
from __future__ import annotations

from typing import Callable

from models import (
    DateComponent,
    DividerComponent,
    FooterTextComponent,
    HeaderComponent,
    ImageComponent,
    PagebreakComponent,
    ParaComponent,
    Report,
    SignatureComponent,
    SpacerComponent,
    SubheaderComponent,
    TableComponent,
)

from .errors import RenderFailure
from .format_utils import align_flex, cell_text, css_value, escape, format_display_date, tw

SPACER_HEIGHTS = {"xs": "h-2", "sm": "h-4", "md": "h-8", "lg": "h-12", "xl": "h-20"}

# Band heights reserved in the preview for the fixed header/footer.
HEADER_BAND_HEIGHT = "48px"
FOOTER_BAND_HEIGHT = "40px"
PAGE_BACKGROUND = "#FFFFFF"


# --- Block renderers ---


def render_header(c: HeaderComponent, report: Report) -> str:
    return f"""
<section class="{tw("mb-3", c.slot("wrapper"))}">
  <h1 class="{tw("text-2xl font-bold text-slate-800", c.slot("title"))}">{escape(c.props.text)}</h1>
</section>"""


def render_subheader(c: SubheaderComponent, report: Report) -> str:
    return f"""
<section class="{tw("mb-2", c.slot("wrapper"))}">
  <h2 class="{tw("text-xl font-semibold text-slate-700", c.slot("title"))}">{escape(c.props.text)}</h2>
</section>"""


def render_date(c: DateComponent, report: Report) -> str:
    wrapper = tw("mb-2 flex", align_flex(report.configs.date.align), c.slot("wrapper"))
    return f"""
<section class="{wrapper}">
  <div class="{tw("text-sm text-slate-600", c.slot("text"))}">{format_display_date(c.props.value)}</div>
</section>"""


def render_para(c: ParaComponent, report: Report) -> str:
    return f"""
<section class="{tw("mb-3", c.slot("wrapper"))}">
  <p class="{tw("text-justify", c.slot("text"))}">{escape(c.props.text)}</p>
</section>"""


def render_divider(c: DividerComponent, report: Report) -> str:
    return f"""
<hr class="{tw("my-4", c.slot("hr"))}" style="border-color:{escape(report.colors.border)}"/>"""


def render_spacer(c: SpacerComponent, report: Report) -> str:
    return f'<div class="{tw(SPACER_HEIGHTS[c.props.size], c.slot("wrapper"))}"></div>'


def render_pagebreak(c: PagebreakComponent, report: Report) -> str:
    return '<div class="pagebreak"></div>'


def render_signature(c: SignatureComponent, report: Report) -> str:
    border = escape(report.colors.border)
    line = f'<div class="border-b" style="border-color:{border};height:2rem;"></div>'
    lines = line * c.props.lines
    return f"""
<section class="{tw("mt-8", c.slot("wrapper"))}">
  <div class="flex flex-col gap-6 w-64">
    {lines}
    <div class="{tw("text-sm text-slate-600", c.slot("label"))}">{escape(c.props.label)}</div>
  </div>
</section>"""


def render_footer_text(c: FooterTextComponent, report: Report) -> str:
    cls = tw("mt-8 text-center text-sm text-slate-600", c.slot("text"))
    return f"""
<section class="{cls}">{escape(c.props.text)}</section>"""


def _table_row_class(index: int, striped: bool) -> str:
    return "bg-gray-50" if striped and index % 2 == 1 else ""


def render_table(c: TableComponent, report: Report) -> str:
    cfg = report.configs.table
    border = escape(report.colors.border)
    cell_pad = "py-1 px-2 text-sm" if cfg.compact else "py-2 px-3"

    title = ""
    if c.props.title:
        title = f'<div class="{tw("mb-2 font-semibold text-slate-800", c.slot("title"))}">{escape(c.props.title)}</div>'

    head_row = ""
    if c.props.headers:
        ths = "".join(
            f'<th class="{cell_pad} border-b font-semibold text-left" style="border-color:{border}">{escape(h)}</th>'
            for h in c.props.headers
        )
        head_row = f"<tr>{ths}</tr>"

    body_rows = []
    for i, row in enumerate(c.props.rows):
        tds = "".join(
            f'<td class="{cell_pad} border-b" style="border-color:{border}">{escape(cell_text(v))}</td>'
            for v in row
        )
        body_rows.append(f'<tr class="{_table_row_class(i, cfg.striped)}">{tds}</tr>')

    notes = ""
    if c.props.notes:
        notes = f'<div class="{tw("mt-2 text-xs text-slate-500", c.slot("notes"))}">{escape(c.props.notes)}</div>'

    return f"""
<section class="{tw("my-4", c.slot("wrapper"))}">
  {title}
  <div class="{tw("tbl-wrap overflow-x-auto", c.slot("container"))}">
    <table class="{tw("tbl w-full border-collapse", cfg.border, c.slot("table"))}"
           style="border-color:{border}">
      <thead class="{tw(c.slot("thead"))}">
        {head_row}
      </thead>
      <tbody>{"".join(body_rows)}</tbody>
    </table>
  </div>
  {notes}
</section>"""


def render_image(c: ImageComponent, report: Report) -> str:
    p = c.props
    caption = ""
    if p.caption:
        cap_cls = tw("text-xs text-slate-500 mt-1 text-center", c.slot("caption"))
        caption = f'<div class="{cap_cls}">{escape(p.caption)}</div>'
    if not p.url:
        # Unavailable image: keep the caption, drop the picture.
        if not caption:
            return ""
        return f"""
<section class="{tw("my-4", c.slot("wrapper"))}">
  {caption}
</section>"""
    sizing = ""
    if p.width:
        sizing += f"width:{escape(p.width)};"
    if p.height:
        sizing += f"height:{escape(p.height)};"
    return f"""
<section class="{tw("my-4", c.slot("wrapper"))}">
  <img src="{escape(p.url)}" alt="{escape(p.alt)}" class="{tw("max-w-full mx-auto", c.slot("img"))}" style="{sizing}"/>
  {caption}
</section>"""


RENDERERS: dict[str, Callable[..., str]] = {
    "header": render_header,
    "subheader": render_subheader,
    "date": render_date,
    "para": render_para,
    "divider": render_divider,
    "spacer": render_spacer,
    "pagebreak": render_pagebreak,
    "signature": render_signature,
    "footerText": render_footer_text,
    "table": render_table,
    "image": render_image,
}


def render_component(component, report: Report) -> str:
    try:
        renderer = RENDERERS[component.type]
    except KeyError:
        raise RenderFailure(f"No renderer registered for component type {component.type!r}") from None
    return renderer(component, report)


# --- Framing ---


def _title_markup(report: Report, title_class: str) -> str:
    assets = report.assets
    logo = ""
    if assets.logo:
        logo = f'<img src="{escape(assets.logo)}" alt="logo" class="h-8 mr-3"/>'
    if assets.headerImage:
        title = f'<img src="{escape(assets.headerImage)}" alt="header" class="h-10"/>'
    else:
        title = f'<div class="{title_class}">{escape(report.reportName)}</div>'
    return f"{logo}\n    {title}"


def _first_page_header(report: Report) -> str:
    header = report.configs.header
    if not (header.visible and header.repeat == "first"):
        return ""
    return f"""
<section class="mb-6 border-b pb-3" style="border-color:{escape(report.colors.border)}">
  <div class="flex items-center {align_flex(header.align)}">
    {_title_markup(report, "text-xl font-semibold")}
  </div>
</section>"""


def _fixed_header(report: Report) -> str:
    header = report.configs.header
    if not (header.visible and header.repeat == "all"):
        return ""
    return f"""
<header class="fixed-header border-b" style="border-color:{escape(report.colors.border)}">
  <div class="flex items-center {align_flex(header.align)} h-full px-4">
    {_title_markup(report, "font-semibold")}
  </div>
</header>"""


def preview_footer_text(text: str) -> str:
    """Footer text for the preview band: escaped, with page counters removed."""
    return escape(text).replace("{{pages}}", "").replace("{{page}}", "")


def _fixed_footer(report: Report) -> str:
    footer = report.configs.footer
    if not footer.visible:
        return ""
    image = ""
    if report.assets.footerImage:
        image = f'<img src="{escape(report.assets.footerImage)}" alt="footer" class="h-6 mr-2"/>'
    return f"""
<footer class="fixed-footer {align_flex(footer.align)} border-t px-4" style="border-color:{escape(report.colors.border)}">
  {image}
  <span class="text-sm text-gray-600">
    {preview_footer_text(footer.text)}
  </span>
</footer>"""


def render_body(report: Report) -> str:
    """Full <body> content: optional fixed bands around the main flow."""
    font = report.configs.font
    parts = "".join(render_component(c, report) for c in report.components)
    main = f"""
<main class="prose max-w-none text-[0] body-wrap">
  <div class="{tw("text-[inherit]", font.base, font.leading)}" style="font-family:{escape(font.family)}">
    {_first_page_header(report)}{parts}
  </div>
</main>"""
    return f"{_fixed_header(report)}{main}{_fixed_footer(report)}"


def render_head(report: Report) -> str:
    """Document stylesheet: palette, page geometry, band sizes, print rules."""
    cfg = report.configs
    header_h = HEADER_BAND_HEIGHT if cfg.header.visible and cfg.header.repeat == "all" else "0px"
    footer_h = FOOTER_BAND_HEIGHT if cfg.footer.visible else "0px"
    background = ""
    if report.assets.backgroundImage:
        background = f"""
  background-image:url('{css_value(report.assets.backgroundImage)}');
  background-size:cover;
  background-repeat:no-repeat;
  background-position:center top;"""
    return f"""
<style>
:root{{
  --color-primary:{css_value(report.colors.primary)};
  --color-accent:{css_value(report.colors.accent)};
  --color-text:{css_value(report.colors.text)};
  --color-muted:{css_value(report.colors.muted)};
  --color-border:{css_value(report.colors.border)};
  --color-bg:{PAGE_BACKGROUND};
  --page-size:{cfg.page.size};
  --page-orientation:{cfg.page.orientation};
  --page-margin:{css_value(cfg.page.margin)};
  --header-h:{header_h};
  --footer-h:{footer_h};
}}
body {{
  color: var(--color-text);
  background-color: var(--color-bg);{background}
}}
.body-wrap {{ padding-top: var(--header-h); padding-bottom: var(--footer-h); }}
.fixed-header {{
  position: fixed; top: 0; left: 0; right: 0; height: var(--header-h);
  background: var(--color-bg); z-index: 1000;
}}
.fixed-footer {{
  position: fixed; bottom: 0; left: 0; right: 0; height: var(--footer-h);
  background: var(--color-bg); z-index: 1000; display: flex; align-items: center;
}}
.pagebreak {{ page-break-after: always; }}

@page {{ size: var(--page-size) var(--page-orientation); margin: var(--page-margin); }}

@media print {{
  html, body {{ height: auto !important; }}

  .tbl {{ page-break-inside: auto; break-inside: auto; }}
  .tbl thead {{ display: table-header-group; }}
  .tbl tfoot {{ display: table-footer-group; }}
  .tbl tr {{ page-break-inside: avoid; break-inside: avoid; }}
  .tbl-wrap {{ overflow: visible !important; }}
}}
</style>"""
