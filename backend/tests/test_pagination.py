"""Tests for the per-page header/footer fragments handed to the print engine."""
from models import validate_report
from reporting.pagination import (
    EMPTY_FRAGMENT,
    footer_template,
    footer_text_markup,
    header_template,
)


def _report(minimal_payload, **overrides):
    return validate_report({**minimal_payload, **overrides})


def test_default_footer_expands_counters_and_wraps_words():
    html = footer_text_markup("Page {{page}} of {{pages}}")
    assert html.count('<span class="pageNumber"></span>') == 1
    assert html.count('<span class="totalPages"></span>') == 1
    assert '<span style="padding-right:2px;">Page</span>' in html
    assert '<span style="padding:0 2px;">of</span>' in html
    assert "{{" not in html


def test_counters_are_padded_with_non_breaking_spaces():
    html = footer_text_markup("{{page}}/{{pages}}")
    assert html == (
        '&nbsp;<span class="pageNumber"></span>&nbsp;/&nbsp;<span class="totalPages"></span>'
    )


def test_footer_text_is_escaped_before_markers():
    html = footer_text_markup("<b>Draft</b> {{page}}")
    assert "&lt;b&gt;Draft&lt;/b&gt;" in html
    assert '<span class="pageNumber"></span>' in html


def test_only_leading_page_word_is_wrapped():
    html = footer_text_markup("Confidential - Page {{page}}")
    assert "padding-right:2px" not in html


def test_empty_footer_text_falls_back_to_default():
    html = footer_text_markup("")
    assert 'class="pageNumber"' in html and 'class="totalPages"' in html


def test_hidden_bands_are_empty_placeholders(minimal_payload):
    report = _report(minimal_payload, configs={"header": {"visible": False}, "footer": {"visible": False}})
    assert header_template(report) == EMPTY_FRAGMENT
    assert footer_template(report) == EMPTY_FRAGMENT


def test_header_fragment_shows_escaped_name_with_inline_styles(minimal_payload):
    report = _report(
        minimal_payload,
        reportName="Smith & Sons <2024>",
        configs={"header": {"align": "right"}, "font": {"family": "Georgia, 'Times New Roman', serif"}},
    )
    html = header_template(report)
    assert "Smith &amp; Sons &lt;2024&gt;" in html
    assert "justify-content:flex-end;" in html
    assert "border-bottom:1px solid #E5E7EB;" in html
    assert "color:#111827;" in html
    assert "font-family:Georgia, &#39;Times New Roman&#39;, serif;" in html
    assert "<img" not in html


def test_header_fragment_logo_precedes_header_image(minimal_payload):
    report = _report(
        minimal_payload,
        assets={"logo": "data:image/png;base64,LOGO", "headerImage": "data:image/png;base64,HEAD"},
    )
    html = header_template(report)
    assert html.index("LOGO") < html.index("HEAD")
    assert "Quarterly Review" not in html


def test_footer_fragment_image_precedes_text(minimal_payload):
    report = _report(
        minimal_payload,
        assets={"footerImage": "data:image/png;base64,FOOT"},
        configs={"footer": {"align": "left", "text": "Acme {{page}}"}},
    )
    html = footer_template(report)
    assert html.index("FOOT") < html.index("Acme")
    assert "justify-content:flex-start;" in html
    assert "border-top:1px solid #E5E7EB;" in html
    assert "font-variant-numeric:tabular-nums;" in html
