"""Document shell wrapping a rendered head and body."""
from __future__ import annotations

TAILWIND_CDN = "https://cdn.tailwindcss.com"

# Hides the preview's fixed bands when printing; the print engine draws its own per page.
PRINT_HIDE_FIXED_BANDS = "<style>@media print { .fixed-header, .fixed-footer { display:none !important; } }</style>"


def html_shell(head: str, body: str) -> str:
    return f"""<!doctype html>
<html lang="en">
<head>
<meta charset="utf-8"/>
<meta name="viewport" content="width=device-width,initial-scale=1"/>
<script src="{TAILWIND_CDN}"></script>
{head}
<style>
@media print {{
  .pagebreak {{ page-break-after: always; }}
  .avoid-break-inside {{ break-inside: avoid; }}
}}
</style>
</head>
<body class="text-slate-900">
{body}
</body>
</html>"""
