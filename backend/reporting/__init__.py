"""Report rendering: component markup, pagination fragments and PDF export."""
