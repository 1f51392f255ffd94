# File: sitewatch/report/__init__.py
"""sitewatch.report: JSON and HTML rendering of comparison reports, used by the CLI."""

from .html_report import DEFAULT_TEMPLATE_DIR, render_html
from .json_report import render_json

__all__ = ["render_json", "render_html", "DEFAULT_TEMPLATE_DIR"]
