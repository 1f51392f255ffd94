# File: sitewatch/report/html_report.py
"""sitewatch.report.html_report: HTML comparison report rendered with Jinja2."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Union

from jinja2 import Environment, FileSystemLoader, select_autoescape

from sitewatch.compare import ComparisonReport

DEFAULT_TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"


def render_html(
    report: ComparisonReport,
    template_dir: Union[Path, str, None],
    output_path: Union[Path, str],
) -> Path:
    """Render the comparison report from a template and save it.

    Args:
        report: ComparisonReport instance.
        template_dir: directory holding ``report.html.j2``; None uses the bundled one.
        output_path: path of the resulting HTML file.

    Returns:
        Path of the saved HTML file.
    """
    template_dir = Path(template_dir) if template_dir else DEFAULT_TEMPLATE_DIR
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    env = Environment(
        loader=FileSystemLoader(str(template_dir)),
        autoescape=select_autoescape(["html", "xml", "j2"]),
    )
    template = env.get_template("report.html.j2")

    context: dict[str, Any] = {
        "original": report.original,
        "latest": report.latest,
        "files_added": report.files_added,
        "files_removed": report.files_removed,
        "files_changed": report.files_changed,
        "lines_added": report.lines_added,
        "lines_removed": report.lines_removed,
    }

    output_path.write_text(template.render(**context), encoding="utf-8")
    return output_path
