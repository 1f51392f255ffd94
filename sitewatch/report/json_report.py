# sitewatch/report/json_report.py

"""
JSON report generation for SiteWatch.

Serialises a ComparisonReport to a file.
"""
import json
from pathlib import Path

from sitewatch.compare import ComparisonReport


def render_json(report: ComparisonReport, output_path: Path | str, *, pretty: bool = True) -> Path:
    """
    Save *report* as JSON at *output_path*.

    :param report: ComparisonReport produced by compare_folders
    :param output_path: path of the JSON file
    :return: Path of the saved file

    Example:
    ```python
    from sitewatch.report.json_report import render_json
    report_path = render_json(report, 'reports/report.json')
    print(f"JSON report saved to: {report_path}")
    ```
    """
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)

    with output.open('w', encoding='utf-8') as f:
        json.dump(report.to_dict(), f, ensure_ascii=False, indent=2 if pretty else None)

    return output
