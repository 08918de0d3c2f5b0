# sitemap_scout/report/json_report.py

"""
JSON report for SitemapScout.

Serialises a MapSiteResult to a file.
"""
from pathlib import Path

from sitemap_scout.crawler.models import MapSiteResult


def render_json(result: MapSiteResult, output_path: Path | str) -> Path:
    """
    Save *result* as JSON at *output_path*.

    :param result: MapSiteResult of a finished traversal
    :param output_path: path of the JSON file
    :return: Path of the saved file

    Example:
    ```python
    from sitemap_scout.report.json_report import render_json
    report_path = render_json(result, 'reports/sitemap.json')
    print(f"JSON report saved to: {report_path}")
    ```
    """
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(result.json(pretty=True), encoding="utf-8")
    return output
