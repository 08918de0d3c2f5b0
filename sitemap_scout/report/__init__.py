# File: sitemap_scout/report/__init__.py
"""sitemap_scout.report: report writers used by the CLI."""

from .json_report import render_json

__all__ = ["render_json"]
