# File: site_mapper/report/__init__.py
"""site_mapper.report: представление графа и отчёты (JSON, HTML, текст) для CLI и HTTP."""

from __future__ import annotations

from site_mapper.report.graph_view import BROKEN_COLOR, to_view
from site_mapper.report.html_report import render_html
from site_mapper.report.json_report import dumps_graph, render_json
from site_mapper.report.text_report import render_text

__all__ = ["BROKEN_COLOR", "dumps_graph", "render_html", "render_json", "render_text", "to_view"]
