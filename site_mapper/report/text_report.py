# site_mapper/report/text_report.py
"""Plain-text crawl summary, one line per edge or broken page."""
from __future__ import annotations

from site_mapper.crawler.crawler import SiteGraph


def render_text(graph: SiteGraph) -> str:
    lines = [f"Site {graph.root_url} - {len(graph.pages)} pages"]
    for path in sorted(graph.pages):
        page = graph.pages[path]
        if page.broken:
            lines.append(f"\t{path} -> ! Broken")
            continue
        for target in sorted(page.links):
            lines.append(f"\t{path} -> {target}")
    return "\n".join(lines)
