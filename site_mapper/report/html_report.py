# File: site_mapper/report/html_report.py
"""site_mapper.report.html_report: Генерация HTML-отчёта по графу сайта с помощью Jinja2."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Union

from jinja2 import Environment, FileSystemLoader, select_autoescape

from site_mapper.crawler.crawler import SiteGraph

DEFAULT_TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"
TEMPLATE_NAME = "report.html.j2"


def _page_rows(graph: SiteGraph) -> list[dict[str, Any]]:
    rows = []
    for path in sorted(graph.pages):
        page = graph.pages[path]
        rows.append(
            {
                "path": path,
                "url": page.url,
                "visited": page.visited,
                "broken": page.broken,
                "error": str(page.last_error) if page.last_error else "",
                "links": sorted(page.links.items()),
            }
        )
    return rows


def render_html(
    graph: SiteGraph,
    template_dir: Union[Path, str, None],
    output_path: Union[Path, str],
) -> Path:
    """Рендерит HTML-отчёт из шаблона и сохраняет его по указанному пути.

    Args:
        graph: граф сайта.
        template_dir: директория с Jinja2-шаблонами (None — встроенный шаблон).
        output_path: путь к итоговому HTML-файлу.

    Returns:
        Path до сохранённого HTML-файла.
    """
    template_dir = Path(template_dir) if template_dir is not None else DEFAULT_TEMPLATE_DIR
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    env = Environment(
        loader=FileSystemLoader(str(template_dir)),
        autoescape=select_autoescape(["html", "xml", "j2"]),
    )
    template = env.get_template(TEMPLATE_NAME)

    rows = _page_rows(graph)
    context: dict[str, Any] = {
        "root_url": graph.root_url,
        "state": graph.state.value if graph.state else "not started",
        "pages": rows,
        "broken_count": sum(1 for r in rows if r["broken"]),
        "edge_count": sum(len(r["links"]) for r in rows),
    }

    output_path.write_text(template.render(**context), encoding="utf-8")
    return output_path
