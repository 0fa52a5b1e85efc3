# site_mapper/report/json_report.py

"""
Генерация JSON-отчёта для проекта SiteMapper.

Сериализует представление графа (узлы и рёбра) в строку или файл.
"""
import json
from pathlib import Path

from site_mapper.crawler.crawler import SiteGraph
from site_mapper.report.graph_view import to_view


def dumps_graph(graph: SiteGraph, *, pretty: bool = False) -> str:
    """Возвращает JSON-представление графа в формате ``{"nodes": [...], "edges": [...]}``."""
    return json.dumps(to_view(graph), ensure_ascii=False, indent=2 if pretty else None)


def render_json(graph: SiteGraph, output_path: Path | str, *, pretty: bool = True) -> Path:
    """
    Сохраняет граф в формате JSON по указанному пути.

    :param graph: граф сайта (полный или частичный после отмены)
    :param output_path: путь к JSON-файлу
    :param pretty: форматировать с отступом 2
    :return: Path сохранённого файла

    Пример:
    ```python
    from site_mapper.report.json_report import render_json
    report_path = render_json(graph, 'reports/sitemap.json')
    ```
    """
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(dumps_graph(graph, pretty=pretty), encoding="utf-8")
    return output
