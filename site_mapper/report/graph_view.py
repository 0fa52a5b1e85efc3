# File: site_mapper/report/graph_view.py
"""site_mapper.report.graph_view: проекция графа сайта в узлы и рёбра для визуализации."""

from __future__ import annotations

import random
from typing import List, Optional, TypedDict

from site_mapper.crawler.crawler import SiteGraph

BROKEN_COLOR = "#ec5148"
NODE_SIZE = 0
POSITION_RANGE = 1000


class NodeView(TypedDict):
    """Узел графа: путь страницы и её отображение."""

    color: str
    id: str
    label: str
    size: int
    x: int
    y: int


class EdgeView(TypedDict):
    """Ребро графа: есть хотя бы одна ссылка source -> target."""

    id: str
    source: str
    target: str


class GraphView(TypedDict):
    nodes: List[NodeView]
    edges: List[EdgeView]


def to_view(graph: SiteGraph, rng: Optional[random.Random] = None) -> GraphView:
    """
    Снимок графа на текущий момент (можно вызывать и во время обхода).

    Кратность ссылок не учитывается: одно ребро на каждый различный путь.
    Рёбра к путям, которых нет в ``pages`` (возможно только после отмены обхода),
    пропускаются. Граф не изменяется.
    """
    rng = rng or random.Random()
    pages = list(graph.pages.items())
    known = {path for path, _ in pages}
    view: GraphView = {"nodes": [], "edges": []}

    for path, page in pages:
        view["nodes"].append(
            {
                "color": BROKEN_COLOR if page.broken else "",
                "id": path,
                "label": path,
                "size": NODE_SIZE,
                "x": rng.randrange(POSITION_RANGE),
                "y": rng.randrange(POSITION_RANGE),
            }
        )
        for target in list(page.links):
            if target not in known:
                continue
            view["edges"].append({"id": f"{path}->{target}", "source": path, "target": target})
    return view


__all__ = ["BROKEN_COLOR", "EdgeView", "GraphView", "NodeView", "to_view"]
