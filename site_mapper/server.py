# site_mapper/server.py
"""
Read-only HTTP access to a site graph.

``GET /json`` answers with the current node/edge view, so it can be polled
while the crawl is still running.
"""
from __future__ import annotations

import logging

from aiohttp import web

from site_mapper.crawler.crawler import SiteGraph
from site_mapper.report.graph_view import to_view

__all__ = ("GRAPH_KEY", "create_app", "serve")

GRAPH_KEY = web.AppKey("graph", SiteGraph)

logger = logging.getLogger("SiteMapper")


async def handle_json(request: web.Request) -> web.Response:
    graph = request.app[GRAPH_KEY]
    try:
        view = to_view(graph)
    except Exception as exc:
        logger.error("Failed to build graph view: %s", exc)
        raise web.HTTPInternalServerError(text=f"failed to build site graph view: {exc}") from exc
    return web.json_response(view)


def create_app(graph: SiteGraph) -> web.Application:
    app = web.Application()
    app[GRAPH_KEY] = graph
    app.router.add_get("/json", handle_json)
    return app


async def serve(graph: SiteGraph, host: str, port: int) -> web.AppRunner:
    """Start serving *graph*; the caller owns the returned runner and must clean it up."""
    runner = web.AppRunner(create_app(graph))
    await runner.setup()
    site = web.TCPSite(runner, host, port)
    await site.start()
    logger.info("Site graph available at http://%s:%d/json", host, port)
    return runner
