# File: site_mapper/engine.py
"""site_mapper.engine: запуск обхода по конфигурации, обработка сигналов и отдача графа по HTTP."""

from __future__ import annotations

import asyncio
import signal
from typing import List, Optional

from site_mapper.config import MapperConfig
from site_mapper.crawler.crawler import SiteGraph, new_crawl
from site_mapper.errors import CrawlCancelled
from site_mapper.logger import logger
from site_mapper.metrics import CrawlStats, MetricsRecorder
from site_mapper.server import serve

__all__ = ["start_crawl", "install_signal_handlers", "remove_signal_handlers"]

_SIGNALS = (signal.SIGINT, signal.SIGTERM)


def install_signal_handlers(cancel: asyncio.Event) -> List[signal.Signals]:
    """Связывает SIGINT/SIGTERM с событием отмены; возвращает установленные сигналы."""
    loop = asyncio.get_running_loop()
    installed: List[signal.Signals] = []
    for sig in _SIGNALS:
        try:
            loop.add_signal_handler(sig, cancel.set)
        except (NotImplementedError, RuntimeError, ValueError) as exc:
            # Windows или не главный поток: отмена только через событие
            logger.debug("Cannot install handler for %s: %s", sig.name, exc)
            continue
        installed.append(sig)
    return installed


def remove_signal_handlers(installed: List[signal.Signals]) -> None:
    loop = asyncio.get_running_loop()
    for sig in installed:
        loop.remove_signal_handler(sig)


async def start_crawl(
    config: MapperConfig,
    cancel: Optional[asyncio.Event] = None,
    metrics: Optional[MetricsRecorder] = None,
) -> SiteGraph:
    """
    Строит граф сайта по конфигурации и возвращает его.

    Ошибки построения (InvalidURL, InvalidConfiguration) пробрасываются.
    Отмена обхода не считается ошибкой: возвращается частичный граф,
    ``graph.state`` равен ``CrawlState.CANCELLED``. Если задан
    ``listen_address``, граф отдаётся по HTTP во время обхода и после него,
    пока не придёт сигнал отмены.
    """
    stats = metrics if metrics is not None else CrawlStats()
    graph = new_crawl(
        config.start_url,
        config.workers,
        timeout=config.timeout,
        user_agent=config.user_agent,
        metrics=stats,
    )
    if cancel is None:
        cancel = asyncio.Event()

    installed = install_signal_handlers(cancel)
    runner = None
    try:
        if config.listen_address is not None:
            host, port = config.listen_host_port()
            runner = await serve(graph, host, port)

        try:
            await graph.run(cancel)
        except CrawlCancelled as exc:
            logger.warning("Site crawling unfinished: %s", exc)

        if runner is not None and not cancel.is_set():
            logger.info("Crawl finished, still serving the graph; press Ctrl-C to stop")
            await cancel.wait()
    finally:
        if runner is not None:
            await runner.cleanup()
        remove_signal_handlers(installed)

    if isinstance(stats, CrawlStats):
        logger.info("Pages known: %d, pages visited: %d", stats.page_count, stats.pages_visited)
    return graph
