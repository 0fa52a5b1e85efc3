# site_mapper/metrics.py
"""
Crawl metrics recorders.

The orchestrator receives a recorder at construction instead of updating
process-wide counters. Anything exposing ``set_page_count`` and
``increment_visited`` can be plugged in.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable

__all__ = ("MetricsRecorder", "CrawlStats")


@runtime_checkable
class MetricsRecorder(Protocol):
    """Receives page-count and visit updates from the orchestrator."""

    def set_page_count(self, count: int) -> None:
        """Gauge: number of pages currently known."""
        ...

    def increment_visited(self) -> None:
        """Counter: one more page had its GET attempted and processed."""
        ...


@dataclass(slots=True)
class CrawlStats:
    """In-memory recorder, used when no other recorder is supplied."""

    page_count: int = 0
    pages_visited: int = 0

    def set_page_count(self, count: int) -> None:
        self.page_count = count

    def increment_visited(self) -> None:
        self.pages_visited += 1
