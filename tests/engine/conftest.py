"""Shared fixtures for engine tests."""

from __future__ import annotations

from typing import Optional

import pytest

from linkfinder.engine.config import load_config
from linkfinder.engine.types import Document, KeywordMetrics, PageMetrics


@pytest.fixture()
def engine_config():
    """Provide a fresh default configuration; tests adjust its ``raw`` dict in place."""

    return load_config(None)


def make_document(url: str, text: str, *, title: Optional[str] = None) -> Document:
    return Document(url=url, text=text, title=title)


def make_keyword(keyword: str, volume: int, difficulty: float, impressions: Optional[int] = None) -> KeywordMetrics:
    return KeywordMetrics(keyword=keyword, volume=volume, difficulty=difficulty, impressions=impressions)


def make_page_metrics(
    url: str,
    *,
    impressions: int = 1000,
    clicks: int = 50,
    position: float = 10,
    incoming_links: int = 0,
) -> PageMetrics:
    return PageMetrics(
        url=url,
        impressions=impressions,
        clicks=clicks,
        position=position,
        incoming_links=incoming_links,
    )
