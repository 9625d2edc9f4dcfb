"""Conversion of provider payloads into validated engine records.

Crawlers, keyword tools and search-console exports hand over loosely typed
JSON. These helpers turn that data into :class:`Document`,
:class:`KeywordMetrics` and :class:`PageMetrics` instances. Metric entries
that are missing fields or carry unusable values are dropped: for the
engine a malformed entry is the same as no metrics at all.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from .text import html_to_text
from .types import Document, KeywordMetrics, PageMetrics

logger = logging.getLogger(__name__)

DEFAULT_SEARCH_VOLUME = 0
DEFAULT_COMPETITION_INDEX = 50


def _number(value: Any) -> Optional[float]:
    if isinstance(value, bool) or value is None:
        return None
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def _non_negative(value: Any) -> Optional[float]:
    number = _number(value)
    if number is None or number < 0:
        return None
    return number


def parse_documents(raw_documents: Iterable[Any], *, is_html: bool = False) -> List[Document]:
    """Build documents from ``(url, text)`` pairs or crawler page mappings.

    Mappings may carry the body under ``text``, ``markdown`` or ``html``
    (in that order of preference). HTML bodies, and every body when
    ``is_html`` is set, are reduced to their visible text.

    Raises
    ------
    ValueError
        If a document has no url.
    """

    documents: List[Document] = []
    for index, item in enumerate(raw_documents, start=1):
        title = None
        html_body = is_html
        if isinstance(item, Mapping):
            url = item.get("url")
            title = item.get("title") or None
            if item.get("text") is not None:
                body = item.get("text")
            elif item.get("markdown") is not None:
                body = item.get("markdown")
            else:
                body = item.get("html")
                html_body = True
        elif isinstance(item, (list, tuple)) and len(item) == 2:
            url, body = item
        else:
            raise ValueError(f"Document {index} must be a (url, text) pair or a mapping.")

        if not url or not isinstance(url, str):
            raise ValueError(f"Document {index} is missing a url.")

        text = str(body or "")
        if html_body:
            text = html_to_text(text)
        documents.append(Document(url=url, text=text, title=str(title) if title else None))
    return documents


def _keyword_counters(entry: Mapping[str, Any]) -> Tuple[Any, Any]:
    if "volume" in entry or "difficulty" in entry:
        return entry.get("volume"), entry.get("difficulty")
    # Search-volume API rows: no volume means 0, no competition index means 50.
    volume = entry.get("search_volume")
    difficulty = entry.get("competition_index")
    return (
        DEFAULT_SEARCH_VOLUME if volume is None else volume,
        DEFAULT_COMPETITION_INDEX if difficulty is None else difficulty,
    )


def parse_keyword_metrics(raw: Mapping[str, Any]) -> Dict[str, KeywordMetrics]:
    """Return keyword metrics keyed by lower-cased keyword text.

    Tokens are always lower case, so provider keys are folded to match them.
    When several keys fold to the same keyword the first usable entry wins.
    """

    metrics: Dict[str, KeywordMetrics] = {}
    for keyword, entry in (raw or {}).items():
        key = str(keyword).lower()
        if key in metrics:
            logger.debug("Ignoring duplicate keyword metrics for %r", keyword)
            continue
        if isinstance(entry, KeywordMetrics):
            metrics[key] = entry
            continue
        if not isinstance(entry, Mapping):
            logger.debug("Dropping keyword metrics for %r: not a mapping", keyword)
            continue
        raw_volume, raw_difficulty = _keyword_counters(entry)
        volume = _non_negative(raw_volume)
        difficulty = _non_negative(raw_difficulty)
        if volume is None or difficulty is None:
            logger.debug("Dropping keyword metrics for %r: invalid volume or difficulty", keyword)
            continue
        impressions = None
        if entry.get("impressions") is not None:
            impressions_value = _non_negative(entry.get("impressions"))
            if impressions_value is None:
                logger.debug("Dropping keyword metrics for %r: invalid impressions", keyword)
                continue
            impressions = int(impressions_value)
        metrics[key] = KeywordMetrics(
            keyword=key,
            volume=int(volume),
            difficulty=difficulty,
            impressions=impressions,
        )
    return metrics


def parse_page_metrics(raw: Mapping[str, Any]) -> Dict[str, PageMetrics]:
    """Return page metrics keyed by page url."""

    metrics: Dict[str, PageMetrics] = {}
    for url, entry in (raw or {}).items():
        if isinstance(entry, PageMetrics):
            metrics[url] = entry
            continue
        if not isinstance(entry, Mapping):
            logger.debug("Dropping page metrics for %s: not a mapping", url)
            continue
        impressions = _non_negative(entry.get("impressions"))
        clicks = _non_negative(entry.get("clicks", 0))
        position = _number(entry.get("position"))
        incoming = _non_negative(entry.get("incoming_links", entry.get("incomingLinks", 0)))
        if impressions is None or clicks is None or incoming is None:
            logger.debug("Dropping page metrics for %s: invalid counters", url)
            continue
        if position is None or position <= 0:
            logger.debug("Dropping page metrics for %s: position must be positive", url)
            continue
        metrics[url] = PageMetrics(
            url=str(url),
            impressions=int(impressions),
            clicks=int(clicks),
            position=position,
            incoming_links=int(incoming),
        )
    return metrics
