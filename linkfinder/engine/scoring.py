"""Scoring formulas for keyword, page and link opportunities."""

from __future__ import annotations

import math
from typing import Iterable, Optional

from .text import jaccard
from .types import TrafficImpact

# Industry-average click-through rate for organic ranks 1-10.
CTR_BY_POSITION = (0.284, 0.152, 0.098, 0.070, 0.055, 0.045, 0.038, 0.033, 0.029, 0.025)
CTR_BEYOND_TOP_TEN = 0.015
MIN_CTR = 0.001

MISSING_KEYWORD_RELEVANCE = 0.3


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def keyword_score(volume: float, impressions: float, difficulty: float, relevance: float = 1.0) -> float:
    """Return ``(volume * impressions) / (difficulty + 1) * relevance``."""

    return (volume * impressions) / (difficulty + 1) * relevance


def ctr_potential(position: float) -> float:
    """Linear approximation of click-through rate decay by rank."""

    return max(0.0, 0.30 - position * 0.002)


def page_score(impressions: float, position: float, incoming_links: int) -> float:
    """Return how much a page stands to gain from one more internal link."""

    rank_factor = 1 - min(position, 100) / 100
    return (impressions * ctr_potential(position)) / (incoming_links + 1) * rank_factor


def priority(keyword_score_value: float, page_score_value: float) -> float:
    return keyword_score_value * page_score_value


def calculate_relevance(source_tokens: Iterable[str], target_tokens: Iterable[str], keyword: str) -> float:
    """Score how related two pages are around ``keyword``.

    Both pages must mention the keyword, otherwise the relevance floor of
    0.3 applies. When they do, token-set Jaccard similarity is added to a 0.5
    base and capped at 1.
    """

    source_set = set(source_tokens)
    target_set = set(target_tokens)
    needle = keyword.lower()
    if needle not in source_set or needle not in target_set:
        return MISSING_KEYWORD_RELEVANCE
    return min(1.0, 0.5 + jaccard(source_set, target_set))


def search_console_relevance(impressions: float) -> float:
    """Flat relevance used when pages are not compared token by token."""

    return 1.0 if impressions > 0 else 0.5


def ctr_for_position(position: float) -> float:
    """Return the expected click-through rate for a (possibly fractional) rank."""

    rank = max(1, _round_half_up(position))
    if rank <= len(CTR_BY_POSITION):
        return CTR_BY_POSITION[rank - 1]
    return CTR_BEYOND_TOP_TEN


def estimate_traffic_impact(
    current_clicks: float,
    current_position: float,
    target_position: Optional[float] = None,
) -> TrafficImpact:
    """Estimate clicks after moving from ``current_position`` to ``target_position``.

    The target defaults to three places higher, never above rank 1. Current
    impressions are inferred from clicks and the rank's expected CTR. The
    percentage is relative to current clicks and is 0 when there are none.
    """

    if target_position is None:
        target_position = max(1, current_position - 3)

    current_ctr = ctr_for_position(current_position)
    target_ctr = ctr_for_position(target_position)

    current_impressions = current_clicks / max(current_ctr, MIN_CTR)
    estimated = _round_half_up(current_impressions * target_ctr)
    increase = estimated - _round_half_up(current_clicks)
    if current_clicks > 0:
        percentage = _round_half_up(increase / current_clicks * 100)
    else:
        percentage = 0
    return TrafficImpact(estimated=estimated, increase=increase, percentage=percentage)
