"""Score tier classification for display."""

from __future__ import annotations

from typing import Dict, Tuple

from .types import ScoreTier

SCORE_KINDS = ("keyword", "page", "priority")

_TIER_COLORS = {
    "excellent": "success",
    "good": "info",
    "fair": "warning",
    "low": "muted",
}

# (excellent, good, fair) lower bounds, exclusive.
_THRESHOLDS: Dict[str, Tuple[float, float, float]] = {
    "keyword": (1000, 500, 100),
    "page": (100, 50, 20),
    "priority": (100000, 50000, 10000),
}

_LABELS: Dict[str, Dict[str, str]] = {
    "keyword": {
        "excellent": "High Opportunity",
        "good": "Good Opportunity",
        "fair": "Fair Opportunity",
        "low": "Low Opportunity",
    },
    "page": {
        "excellent": "High Priority",
        "good": "Good Target",
        "fair": "Fair Target",
        "low": "Low Priority",
    },
    "priority": {
        "excellent": "Critical",
        "good": "High",
        "fair": "Medium",
        "low": "Low",
    },
}


def get_score_tier(score: float, kind: str = "priority") -> ScoreTier:
    """Map ``score`` to one of four ordered tiers for the given score kind.

    Unknown kinds fall back to the priority thresholds.
    """

    if kind not in _THRESHOLDS:
        kind = "priority"
    excellent, good, fair = _THRESHOLDS[kind]
    if score > excellent:
        tier = "excellent"
    elif score > good:
        tier = "good"
    elif score > fair:
        tier = "fair"
    else:
        tier = "low"
    return ScoreTier(tier=tier, color=_TIER_COLORS[tier], label=_LABELS[kind][tier])
