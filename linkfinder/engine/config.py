"""Configuration helpers for the opportunity engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict

import yaml

RELEVANCE_POLICIES = ("jaccard", "search_console")


@dataclass(frozen=True)
class EngineConfig:
    """Typed wrapper around the engine configuration dictionary."""

    raw: Dict[str, Any] = field(default_factory=dict)

    @property
    def top_n(self) -> int:
        return int(self.raw.get("top_n", DEFAULTS["top_n"]))

    @property
    def admission_threshold(self) -> float:
        return float(self.raw.get("admission_threshold", DEFAULTS["admission_threshold"]))

    @property
    def max_opportunities(self) -> int:
        return int(self.raw.get("max_opportunities", DEFAULTS["max_opportunities"]))

    @property
    def relevance_policy(self) -> str:
        return str(self.raw.get("relevance_policy", DEFAULTS["relevance_policy"]))

    @property
    def impact_rank_gain(self) -> float:
        return float(self.raw.get("impact_rank_gain", DEFAULTS["impact_rank_gain"]))

    def anchor_text(self, keyword: str) -> str:
        template = self.raw.get("anchor_template", DEFAULTS["anchor_template"])
        return template.format(keyword=keyword)


DEFAULTS: Dict[str, Any] = {
    "top_n": 20,
    "admission_threshold": 100,
    "max_opportunities": 50,
    "relevance_policy": "jaccard",
    "anchor_template": "Learn more about {keyword}",
    "impact_rank_gain": 3,
}


def load_config(path: str | Path | None = None) -> EngineConfig:
    """Load configuration from YAML, merging with defaults."""

    data: Dict[str, Any] = dict(DEFAULTS)

    if path is not None and Path(path).exists():
        with Path(path).open("r", encoding="utf-8") as stream:
            user = yaml.safe_load(stream) or {}
        merge_into(data, user)

    policy = data.get("relevance_policy")
    if policy not in RELEVANCE_POLICIES:
        raise ValueError(f"Unknown relevance_policy {policy!r}; expected one of {', '.join(RELEVANCE_POLICIES)}")

    return EngineConfig(data)


def merge_into(base: Dict[str, Any], override: Dict[str, Any]) -> None:
    """Recursively merge override into base dict."""

    for key, value in override.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            merge_into(base[key], value)
        else:
            base[key] = value
