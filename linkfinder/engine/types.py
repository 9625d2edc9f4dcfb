"""Typed data structures used by the opportunity engine."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class Document:
    """A crawled page submitted to the corpus."""

    url: str
    text: str
    title: Optional[str] = None

    @property
    def display_title(self) -> str:
        return self.title or self.url


@dataclass(frozen=True)
class TokenScore:
    """One weighted term for one document."""

    token: str
    score: float
    frequency: int


@dataclass(frozen=True)
class KeywordMetrics:
    """Search metrics for a keyword, as reported by the metrics provider."""

    keyword: str
    volume: int
    difficulty: float
    impressions: Optional[int] = None


@dataclass(frozen=True)
class PageMetrics:
    """Search-console metrics for a single page."""

    url: str
    impressions: int
    clicks: int
    position: float
    incoming_links: int = 0


@dataclass(frozen=True)
class TrafficImpact:
    """Estimated click gain from moving a page up the results."""

    estimated: int
    increase: int
    percentage: int


@dataclass(frozen=True)
class ScoreTier:
    """Display tier for a numeric score."""

    tier: str
    color: str
    label: str


@dataclass(frozen=True)
class LinkOpportunity:
    """Recommendation to link from ``source_url`` to ``target_url`` on ``keyword``."""

    source_url: str
    target_url: str
    keyword: str
    anchor_text: str
    keyword_score: float
    page_score: float
    priority: float
    expected_impact: TrafficImpact
    source_title: str = ""
    target_title: str = ""
    volume: int = 0
    difficulty: float = 0.0
    current_position: float = 0.0
    relevance: float = 1.0

    @property
    def impact_label(self) -> str:
        return f"+{self.expected_impact.increase} clicks/month"

    def as_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["impact_label"] = self.impact_label
        return data


@dataclass(frozen=True)
class AnalysisStats:
    """Aggregate counters for one analysis run."""

    total_pages: int
    total_keywords: int
    total_opportunities: int
    avg_keyword_score: float
    avg_priority: float


@dataclass(frozen=True)
class AnalysisResult:
    """Everything an analysis run hands back to the caller."""

    keywords_by_page: Dict[str, List[TokenScore]]
    opportunities: List[LinkOpportunity]
    stats: AnalysisStats
    pages: List[Dict[str, str]] = field(default_factory=list)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "keywords_by_page": {
                url: [asdict(score) for score in scores]
                for url, scores in self.keywords_by_page.items()
            },
            "opportunities": [opportunity.as_dict() for opportunity in self.opportunities],
            "stats": asdict(self.stats),
            "pages": list(self.pages),
        }
