"""Candidate generation: pick the best link target for each source keyword."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterator, List, Mapping, Optional, Sequence

from . import scoring
from .config import EngineConfig
from .tfidf import TfidfCorpus
from .types import Document, KeywordMetrics, LinkOpportunity, PageMetrics, TokenScore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TargetChoice:
    """A candidate target page together with its page score."""

    document: Document
    metrics: PageMetrics
    page_score: float


def _target_candidates(
    source: Document,
    keyword: str,
    documents: Sequence[Document],
    lowered_texts: Mapping[str, str],
    page_metrics: Mapping[str, PageMetrics],
) -> Iterator[TargetChoice]:
    needle = keyword.lower()
    for candidate in documents:
        if candidate.url == source.url:
            continue
        if needle not in lowered_texts.get(candidate.url, ""):
            continue
        metrics = page_metrics.get(candidate.url)
        if metrics is None:
            continue
        score = scoring.page_score(metrics.impressions, metrics.position, metrics.incoming_links)
        if score <= 0:
            continue
        yield TargetChoice(document=candidate, metrics=metrics, page_score=score)


def best_target(
    source: Document,
    keyword: str,
    documents: Sequence[Document],
    page_metrics: Mapping[str, PageMetrics],
    lowered_texts: Optional[Mapping[str, str]] = None,
) -> Optional[TargetChoice]:
    """Return the target with the highest positive page score, or ``None``.

    Targets are other pages whose text contains ``keyword``
    (case-insensitive) and that have page metrics. On equal scores the page
    that comes first in ``documents`` wins.
    """

    if lowered_texts is None:
        lowered_texts = {document.url: document.text.lower() for document in documents}
    candidates = _target_candidates(source, keyword, documents, lowered_texts, page_metrics)
    # max() keeps the first of several equal maxima.
    return max(candidates, key=lambda choice: choice.page_score, default=None)


def _keyword_impressions(
    metrics: KeywordMetrics,
    source_metrics: Optional[PageMetrics],
) -> Optional[int]:
    if metrics.impressions is not None:
        return metrics.impressions
    if source_metrics is not None:
        return source_metrics.impressions
    return None


def generate_opportunities(
    documents: Sequence[Document],
    corpus: TfidfCorpus,
    keywords_by_page: Mapping[str, Sequence[TokenScore]],
    keyword_metrics: Mapping[str, KeywordMetrics],
    page_metrics: Mapping[str, PageMetrics],
    config: EngineConfig,
) -> List[LinkOpportunity]:
    """Return every qualifying opportunity, unsorted, at most one per (source, keyword)."""

    threshold = config.admission_threshold
    policy = config.relevance_policy
    lowered_texts: Dict[str, str] = {document.url: document.text.lower() for document in documents}
    opportunities: List[LinkOpportunity] = []
    skipped_metrics = 0
    skipped_threshold = 0

    for source in documents:
        source_metrics = page_metrics.get(source.url)
        for token_score in keywords_by_page.get(source.url, ()):
            keyword = token_score.token
            metrics = keyword_metrics.get(keyword)
            impressions = _keyword_impressions(metrics, source_metrics) if metrics else None
            if metrics is None or impressions is None:
                skipped_metrics += 1
                continue

            if policy == "search_console":
                relevance = scoring.search_console_relevance(impressions)
            else:
                relevance = 1.0
            admission_score = scoring.keyword_score(metrics.volume, impressions, metrics.difficulty, relevance)
            if admission_score < threshold:
                skipped_threshold += 1
                continue

            choice = best_target(source, keyword, documents, page_metrics, lowered_texts)
            if choice is None:
                continue

            keyword_score = admission_score
            if policy == "jaccard":
                relevance = scoring.calculate_relevance(
                    corpus.tokens(source.url),
                    corpus.tokens(choice.document.url),
                    keyword,
                )
                keyword_score = admission_score * relevance
                if keyword_score < threshold:
                    skipped_threshold += 1
                    continue

            target = choice.metrics
            impact = scoring.estimate_traffic_impact(
                target.clicks,
                target.position,
                max(1, target.position - config.impact_rank_gain),
            )
            opportunities.append(
                LinkOpportunity(
                    source_url=source.url,
                    target_url=choice.document.url,
                    keyword=keyword,
                    anchor_text=config.anchor_text(keyword),
                    keyword_score=keyword_score,
                    page_score=choice.page_score,
                    priority=scoring.priority(keyword_score, choice.page_score),
                    expected_impact=impact,
                    source_title=source.display_title,
                    target_title=choice.document.display_title,
                    volume=metrics.volume,
                    difficulty=metrics.difficulty,
                    current_position=target.position,
                    relevance=relevance,
                )
            )

    logger.debug(
        "Generated %d opportunities (%d keywords without metrics, %d below threshold %s)",
        len(opportunities),
        skipped_metrics,
        skipped_threshold,
        threshold,
    )
    return opportunities
