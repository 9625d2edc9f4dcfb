"""Coordinator for one opportunity analysis run."""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Mapping, Sequence

from . import candidates as candidates_module
from .config import EngineConfig, load_config
from .tfidf import TfidfCorpus
from .types import (
    AnalysisResult,
    AnalysisStats,
    Document,
    KeywordMetrics,
    LinkOpportunity,
    PageMetrics,
    TokenScore,
)

logger = logging.getLogger(__name__)


def build_corpus(documents: Iterable[Document]) -> TfidfCorpus:
    """Return a fresh corpus holding ``documents``."""

    corpus = TfidfCorpus()
    for document in documents:
        corpus.add_document(document.url, document.text)
    return corpus


def keyword_signatures(corpus: TfidfCorpus, top_n: int) -> Dict[str, List[TokenScore]]:
    """Return the top weighted terms for every document in the corpus."""

    return {url: corpus.calculate(url, top_n) for url in corpus.list_documents()}


def rank_opportunities(opportunities: Iterable[LinkOpportunity]) -> List[LinkOpportunity]:
    """Order opportunities by descending priority, keeping generation order on ties."""

    return sorted(opportunities, key=lambda item: item.priority, reverse=True)


def compute_stats(
    total_pages: int,
    keywords_by_page: Mapping[str, Sequence[TokenScore]],
    opportunities: Sequence[LinkOpportunity],
) -> AnalysisStats:
    """Aggregate counters for the run; averages are 0 without opportunities."""

    total_keywords = sum(len(scores) for scores in keywords_by_page.values())
    count = len(opportunities)
    if count:
        avg_keyword_score = sum(item.keyword_score for item in opportunities) / count
        avg_priority = sum(item.priority for item in opportunities) / count
    else:
        avg_keyword_score = 0.0
        avg_priority = 0.0
    return AnalysisStats(
        total_pages=total_pages,
        total_keywords=total_keywords,
        total_opportunities=count,
        avg_keyword_score=avg_keyword_score,
        avg_priority=avg_priority,
    )


def _unique_documents(documents: Iterable[Document]) -> List[Document]:
    # A repeated url replaces the earlier content but keeps its position.
    by_url: Dict[str, Document] = {}
    for document in documents:
        by_url[document.url] = document
    return list(by_url.values())


def analyze(
    documents: Iterable[Document],
    keyword_metrics: Mapping[str, KeywordMetrics],
    page_metrics: Mapping[str, PageMetrics],
    config: EngineConfig | None = None,
) -> AnalysisResult:
    """Run keyword extraction and opportunity scoring over a crawled site.

    Every call builds its own corpus, so concurrent runs never share state.
    The returned opportunity list is capped at ``max_opportunities`` while
    the statistics describe the full, uncapped list.
    """

    engine_config = config or load_config(None)
    pages = _unique_documents(documents)
    corpus = build_corpus(pages)
    keywords_by_page = keyword_signatures(corpus, engine_config.top_n)

    opportunities = candidates_module.generate_opportunities(
        pages,
        corpus,
        keywords_by_page,
        keyword_metrics,
        page_metrics,
        engine_config,
    )
    ranked = rank_opportunities(opportunities)
    stats = compute_stats(len(corpus), keywords_by_page, ranked)

    logger.info(
        "Analyzed %d pages: %d keywords, %d opportunities",
        stats.total_pages,
        stats.total_keywords,
        stats.total_opportunities,
    )

    return AnalysisResult(
        keywords_by_page=keywords_by_page,
        opportunities=ranked[: engine_config.max_opportunities],
        stats=stats,
        pages=[{"url": page.url, "title": page.display_title} for page in pages],
    )
