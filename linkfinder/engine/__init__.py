"""Keyword extraction and internal link opportunity scoring."""

from .config import EngineConfig, load_config
from .index import analyze
from .tfidf import TfidfCorpus
from .tiers import get_score_tier

__all__ = ["EngineConfig", "TfidfCorpus", "analyze", "get_score_tier", "load_config"]
