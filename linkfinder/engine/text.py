"""Shared text utilities for the opportunity engine."""

from __future__ import annotations

import re
from collections import Counter
from typing import Iterable, List

from bs4 import BeautifulSoup  # type: ignore

STOPWORDS = frozenset(
    {
        "the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for",
        "of", "with", "by", "from", "as", "is", "was", "are", "been", "be",
        "have", "has", "had", "do", "does", "did", "will", "would", "could",
        "should", "may", "might", "can", "this", "that", "these", "those",
        "it", "its", "you", "your", "we", "our", "they", "their", "them",
    }
)

_NON_TOKEN_RE = re.compile(r"[^a-z0-9\s-]")
_NUMERIC_RE = re.compile(r"^\d+$")
_SKIP_TAGS = ("script", "style", "noscript")


def tokenize(text: str) -> List[str]:
    """Return the keyword-bearing tokens of ``text``.

    Text is lower-cased, anything that is not a lowercase letter, digit,
    whitespace or hyphen becomes a space, and the result is split on
    whitespace. Tokens of three characters or fewer, purely numeric tokens
    and stop words are dropped.
    """

    cleaned = _NON_TOKEN_RE.sub(" ", text.lower())
    return [
        word
        for word in cleaned.split()
        if len(word) > 3 and word not in STOPWORDS and not _NUMERIC_RE.match(word)
    ]


def term_frequencies(tokens: Iterable[str]) -> Counter[str]:
    """Return term frequencies for the tokens, keyed in first-seen order."""

    return Counter(tokens)


def jaccard(set_a: Iterable[str], set_b: Iterable[str]) -> float:
    """Return Jaccard similarity for two iterables."""

    set_a = set(set_a)
    set_b = set(set_b)
    union = set_a | set_b
    if not union:
        return 0.0
    return len(set_a & set_b) / len(union)


def html_to_text(html: str) -> str:
    """Extract visible text from an HTML document."""

    if not html:
        return ""

    try:
        soup = BeautifulSoup(html, "lxml")
    except Exception:
        # Fallback to html.parser if lxml isn't installed
        soup = BeautifulSoup(html, "html.parser")

    for tag in soup.find_all(_SKIP_TAGS):
        tag.decompose()

    return re.sub(r"\s+", " ", soup.get_text(" ")).strip()
