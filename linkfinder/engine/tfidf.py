"""TF-IDF keyword extraction over a corpus of crawled pages."""

from __future__ import annotations

import logging
import math
from typing import Dict, List, Sequence

from .text import term_frequencies, tokenize
from .types import TokenScore

logger = logging.getLogger(__name__)

DEFAULT_TOP_N = 20


class TfidfCorpus:
    """Documents plus the document-frequency counts derived from them.

    A corpus belongs to a single analysis run. Document frequencies always
    reflect exactly the documents currently held: re-adding an id withdraws
    the previous content's contribution before counting the new one.
    """

    def __init__(self) -> None:
        self._documents: Dict[str, List[str]] = {}
        self._document_frequency: Dict[str, int] = {}

    def __len__(self) -> int:
        return len(self._documents)

    def __contains__(self, document_id: object) -> bool:
        return document_id in self._documents

    def add_document(self, document_id: str, content: str) -> None:
        """Tokenize ``content`` and store it under ``document_id``."""

        previous = self._documents.get(document_id)
        if previous is not None:
            self._withdraw(previous)

        tokens = tokenize(content or "")
        self._documents[document_id] = tokens
        for token in set(tokens):
            self._document_frequency[token] = self._document_frequency.get(token, 0) + 1

    def calculate(self, document_id: str, top_n: int = DEFAULT_TOP_N) -> List[TokenScore]:
        """Return the ``top_n`` highest weighted terms for the document."""

        tokens = self._documents.get(document_id)
        if tokens is None:
            return []

        total_docs = len(self._documents)
        total_tokens = len(tokens)
        scores: List[TokenScore] = []
        for token, freq in term_frequencies(tokens).items():
            tf = freq / total_tokens
            df = self._document_frequency.get(token) or 1
            idf = math.log(total_docs / df)
            scores.append(TokenScore(token=token, score=tf * idf, frequency=freq))

        # sorted() is stable, so equal scores keep first-seen order.
        scores = sorted(scores, key=lambda item: item.score, reverse=True)
        return scores[: max(top_n, 0)]

    def tokens(self, document_id: str) -> Sequence[str]:
        """Return the stored token sequence for the document."""

        return tuple(self._documents.get(document_id, ()))

    def document_frequency(self, token: str) -> int:
        return self._document_frequency.get(token, 0)

    def list_documents(self) -> List[str]:
        """Return the ids of all documents in the corpus."""

        return list(self._documents)

    def reset(self) -> None:
        """Drop every document and frequency count."""

        logger.debug("Resetting corpus holding %d documents", len(self._documents))
        self._documents.clear()
        self._document_frequency.clear()

    def _withdraw(self, tokens: Sequence[str]) -> None:
        for token in set(tokens):
            remaining = self._document_frequency.get(token, 0) - 1
            if remaining > 0:
                self._document_frequency[token] = remaining
            else:
                self._document_frequency.pop(token, None)
