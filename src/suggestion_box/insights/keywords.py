"""Global keyword frequency table with stopword and short-token filtering."""

from __future__ import annotations

import re
from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass

from suggestion_box.insights.aggregator import TextItem

_PUNCT_RE = re.compile(r"[^\w\s]")

STOPWORDS: frozenset[str] = frozenset(
    {
        "the", "and", "or", "but", "in", "on", "at", "to", "for", "of", "with",
        "by", "is", "are", "was", "were", "be", "been", "have", "has", "had",
        "do", "does", "did", "will", "would", "could", "should", "may", "might",
        "can", "a", "an", "this", "that", "these", "those",
    }
)


@dataclass(frozen=True)
class KeywordCount:
    word: str
    count: int

    @property
    def score(self) -> int:
        """Display-only bar length in [0, 100]."""
        return min(100, self.count * 10)


def tokenize(text: str) -> list[str]:
    """Lowercase, drop punctuation, split on whitespace."""
    return _PUNCT_RE.sub("", (text or "").lower()).split()


class KeywordExtractor:
    """Count content words across the whole corpus and keep the top K."""

    def __init__(
        self,
        top_k: int = 8,
        min_length: int = 4,
        stopwords: Iterable[str] = STOPWORDS,
    ) -> None:
        if top_k < 0:
            raise ValueError("top_k must be >= 0")
        self._top_k = top_k
        self._min_length = min_length
        self._stopwords = frozenset(stopwords)

    def _keep(self, token: str) -> bool:
        return len(token) >= self._min_length and token not in self._stopwords

    def frequencies(self, items: Iterable[TextItem]) -> Counter:
        # Counter keeps first-seen insertion order, which sorting relies on for ties
        counter: Counter = Counter()
        for item in items:
            counter.update(t for t in tokenize(item.text) if self._keep(t))
        return counter

    def extract(self, items: Iterable[TextItem]) -> list[KeywordCount]:
        counter = self.frequencies(items)
        ranked = sorted(counter.items(), key=lambda x: x[1], reverse=True)
        return [KeywordCount(word=w, count=c) for w, c in ranked[: self._top_k]]
