"""Keyword-list sentiment counter producing a Positive/Neutral/Negative histogram."""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Literal

from suggestion_box.config import InsightsConfig
from suggestion_box.insights.aggregator import TextItem

MatchMode = Literal["substring", "word"]

POSITIVE = "Positive"
NEUTRAL = "Neutral"
NEGATIVE = "Negative"

# Display order and colours used by every chart and badge
BUCKET_COLORS: dict[str, str] = {
    POSITIVE: "#22c55e",
    NEUTRAL: "#eab308",
    NEGATIVE: "#ef4444",
}


@dataclass(frozen=True)
class SentimentBucket:
    label: str
    count: int
    color: str


@dataclass(frozen=True)
class SentimentHistogram:
    """Counts per bucket; the three always sum to ``total``."""

    positive: int = 0
    neutral: int = 0
    negative: int = 0

    @property
    def total(self) -> int:
        return self.positive + self.neutral + self.negative

    def buckets(self) -> list[SentimentBucket]:
        counts = {POSITIVE: self.positive, NEUTRAL: self.neutral, NEGATIVE: self.negative}
        return [
            SentimentBucket(label=label, count=counts[label], color=color)
            for label, color in BUCKET_COLORS.items()
        ]

    def percentages(self) -> dict[str, int]:
        """Rounded share of each bucket; all zero when nothing was counted."""
        total = self.total
        if total == 0:
            return {label: 0 for label in BUCKET_COLORS}
        return {b.label: round(b.count / total * 100) for b in self.buckets()}

    def dominant(self) -> str:
        """Label of the largest bucket; ties resolve to Neutral."""
        counts = {POSITIVE: self.positive, NEUTRAL: self.neutral, NEGATIVE: self.negative}
        top = max(counts.values())
        leaders = [label for label, cnt in counts.items() if cnt == top]
        return leaders[0] if len(leaders) == 1 else NEUTRAL


class SentimentCounter:
    """Classify texts by counting hits against fixed positive/negative word lists."""

    def __init__(
        self,
        positive_words: Iterable[str] | None = None,
        negative_words: Iterable[str] | None = None,
        match_mode: MatchMode = "substring",
    ) -> None:
        if positive_words is None or negative_words is None:
            cfg = InsightsConfig()
            positive_words = cfg.positive_words if positive_words is None else positive_words
            negative_words = cfg.negative_words if negative_words is None else negative_words
        self._positive = [w.lower() for w in positive_words]
        self._negative = [w.lower() for w in negative_words]
        if match_mode not in ("substring", "word"):
            raise ValueError(f"Unknown match mode: {match_mode!r}")
        self._match_mode = match_mode
        self._word_patterns = {
            w: re.compile(rf"\b{re.escape(w)}\b") for w in self._positive + self._negative
        }

    @classmethod
    def from_config(cls, config: InsightsConfig) -> SentimentCounter:
        return cls(
            positive_words=config.positive_words,
            negative_words=config.negative_words,
            match_mode=config.match_mode,
        )

    @property
    def match_mode(self) -> MatchMode:
        return self._match_mode

    def _matches(self, word: str, lower: str) -> bool:
        if self._match_mode == "substring":
            return word in lower
        return self._word_patterns[word].search(lower) is not None

    def hits(self, text: str) -> tuple[int, int]:
        """Return (positive_hits, negative_hits): how many list words occur in text."""
        lower = (text or "").lower()
        pos = sum(1 for w in self._positive if self._matches(w, lower))
        neg = sum(1 for w in self._negative if self._matches(w, lower))
        return pos, neg

    def classify(self, text: str) -> str:
        pos, neg = self.hits(text)
        if pos > neg:
            return POSITIVE
        if neg > pos:
            return NEGATIVE
        return NEUTRAL

    def count(self, items: Iterable[TextItem]) -> SentimentHistogram:
        tally = {POSITIVE: 0, NEUTRAL: 0, NEGATIVE: 0}
        for item in items:
            tally[self.classify(item.text)] += 1
        return SentimentHistogram(
            positive=tally[POSITIVE],
            neutral=tally[NEUTRAL],
            negative=tally[NEGATIVE],
        )
