"""Insight pipeline: aggregate → sentiment → keywords → recommendations."""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime

from suggestion_box.config import InsightsConfig
from suggestion_box.insights.aggregator import aggregate
from suggestion_box.insights.keywords import KeywordCount, KeywordExtractor
from suggestion_box.insights.recommendations import (
    NO_DATA,
    RecommendationEngine,
    RuleContext,
)
from suggestion_box.insights.sentiment import SentimentCounter, SentimentHistogram
from suggestion_box.store.row_store import RowStore
from suggestion_box.store.schemas import Feedback, Suggestion


class AnalysisFailedError(RuntimeError):
    """Raised when the submissions needed for analysis could not be read."""


@dataclass
class InsightSummary:
    """Aggregate output of one analysis run."""

    sentiment: SentimentHistogram
    keywords: list[KeywordCount]
    recommendations: list[str]
    suggestion_count: int
    feedback_count: int
    generated_at: datetime = field(default_factory=lambda: datetime.now(tz=UTC))

    has_data = True

    @property
    def total(self) -> int:
        return self.sentiment.total

    def to_dict(self) -> dict:
        return {
            "has_data": True,
            "total": self.total,
            "suggestion_count": self.suggestion_count,
            "feedback_count": self.feedback_count,
            "sentiment": [
                {"label": b.label, "count": b.count, "color": b.color}
                for b in self.sentiment.buckets()
            ],
            "sentiment_pct": self.sentiment.percentages(),
            "keywords": [
                {"word": k.word, "count": k.count, "score": k.score} for k in self.keywords
            ],
            "recommendations": list(self.recommendations),
            "generated_at": self.generated_at.isoformat(),
        }


@dataclass
class NoData:
    """Explicit result for an empty corpus; callers show a placeholder."""

    message: str = NO_DATA
    generated_at: datetime = field(default_factory=lambda: datetime.now(tz=UTC))

    has_data = False

    def to_dict(self) -> dict:
        return {
            "has_data": False,
            "message": self.message,
            "generated_at": self.generated_at.isoformat(),
        }


InsightResult = InsightSummary | NoData


class InsightPipeline:
    """Stateless analysis over a snapshot of suggestions and feedback."""

    def __init__(self, config: InsightsConfig | None = None) -> None:
        cfg = config or InsightsConfig()
        self._counter = SentimentCounter.from_config(cfg)
        self._extractor = KeywordExtractor(top_k=cfg.top_k)
        self._engine = RecommendationEngine(
            positive_share=cfg.positive_share,
            engagement_threshold=cfg.engagement_threshold,
        )

    def run(
        self,
        suggestions: Sequence[Suggestion],
        feedback: Sequence[Feedback],
        now: datetime | None = None,
    ) -> InsightResult:
        generated_at = now or datetime.now(tz=UTC)
        # Materialise once: the three sub-steps each walk the corpus
        items = list(aggregate(suggestions, feedback))
        if not items:
            return NoData(generated_at=generated_at)

        histogram = self._counter.count(items)
        keywords = self._extractor.extract(items)
        recommendations = self._engine.recommend(
            RuleContext(
                histogram=histogram,
                keywords=keywords,
                suggestion_count=len(suggestions),
                feedback_count=len(feedback),
            )
        )
        return InsightSummary(
            sentiment=histogram,
            keywords=keywords,
            recommendations=recommendations,
            suggestion_count=len(suggestions),
            feedback_count=len(feedback),
            generated_at=generated_at,
        )

    async def analyze_store(self, store: RowStore) -> InsightResult:
        """Read both record kinds concurrently, then analyse once both arrive."""
        try:
            suggestion_rows, feedback_rows = await asyncio.gather(
                asyncio.to_thread(store.select, "suggestions", "created_at", True),
                asyncio.to_thread(store.select, "feedback", "created_at", True),
            )
        except Exception as exc:
            raise AnalysisFailedError(f"Could not load submissions: {exc}") from exc

        return self.run(
            [Suggestion.from_row(r) for r in suggestion_rows],
            [Feedback.from_row(r) for r in feedback_rows],
        )

    def analyze_store_sync(self, store: RowStore) -> InsightResult:
        return asyncio.run(self.analyze_store(store))


def to_report_row(summary: InsightSummary) -> dict:
    """Denormalise a summary into the persisted report shape."""
    pct = summary.sentiment.percentages()
    text = (
        f"{summary.total} submissions analysed "
        f"({summary.suggestion_count} suggestions, {summary.feedback_count} feedback): "
        f"{pct['Positive']}% positive, {pct['Neutral']}% neutral, "
        f"{pct['Negative']}% negative."
    )
    raw = summary.to_dict()
    raw.pop("has_data")
    return {
        "generated_at": summary.generated_at.isoformat(),
        "summary": text,
        "sentiment": summary.sentiment.dominant().lower(),
        "topics": [k.word for k in summary.keywords],
        "raw_data": raw,
    }


def save_report(store: RowStore, summary: InsightSummary) -> dict:
    """Append one report row; the log is never rewritten."""
    return store.insert("reports", to_report_row(summary))
