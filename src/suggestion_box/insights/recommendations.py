"""Fixed, ordered rules turning counts into short admin-facing recommendations."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from suggestion_box.insights.keywords import KeywordCount
from suggestion_box.insights.sentiment import SentimentHistogram

FALLBACK = "Keep monitoring submissions for emerging patterns."
NO_DATA = "No submissions yet. Encourage users to share their thoughts!"


@dataclass(frozen=True)
class RuleContext:
    """Everything a rule may look at for one analysis run."""

    histogram: SentimentHistogram
    keywords: list[KeywordCount]
    suggestion_count: int
    feedback_count: int

    @property
    def total(self) -> int:
        return self.histogram.total


Rule = Callable[[RuleContext], str | None]


class RecommendationEngine:
    """Evaluate every rule in definition order; each may contribute one line."""

    def __init__(self, positive_share: float = 0.7, engagement_threshold: int = 10) -> None:
        self._positive_share = positive_share
        self._engagement_threshold = engagement_threshold
        self._rules: list[Rule] = [
            self._suggestion_heavy,
            self._negative_alert,
            self._mostly_positive,
            self._top_keyword,
            self._high_engagement,
        ]

    def _suggestion_heavy(self, ctx: RuleContext) -> str | None:
        if ctx.suggestion_count > ctx.feedback_count * 2:
            return (
                "Users are very engaged with suggestions. "
                "Consider creating a suggestion voting system."
            )
        return None

    def _negative_alert(self, ctx: RuleContext) -> str | None:
        if ctx.histogram.negative > ctx.histogram.positive:
            return (
                "There are concerning negative sentiments. "
                "Review recent submissions for urgent issues."
            )
        return None

    def _mostly_positive(self, ctx: RuleContext) -> str | None:
        if ctx.histogram.positive > ctx.total * self._positive_share:
            return "Overwhelmingly positive feedback! Consider highlighting success stories."
        return None

    def _top_keyword(self, ctx: RuleContext) -> str | None:
        if ctx.keywords:
            top = ctx.keywords[0]
            return (
                f'"{top.word}" appears frequently ({top.count} times). '
                "This seems to be a key concern."
            )
        return None

    def _high_engagement(self, ctx: RuleContext) -> str | None:
        if ctx.total > self._engagement_threshold:
            return (
                "Great engagement! Consider implementing user authentication "
                "for better tracking."
            )
        return None

    def recommend(self, ctx: RuleContext) -> list[str]:
        lines = [line for rule in self._rules if (line := rule(ctx)) is not None]
        return lines or [FALLBACK]
