"""Tests for the recommendation rules."""

from suggestion_box.insights.keywords import KeywordCount
from suggestion_box.insights.recommendations import FALLBACK, RecommendationEngine, RuleContext
from suggestion_box.insights.sentiment import SentimentHistogram


def _ctx(pos=0, neu=0, neg=0, keywords=None, suggestions=0, feedback=0) -> RuleContext:
    return RuleContext(
        histogram=SentimentHistogram(positive=pos, neutral=neu, negative=neg),
        keywords=keywords or [],
        suggestion_count=suggestions,
        feedback_count=feedback,
    )


def test_fallback_when_nothing_fires():
    engine = RecommendationEngine()
    # 1 suggestion vs 1 feedback, neutral, no keywords, small corpus
    assert engine.recommend(_ctx(neu=2, suggestions=1, feedback=1)) == [FALLBACK]


def test_negative_alert():
    recs = RecommendationEngine().recommend(_ctx(pos=1, neg=2, suggestions=1, feedback=2))
    assert any("negative sentiments" in r for r in recs)


def test_mostly_positive():
    recs = RecommendationEngine().recommend(_ctx(pos=8, neu=2, suggestions=5, feedback=5))
    assert any("Overwhelmingly positive" in r for r in recs)


def test_exactly_seventy_percent_does_not_fire():
    recs = RecommendationEngine().recommend(_ctx(pos=7, neu=3, suggestions=5, feedback=5))
    assert not any("Overwhelmingly positive" in r for r in recs)


def test_top_keyword_named_with_count():
    recs = RecommendationEngine().recommend(
        _ctx(neu=1, keywords=[KeywordCount("pricing", 6)], suggestions=1, feedback=1)
    )
    assert recs == ['"pricing" appears frequently (6 times). This seems to be a key concern.']


def test_engagement_threshold():
    engine = RecommendationEngine(engagement_threshold=10)
    assert not any("engagement" in r for r in engine.recommend(_ctx(neu=10, feedback=10)))
    assert any("engagement" in r for r in engine.recommend(_ctx(neu=11, feedback=11)))


def test_suggestion_heavy():
    recs = RecommendationEngine().recommend(_ctx(neu=3, suggestions=3, feedback=1))
    assert recs[0].startswith("Users are very engaged with suggestions")


def test_output_follows_rule_order():
    recs = RecommendationEngine().recommend(
        _ctx(pos=1, neg=11, keywords=[KeywordCount("bugs", 4)], suggestions=12, feedback=0)
    )
    assert len(recs) == 4
    assert "suggestion voting" in recs[0]
    assert "negative sentiments" in recs[1]
    assert '"bugs"' in recs[2]
    assert "engagement" in recs[3]
