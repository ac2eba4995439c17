"""Tests for the keyword sentiment counter."""

import pytest

from suggestion_box.config import InsightsConfig
from suggestion_box.insights.aggregator import SourceKind, TextItem
from suggestion_box.insights.sentiment import (
    NEGATIVE,
    NEUTRAL,
    POSITIVE,
    SentimentCounter,
    SentimentHistogram,
)


@pytest.fixture
def counter():
    return SentimentCounter.from_config(InsightsConfig())


def _items(*texts: str) -> list[TextItem]:
    return [TextItem(text=t, source_kind=SourceKind.FEEDBACK) for t in texts]


def test_positive_text(counter):
    assert counter.classify("Great I love this feature, it's amazing") == POSITIVE


def test_negative_text(counter):
    assert counter.classify("This is terrible and awful") == NEGATIVE


def test_tie_is_neutral(counter):
    assert counter.classify("good but bad") == NEUTRAL
    assert counter.classify("nothing to report") == NEUTRAL


def test_hits_count_distinct_list_words(counter):
    # "great" twice still counts once: hits are list words present, not occurrences
    assert counter.hits("great great GREAT") == (1, 0)


def test_substring_mode_matches_inside_words(counter):
    assert counter.match_mode == "substring"
    assert counter.classify("goodbye everyone") == POSITIVE


def test_word_mode_requires_whole_words():
    counter = SentimentCounter.from_config(InsightsConfig(match_mode="word"))
    assert counter.classify("goodbye everyone") == NEUTRAL
    assert counter.classify("a good day") == POSITIVE


def test_unknown_mode_rejected():
    with pytest.raises(ValueError):
        SentimentCounter(["good"], ["bad"], match_mode="fuzzy")  # type: ignore[arg-type]


def test_histogram_scenario(counter):
    hist = counter.count(
        _items("Great I love this feature, it's amazing", "This is terrible and awful")
    )
    assert (hist.positive, hist.neutral, hist.negative) == (1, 0, 1)


def test_counts_sum_to_items(counter):
    texts = ["good", "bad", "meh", "love it", "hate it", "", "awful great"]
    hist = counter.count(_items(*texts))
    assert hist.total == len(texts)


def test_percentages_round():
    hist = SentimentHistogram(positive=1, neutral=1, negative=1)
    assert hist.percentages() == {POSITIVE: 33, NEUTRAL: 33, NEGATIVE: 33}


def test_percentages_zero_total():
    assert SentimentHistogram().percentages() == {POSITIVE: 0, NEUTRAL: 0, NEGATIVE: 0}


def test_buckets_order_and_colors():
    buckets = SentimentHistogram(positive=2, neutral=1, negative=0).buckets()
    assert [b.label for b in buckets] == [POSITIVE, NEUTRAL, NEGATIVE]
    assert [b.count for b in buckets] == [2, 1, 0]
    assert buckets[0].color == "#22c55e"
    assert buckets[2].color == "#ef4444"


def test_dominant_and_ties():
    assert SentimentHistogram(positive=3, neutral=1, negative=0).dominant() == POSITIVE
    assert SentimentHistogram(positive=2, neutral=0, negative=2).dominant() == NEUTRAL
