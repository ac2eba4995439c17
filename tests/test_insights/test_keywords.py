"""Tests for KeywordExtractor."""

import pytest

from suggestion_box.insights.aggregator import SourceKind, TextItem
from suggestion_box.insights.keywords import STOPWORDS, KeywordCount, KeywordExtractor, tokenize


@pytest.fixture
def extractor():
    return KeywordExtractor(top_k=8)


def _items(*texts: str) -> list[TextItem]:
    return [TextItem(text=t, source_kind=SourceKind.SUGGESTION) for t in texts]


def test_tokenize_strips_punctuation_and_lowercases():
    assert tokenize("Hello, World! It's great.") == ["hello", "world", "its", "great"]


def test_short_tokens_and_stopwords_dropped(extractor):
    result = extractor.extract(_items("Great I love this feature, it's amazing and that"))
    words = [k.word for k in result]
    assert "love" in words
    assert "amazing" in words
    assert "this" not in words
    assert "and" not in words
    assert "its" not in words


def test_counts_are_global(extractor):
    result = extractor.extract(_items("pricing is high", "pricing again", "more pricing"))
    assert result[0] == KeywordCount(word="pricing", count=3)


def test_sorted_descending_with_first_seen_ties(extractor):
    result = extractor.extract(_items("zebra apple", "apple mango", "mango zebra"))
    # all three tie at 2: first-seen order is zebra, apple, mango
    assert [k.word for k in result] == ["zebra", "apple", "mango"]


def test_truncated_to_top_k():
    extractor = KeywordExtractor(top_k=5)
    text = " ".join(f"word{i}" for i in range(20))
    result = extractor.extract(_items(text))
    assert len(result) == 5


def test_output_properties_hold():
    texts = [
        "The checkout flow should remember delivery addresses",
        "Checkout takes too long, delivery options are confusing",
        "Please add dark mode for the checkout page and the mobile app",
        "that those these with would could should",
    ]
    extractor = KeywordExtractor(top_k=8)
    result = extractor.extract(_items(*texts))
    assert len(result) <= 8
    counts = [k.count for k in result]
    assert counts == sorted(counts, reverse=True)
    for kw in result:
        assert len(kw.word) > 3
        assert kw.word not in STOPWORDS


def test_score_capped_at_100():
    assert KeywordCount("x", 3).score == 30
    assert KeywordCount("x", 25).score == 100


def test_empty_corpus(extractor):
    assert extractor.extract([]) == []


def test_negative_top_k_rejected():
    with pytest.raises(ValueError):
        KeywordExtractor(top_k=-1)
