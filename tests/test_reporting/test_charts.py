"""Tests for plotly chart builders."""

from __future__ import annotations

import json
from datetime import UTC, datetime

import pytest

from suggestion_box.insights.pipeline import InsightPipeline, NoData
from suggestion_box.reporting.charts import keyword_bar, sentiment_donut
from suggestion_box.store.schemas import Feedback, Suggestion


@pytest.fixture
def summary():
    suggestions = [
        Suggestion(id="s1", user_id="u", title="Pricing", content="pricing is great",
                   created_at=""),
    ]
    feedback = [
        Feedback(id="f1", user_id="u", content="Pricing page is awful", created_at=""),
        Feedback(id="f2", user_id="u", content="Loading screen takes forever", created_at=""),
    ]
    return InsightPipeline().run(suggestions, feedback, now=datetime(2025, 1, 1, tzinfo=UTC))


def test_donut_has_three_slices(summary):
    fig = json.loads(sentiment_donut(summary))
    pie = fig["data"][0]
    assert pie["type"] == "pie"
    assert list(pie["labels"]) == ["Positive", "Neutral", "Negative"]
    assert list(pie["values"]) == [1, 1, 1]


def test_keyword_bar_order(summary):
    fig = json.loads(keyword_bar(summary))
    bar = fig["data"][0]
    assert bar["type"] == "bar"
    assert list(bar["x"])[0] == "pricing"
    assert list(bar["y"])[0] == 3


def test_no_data_returns_empty_json():
    empty = NoData()
    assert sentiment_donut(empty) == "{}"
    assert keyword_bar(empty) == "{}"
