"""Tests for dashboard statistics."""

from datetime import date

from suggestion_box.store.row_store import RowStore
from suggestion_box.submissions.stats import compute_stats, submissions_frame


def _seed() -> RowStore:
    store = RowStore()
    store.insert("users", {"session_id": "a"})
    store.insert("users", {"session_id": "b"})
    store.insert(
        "suggestions",
        {"title": "Old", "content": "x", "created_at": "2025-03-01T09:00:00+00:00"},
    )
    store.insert(
        "suggestions",
        {"title": "New", "content": "y", "created_at": "2025-03-02T10:00:00+00:00"},
    )
    store.insert(
        "feedback",
        {"content": "z", "category": "ui", "created_at": "2025-03-02T08:00:00+00:00"},
    )
    return store


def test_frame_is_newest_first():
    df = submissions_frame(_seed())
    assert list(df["type"]) == ["suggestion", "feedback", "suggestion"]
    assert df.iloc[0]["title"] == "New"


def test_empty_frame_has_columns():
    df = submissions_frame(RowStore())
    assert df.empty
    assert "created_at" in df.columns


def test_stats_counts():
    stats = compute_stats(_seed(), today=date(2025, 3, 2))
    assert stats.total_suggestions == 2
    assert stats.total_feedback == 1
    assert stats.total_users == 2
    assert stats.today_count == 2


def test_stats_empty_store():
    stats = compute_stats(RowStore(), today=date(2025, 3, 2))
    assert (stats.total_suggestions, stats.total_feedback, stats.today_count) == (0, 0, 0)
