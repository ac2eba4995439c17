"""Dashboard statistics over the combined submission list."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, date, datetime

import pandas as pd

from suggestion_box.store.row_store import RowStore
from suggestion_box.store.schemas import Feedback, Suggestion

_COLUMNS = ["id", "type", "user_id", "title", "content", "category", "created_at"]


@dataclass
class DashboardStats:
    total_suggestions: int
    total_feedback: int
    total_users: int
    today_count: int


def submissions_frame(store: RowStore) -> pd.DataFrame:
    """All suggestions and feedback in one frame, newest first."""
    records = [Suggestion.from_row(r).to_dict() for r in store.select("suggestions")]
    records += [Feedback.from_row(r).to_dict() for r in store.select("feedback")]
    if not records:
        return pd.DataFrame(columns=_COLUMNS)

    df = pd.DataFrame(records).reindex(columns=_COLUMNS)
    df["created_at"] = pd.to_datetime(
        df["created_at"], utc=True, errors="coerce", format="ISO8601"
    )
    return df.sort_values("created_at", ascending=False, na_position="last").reset_index(
        drop=True
    )


def compute_stats(store: RowStore, today: date | None = None) -> DashboardStats:
    """Totals plus submissions whose UTC creation date is ``today``."""
    today = today or datetime.now(tz=UTC).date()
    df = submissions_frame(store)
    if df.empty:
        today_count = 0
    else:
        today_count = int((df["created_at"].dt.date == today).sum())

    return DashboardStats(
        total_suggestions=int((df["type"] == "suggestion").sum()),
        total_feedback=int((df["type"] == "feedback").sum()),
        total_users=store.count("users"),
        today_count=today_count,
    )
