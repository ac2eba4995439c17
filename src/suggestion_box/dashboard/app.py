"""Streamlit admin dashboard for the Suggestion Box.

Run with:
    suggestion-box dashboard
    # or directly:
    streamlit run src/suggestion_box/dashboard/app.py
"""

from __future__ import annotations

import sys
from pathlib import Path

# Make the suggestion_box package importable when run directly by Streamlit
_SRC = Path(__file__).parent.parent.parent  # .../src/
if str(_SRC) not in sys.path:
    sys.path.insert(0, str(_SRC))

import pandas as pd  # noqa: E402
import plotly.io as pio  # noqa: E402
import streamlit as st  # noqa: E402

from suggestion_box.config import app_config, insights_config, store_config  # noqa: E402
from suggestion_box.insights.pipeline import (  # noqa: E402
    AnalysisFailedError,
    InsightPipeline,
    InsightSummary,
    save_report,
)
from suggestion_box.reporting.charts import keyword_bar, sentiment_donut  # noqa: E402
from suggestion_box.store.row_store import RowStore  # noqa: E402
from suggestion_box.submissions.service import QuizToggle  # noqa: E402
from suggestion_box.submissions.stats import compute_stats, submissions_frame  # noqa: E402

# ---------------------------------------------------------------------------
# Page config (must be first Streamlit call)
# ---------------------------------------------------------------------------

st.set_page_config(
    page_title="Suggestion Box Admin",
    page_icon="💡",
    layout="wide",
)


@st.cache_resource(show_spinner=False)
def _store() -> RowStore:
    # Reads re-sync with the table files, so rows written by the API process show up
    return RowStore.from_config(store_config)


def _render(chart_json: str) -> None:
    if chart_json and chart_json != "{}":
        st.plotly_chart(pio.from_json(chart_json), width="stretch")
    else:
        st.info("Not enough data to render this chart.")


# ---------------------------------------------------------------------------
# Sections
# ---------------------------------------------------------------------------


def _kpi_cards(store: RowStore) -> None:
    stats = compute_stats(store)
    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Total Suggestions", stats.total_suggestions)
    c2.metric("Total Feedback", stats.total_feedback)
    c3.metric("Total Users", stats.total_users)
    c4.metric("Today's Activity", stats.today_count)


def _share_panel() -> None:
    st.subheader("Submission Link")
    st.caption("Share this link (or a QR code of it) for mobile access.")
    st.code(app_config.submit_url, language=None)


def _submissions_panel(store: RowStore) -> None:
    st.subheader("Recent Submissions")
    df = submissions_frame(store)
    if df.empty:
        st.info("No submissions yet.")
        return
    view = df[["created_at", "type", "title", "content", "category"]].head(50).copy()
    view["created_at"] = view["created_at"].dt.strftime("%Y-%m-%d %H:%M")
    view = view.fillna("")
    st.dataframe(view, hide_index=True, width="stretch")


def _insights_panel(store: RowStore) -> None:
    st.subheader("AI-Powered Analytics")
    try:
        result = InsightPipeline(config=insights_config).analyze_store_sync(store)
    except AnalysisFailedError as exc:
        st.error(f"Analysis failed: {exc}")
        return

    if not isinstance(result, InsightSummary):
        st.info("No data available for analysis. " + result.message)
        return

    col_l, col_r = st.columns(2)
    with col_l:
        _render(sentiment_donut(result))
        pct = result.sentiment.percentages()
        for bucket in result.sentiment.buckets():
            st.markdown(
                f"<span style='color:{bucket.color}'>●</span> **{bucket.label}** "
                f"{bucket.count} ({pct[bucket.label]}%)",
                unsafe_allow_html=True,
            )
    with col_r:
        _render(keyword_bar(result))

    st.markdown("**Actionable Insights**")
    for rec in result.recommendations:
        st.markdown(f"- {rec}")

    if st.button("Save report"):
        row = save_report(store, result)
        st.success(f"Report saved ({row['generated_at']})")


def _reports_panel(store: RowStore) -> None:
    rows = store.select("reports", order_by="generated_at", descending=True)
    if not rows:
        return
    with st.expander(f"Report history ({len(rows)})"):
        df = pd.DataFrame(rows)[["generated_at", "sentiment", "summary"]]
        st.dataframe(df, hide_index=True, width="stretch")


def _quiz_toggle(store: RowStore) -> None:
    st.subheader("Quiz Visibility")
    toggle = QuizToggle(store)
    current = toggle.is_active()
    wanted = st.toggle("Show the quiz to users", value=current)
    if wanted != current:
        toggle.set_active(wanted)
        st.toast(f"Quiz {'enabled' if wanted else 'disabled'}")


# ---------------------------------------------------------------------------
# Layout
# ---------------------------------------------------------------------------


@st.fragment(run_every=app_config.dashboard_refresh_seconds)
def _live_view() -> None:
    store = _store()
    _kpi_cards(store)
    st.divider()
    col_l, col_r = st.columns([1, 2])
    with col_l:
        _share_panel()
        st.divider()
        _quiz_toggle(store)
    with col_r:
        _submissions_panel(store)
    st.divider()
    _insights_panel(store)
    _reports_panel(store)


st.title("Admin Dashboard")
st.caption("Monitor submissions and generate insights in real-time")
_live_view()
