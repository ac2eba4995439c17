"""Plotly chart functions returning JSON-serialisable figures for embedding."""

from __future__ import annotations

import plotly.graph_objects as go

from suggestion_box.insights.pipeline import InsightResult


def sentiment_donut(result: InsightResult) -> str:
    """Donut of Positive / Neutral / Negative counts."""
    if not result.has_data:
        return "{}"

    buckets = result.sentiment.buckets()
    fig = go.Figure(
        go.Pie(
            labels=[b.label for b in buckets],
            values=[b.count for b in buckets],
            marker=dict(colors=[b.color for b in buckets]),
            hole=0.5,
            sort=False,
            textinfo="label+value",
        )
    )
    fig.update_layout(
        title="Sentiment Analysis",
        height=350,
        margin=dict(l=20, r=20, t=60, b=20),
        showlegend=False,
        paper_bgcolor="white",
    )
    return fig.to_json()


def keyword_bar(result: InsightResult) -> str:
    """Vertical bar chart of the top keywords, most frequent first."""
    if not result.has_data or not result.keywords:
        return "{}"

    fig = go.Figure(
        go.Bar(
            x=[k.word for k in result.keywords],
            y=[k.count for k in result.keywords],
            marker_color="#8884d8",
            text=[str(k.count) for k in result.keywords],
            textposition="outside",
        )
    )
    fig.update_layout(
        title="Top Keywords & Themes",
        xaxis_title="",
        yaxis_title="Mentions",
        height=350,
        margin=dict(l=40, r=20, t=60, b=40),
        plot_bgcolor="white",
        paper_bgcolor="white",
    )
    return fig.to_json()
