"""Pydantic response/request models for the Suggestion Box API."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class HealthResponse(BaseModel):
    status: str
    suggestions: int
    feedback: int
    reports: int
    data_path: str | None


class SuggestionRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(min_length=3, max_length=100)
    content: str = Field(min_length=10, max_length=500)


class FeedbackRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    content: str = Field(min_length=10, max_length=1000)
    category: str | None = Field(default=None, max_length=50)


class LimitStatusResponse(BaseModel):
    session_id: str
    user_id: str
    suggestion_count: int
    feedback_count: int
    max_suggestions: int
    max_feedback: int
    can_submit_suggestion: bool
    can_submit_feedback: bool


class SubmissionEntry(BaseModel):
    id: str
    type: str
    title: str | None = None
    content: str
    category: str | None = None
    created_at: str


class SubmissionsResponse(BaseModel):
    submissions: list[SubmissionEntry]
    total: int


class StatsResponse(BaseModel):
    total_suggestions: int
    total_feedback: int
    total_users: int
    today_count: int
    submit_url: str


class SentimentBucketEntry(BaseModel):
    label: str
    count: int
    color: str


class KeywordEntry(BaseModel):
    word: str
    count: int
    score: int


class InsightsResponse(BaseModel):
    has_data: bool
    generated_at: str
    message: str | None = None
    total: int = 0
    suggestion_count: int = 0
    feedback_count: int = 0
    sentiment: list[SentimentBucketEntry] = []
    sentiment_pct: dict[str, int] = {}
    keywords: list[KeywordEntry] = []
    recommendations: list[str] = []


class ReportEntry(BaseModel):
    id: str
    generated_at: str
    summary: str
    sentiment: str
    topics: list[str]
    raw_data: dict


class ReportsResponse(BaseModel):
    reports: list[ReportEntry]
    total: int


class QuizStateRequest(BaseModel):
    is_active: bool


class QuizStateResponse(BaseModel):
    is_active: bool
    updated_at: str | None = None
