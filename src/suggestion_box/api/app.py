"""FastAPI application for the Suggestion Box service."""

from __future__ import annotations

import asyncio
import json
from collections.abc import AsyncIterator, Iterable
from contextlib import asynccontextmanager

import pandas as pd
from fastapi import FastAPI, HTTPException, Query, Request, Response
from fastapi.responses import StreamingResponse

from suggestion_box.api.models import (
    FeedbackRequest,
    HealthResponse,
    InsightsResponse,
    LimitStatusResponse,
    QuizStateRequest,
    QuizStateResponse,
    ReportEntry,
    ReportsResponse,
    StatsResponse,
    SubmissionEntry,
    SubmissionsResponse,
    SuggestionRequest,
)
from suggestion_box.config import app_config, insights_config, limits_config, store_config
from suggestion_box.insights.pipeline import (
    AnalysisFailedError,
    InsightPipeline,
    InsightSummary,
    save_report,
)
from suggestion_box.store.row_store import RowStore
from suggestion_box.store.schemas import Report
from suggestion_box.submissions.service import (
    QuizToggle,
    SubmissionLimitError,
    SubmissionService,
)
from suggestion_box.submissions.session import derive_session_id, is_valid_session_id
from suggestion_box.submissions.stats import compute_stats, submissions_frame

_WATCHED_TABLES = ("suggestions", "feedback", "quiz_settings", "reports")

# ---------------------------------------------------------------------------
# Store, opened once for the lifetime of the process
# ---------------------------------------------------------------------------

_store: RowStore | None = None


def _get_store() -> RowStore:
    global _store
    if _store is None:
        _store = RowStore.from_config(store_config)
    return _store


def _pipeline() -> InsightPipeline:
    return InsightPipeline(config=insights_config)


def _session_id(request: Request, response: Response) -> str:
    """Read the session cookie, minting and setting a new id when absent."""
    cookie = request.cookies.get(app_config.session_cookie)
    if is_valid_session_id(cookie):
        return cookie
    session_id = derive_session_id(
        user_agent=request.headers.get("user-agent", ""),
        language=request.headers.get("accept-language", ""),
    )
    response.set_cookie(
        app_config.session_cookie,
        session_id,
        max_age=60 * 60 * 24 * 365,
        httponly=True,
        samesite="lax",
    )
    return session_id


# ---------------------------------------------------------------------------
# App
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI):  # noqa: RUF029
    # Warm up: load persisted tables before the first request
    _get_store()
    yield


app = FastAPI(
    title="Suggestion Box API",
    description=(
        "Collect suggestions and feedback, enforce per-session caps and "
        "serve keyword-based insights. Run 'suggestion-box serve' to start the server."
    ),
    version="0.1.0",
    lifespan=lifespan,
)


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------


@app.get("/health", response_model=HealthResponse, tags=["Meta"])
def health() -> HealthResponse:
    """Liveness check; returns row counts from the store."""
    store = _get_store()
    return HealthResponse(
        status="ok",
        suggestions=store.count("suggestions"),
        feedback=store.count("feedback"),
        reports=store.count("reports"),
        data_path=str(store.data_dir) if store.data_dir else None,
    )


@app.get("/session", response_model=LimitStatusResponse, tags=["Submissions"])
def session(request: Request, response: Response) -> LimitStatusResponse:
    """Identify the caller's session and report its remaining allowance."""
    session_id = _session_id(request, response)
    status = SubmissionService(_get_store(), limits_config).status(session_id)
    return LimitStatusResponse(session_id=session_id, **status.to_dict())


@app.post(
    "/suggestions", response_model=SubmissionEntry, status_code=201, tags=["Submissions"]
)
def submit_suggestion(
    req: SuggestionRequest, request: Request, response: Response
) -> SubmissionEntry:
    session_id = _session_id(request, response)
    service = SubmissionService(_get_store(), limits_config)
    try:
        suggestion = service.submit_suggestion(session_id, req.title, req.content)
    except SubmissionLimitError as exc:
        raise HTTPException(status_code=429, detail=str(exc)) from exc
    return SubmissionEntry(**suggestion.to_dict())


@app.post("/feedback", response_model=SubmissionEntry, status_code=201, tags=["Submissions"])
def submit_feedback(
    req: FeedbackRequest, request: Request, response: Response
) -> SubmissionEntry:
    session_id = _session_id(request, response)
    service = SubmissionService(_get_store(), limits_config)
    try:
        feedback = service.submit_feedback(session_id, req.content, req.category)
    except SubmissionLimitError as exc:
        raise HTTPException(status_code=429, detail=str(exc)) from exc
    return SubmissionEntry(**feedback.to_dict())


@app.get("/submissions", response_model=SubmissionsResponse, tags=["Admin"])
def submissions(limit: int = Query(100, ge=1)) -> SubmissionsResponse:
    """Suggestions and feedback combined, newest first."""
    df = submissions_frame(_get_store())
    entries = [
        SubmissionEntry(
            id=row["id"],
            type=row["type"],
            title=row["title"] if isinstance(row["title"], str) else None,
            content=row["content"],
            category=row["category"] if isinstance(row["category"], str) else None,
            created_at=row["created_at"].isoformat() if pd.notna(row["created_at"]) else "",
        )
        for _, row in df.head(limit).iterrows()
    ]
    return SubmissionsResponse(submissions=entries, total=len(df))


@app.get("/stats", response_model=StatsResponse, tags=["Admin"])
def stats() -> StatsResponse:
    result = compute_stats(_get_store())
    return StatsResponse(
        total_suggestions=result.total_suggestions,
        total_feedback=result.total_feedback,
        total_users=result.total_users,
        today_count=result.today_count,
        submit_url=app_config.submit_url,
    )


@app.get("/insights", response_model=InsightsResponse, tags=["Analysis"])
async def insights() -> InsightsResponse:
    """Sentiment histogram, top keywords and recommendations over all submissions."""
    try:
        result = await _pipeline().analyze_store(_get_store())
    except AnalysisFailedError as exc:
        raise HTTPException(status_code=503, detail=f"Analysis failed: {exc}") from exc
    return InsightsResponse(**result.to_dict())


@app.post("/reports", response_model=ReportEntry, status_code=201, tags=["Analysis"])
async def create_report() -> ReportEntry:
    """Run the analysis and append the result to the report log."""
    store = _get_store()
    try:
        result = await _pipeline().analyze_store(store)
    except AnalysisFailedError as exc:
        raise HTTPException(status_code=503, detail=f"Analysis failed: {exc}") from exc
    if not isinstance(result, InsightSummary):
        raise HTTPException(status_code=409, detail=result.message)
    row = save_report(store, result)
    return ReportEntry(**Report.from_row(row).to_dict())


@app.get("/reports", response_model=ReportsResponse, tags=["Analysis"])
def reports() -> ReportsResponse:
    rows = _get_store().select("reports", order_by="generated_at", descending=True)
    entries = [ReportEntry(**Report.from_row(r).to_dict()) for r in rows]
    return ReportsResponse(reports=entries, total=len(entries))


@app.get("/quiz", response_model=QuizStateResponse, tags=["Admin"])
def quiz_state() -> QuizStateResponse:
    current = QuizToggle(_get_store()).settings()
    if current is None:
        return QuizStateResponse(is_active=False)
    return QuizStateResponse(is_active=current.is_active, updated_at=current.updated_at)


@app.put("/quiz", response_model=QuizStateResponse, tags=["Admin"])
def set_quiz_state(req: QuizStateRequest) -> QuizStateResponse:
    updated = QuizToggle(_get_store()).set_active(req.is_active)
    return QuizStateResponse(is_active=updated.is_active, updated_at=updated.updated_at)


# ---------------------------------------------------------------------------
# Change notifications (server-sent events)
# ---------------------------------------------------------------------------


async def change_events(
    store: RowStore,
    tables: Iterable[str] = _WATCHED_TABLES,
    limit: int | None = None,
) -> AsyncIterator[str]:
    """Yield one SSE frame per store write; stops after ``limit`` frames if given."""
    loop = asyncio.get_running_loop()
    queue: asyncio.Queue[tuple[str, dict]] = asyncio.Queue()

    def on_change(table: str, row: dict) -> None:
        # Writes arrive from threadpool workers
        loop.call_soon_threadsafe(queue.put_nowait, (table, row))

    unsubscribers = [store.subscribe(t, on_change) for t in tables]
    try:
        sent = 0
        while limit is None or sent < limit:
            table, row = await queue.get()
            payload = json.dumps({"id": row.get("id"), "created_at": row.get("created_at")})
            yield f"event: {table}\ndata: {payload}\n\n"
            sent += 1
    finally:
        for unsubscribe in unsubscribers:
            unsubscribe()


@app.get("/events", tags=["Admin"])
async def events(limit: int | None = Query(None, ge=1)) -> StreamingResponse:
    """Stream a notification whenever submissions, reports or the quiz switch change."""
    return StreamingResponse(
        change_events(_get_store(), limit=limit),
        media_type="text/event-stream",
    )
