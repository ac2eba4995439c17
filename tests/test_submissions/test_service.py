"""Tests for SubmissionService limits and the quiz toggle."""

from __future__ import annotations

import threading
import time
from unittest.mock import patch

import pytest

from suggestion_box.config import LimitsConfig
from suggestion_box.store.row_store import RowStore
from suggestion_box.submissions.service import (
    QuizToggle,
    SubmissionLimitError,
    SubmissionService,
)


@pytest.fixture
def store():
    return RowStore()


@pytest.fixture
def service(store):
    return SubmissionService(store, LimitsConfig(max_suggestions=2, max_feedback=1))


def test_resolve_user_creates_once(service, store):
    first = service.resolve_user("sess000000000001")
    second = service.resolve_user("sess000000000001")
    assert first.id == second.id
    assert store.count("users") == 1


def test_fresh_session_can_submit(service):
    status = service.status("a1b2c3d4e5f60718")
    assert status.suggestion_count == 0
    assert status.can_submit_suggestion
    assert status.can_submit_feedback


def test_two_suggestions_then_blocked(service):
    sid = "a1b2c3d4e5f60718"
    service.submit_suggestion(sid, "Idea one", "The first idea text")
    service.submit_suggestion(sid, "Idea two", "The second idea text")
    assert not service.status(sid).can_submit_suggestion
    with pytest.raises(SubmissionLimitError):
        service.submit_suggestion(sid, "Idea three", "The third idea text")


def test_one_feedback_then_blocked(service):
    sid = "a1b2c3d4e5f60718"
    fb = service.submit_feedback(sid, "Loved the session today", category="event")
    assert fb.category == "event"
    with pytest.raises(SubmissionLimitError):
        service.submit_feedback(sid, "Another piece of feedback")


def test_limits_are_per_session(service):
    service.submit_feedback("aaaaaaaaaaaaaaaa", "Feedback from session A")
    fb = service.submit_feedback("bbbbbbbbbbbbbbbb", "Feedback from session B")
    assert fb.content == "Feedback from session B"


def test_submission_text_is_trimmed(service):
    s = service.submit_suggestion("cccccccccccccccc", "  Title  ", "  Body text here  ")
    assert s.title == "Title"
    assert s.content == "Body text here"


def test_quiz_defaults_off(store):
    toggle = QuizToggle(store)
    assert toggle.settings() is None
    assert toggle.is_active() is False


def test_quiz_toggle_keeps_single_row(store):
    toggle = QuizToggle(store)
    toggle.set_active(True)
    assert toggle.is_active() is True
    toggle.set_active(False)
    assert toggle.is_active() is False
    assert store.count("quiz_settings") == 1


# ---------------------------------------------------------------------------
# Concurrent submissions from one session
# ---------------------------------------------------------------------------


def _race(services, session_id: str, n: int) -> list[int]:
    barrier = threading.Barrier(n)
    rejected: list[int] = []

    def worker(i: int) -> None:
        barrier.wait()
        try:
            services[i % len(services)].submit_suggestion(
                session_id, f"Idea {i}", "Some detailed suggestion content"
            )
        except SubmissionLimitError:
            rejected.append(i)

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(n)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    return rejected


def test_concurrent_submissions_respect_cap(store, service):
    real_count = store.count

    def slow_count(table, **eq):
        n = real_count(table, **eq)
        time.sleep(0.01)
        return n

    with patch.object(store, "count", side_effect=slow_count):
        rejected = _race([service], "sess00000000race", 6)

    assert store.count("users") == 1
    assert store.count("suggestions") == 2
    assert len(rejected) == 4


def test_cap_holds_across_stores_sharing_a_directory(tmp_path):
    limits = LimitsConfig(max_suggestions=2, max_feedback=1)
    services = [
        SubmissionService(RowStore(data_dir=tmp_path), limits),
        SubmissionService(RowStore(data_dir=tmp_path), limits),
    ]
    rejected = _race(services, "sess0000000share", 6)

    reopened = RowStore(data_dir=tmp_path)
    assert reopened.count("users") == 1
    assert reopened.count("suggestions") == 2
    assert len(rejected) == 4
