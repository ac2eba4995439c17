"""Submission gate: session users, per-session caps, quiz toggle."""

from __future__ import annotations

from dataclasses import dataclass

from suggestion_box.config import LimitsConfig
from suggestion_box.store.row_store import RowStore, utc_now
from suggestion_box.store.schemas import Feedback, QuizSettings, Suggestion, User


class SubmissionLimitError(RuntimeError):
    """Raised when a session has used up its allowance for a submission kind."""


@dataclass
class LimitStatus:
    """How much a session has submitted and what it may still submit."""

    user_id: str
    suggestion_count: int
    feedback_count: int
    max_suggestions: int
    max_feedback: int

    @property
    def can_submit_suggestion(self) -> bool:
        return self.suggestion_count < self.max_suggestions

    @property
    def can_submit_feedback(self) -> bool:
        return self.feedback_count < self.max_feedback

    def to_dict(self) -> dict:
        return {
            "user_id": self.user_id,
            "suggestion_count": self.suggestion_count,
            "feedback_count": self.feedback_count,
            "max_suggestions": self.max_suggestions,
            "max_feedback": self.max_feedback,
            "can_submit_suggestion": self.can_submit_suggestion,
            "can_submit_feedback": self.can_submit_feedback,
        }


class SubmissionService:
    """Create submissions on behalf of a session, enforcing the caps.

    The cap check and the insert run inside one store transaction, so
    simultaneous requests from a session cannot both pass the check.
    """

    def __init__(self, store: RowStore, limits: LimitsConfig | None = None) -> None:
        self._store = store
        self._limits = limits or LimitsConfig()

    def resolve_user(self, session_id: str) -> User:
        """Return the user row for ``session_id``, creating it on first sight."""
        with self._store.transaction():
            existing = self._store.select("users", session_id=session_id)
            if existing:
                return User.from_row(existing[0])
            return User.from_row(self._store.insert("users", {"session_id": session_id}))

    def status(self, session_id: str) -> LimitStatus:
        with self._store.transaction():
            user = self.resolve_user(session_id)
            return LimitStatus(
                user_id=user.id,
                suggestion_count=self._store.count("suggestions", user_id=user.id),
                feedback_count=self._store.count("feedback", user_id=user.id),
                max_suggestions=self._limits.max_suggestions,
                max_feedback=self._limits.max_feedback,
            )

    def submit_suggestion(self, session_id: str, title: str, content: str) -> Suggestion:
        with self._store.transaction():
            status = self.status(session_id)
            if not status.can_submit_suggestion:
                raise SubmissionLimitError(
                    f"Suggestion limit reached ({status.max_suggestions} per session)"
                )
            row = self._store.insert(
                "suggestions",
                {"user_id": status.user_id, "title": title.strip(), "content": content.strip()},
            )
        return Suggestion.from_row(row)

    def submit_feedback(
        self, session_id: str, content: str, category: str | None = None
    ) -> Feedback:
        with self._store.transaction():
            status = self.status(session_id)
            if not status.can_submit_feedback:
                raise SubmissionLimitError(
                    f"Feedback limit reached ({status.max_feedback} per session)"
                )
            row = self._store.insert(
                "feedback",
                {"user_id": status.user_id, "content": content.strip(), "category": category},
            )
        return Feedback.from_row(row)


class QuizToggle:
    """Single-row on/off switch for the quiz section."""

    def __init__(self, store: RowStore) -> None:
        self._store = store

    def settings(self) -> QuizSettings | None:
        rows = self._store.select("quiz_settings", order_by="created_at")
        return QuizSettings.from_row(rows[0]) if rows else None

    def is_active(self) -> bool:
        current = self.settings()
        return current.is_active if current else False

    def set_active(self, active: bool) -> QuizSettings:
        with self._store.transaction():
            current = self.settings()
            if current is None:
                now = utc_now()
                row = self._store.insert(
                    "quiz_settings", {"is_active": active, "created_at": now, "updated_at": now}
                )
            else:
                row = self._store.update(
                    "quiz_settings", current.id, is_active=active, updated_at=utc_now()
                )
        return QuizSettings.from_row(row)
