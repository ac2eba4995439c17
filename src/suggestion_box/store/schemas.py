"""Dataclasses for the rows held in the suggestion-box store."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


def _text(value: Any) -> str:
    """Coerce a possibly-null or non-string column to text."""
    return value if isinstance(value, str) else ""


def _optional(value: Any) -> str | None:
    return value if isinstance(value, str) and value else None


@dataclass
class User:
    """A soft per-browser identity (not an authenticated account)."""

    id: str
    session_id: str | None
    created_at: str
    email: str | None = None

    @classmethod
    def from_row(cls, row: dict) -> User:
        return cls(
            id=row["id"],
            session_id=_optional(row.get("session_id")),
            created_at=_text(row.get("created_at")),
            email=_optional(row.get("email")),
        )


@dataclass
class Suggestion:
    """A titled suggestion submitted through the form."""

    id: str
    user_id: str | None
    title: str
    content: str
    created_at: str

    @classmethod
    def from_row(cls, row: dict) -> Suggestion:
        return cls(
            id=row["id"],
            user_id=_optional(row.get("user_id")),
            title=_text(row.get("title")),
            content=_text(row.get("content")),
            created_at=_text(row.get("created_at")),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "title": self.title,
            "content": self.content,
            "created_at": self.created_at,
            "type": "suggestion",
        }


@dataclass
class Feedback:
    """A free-text feedback entry with an optional category."""

    id: str
    user_id: str | None
    content: str
    created_at: str
    category: str | None = None

    @classmethod
    def from_row(cls, row: dict) -> Feedback:
        return cls(
            id=row["id"],
            user_id=_optional(row.get("user_id")),
            content=_text(row.get("content")),
            created_at=_text(row.get("created_at")),
            category=_optional(row.get("category")),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "title": None,
            "content": self.content,
            "category": self.category,
            "created_at": self.created_at,
            "type": "feedback",
        }


@dataclass
class Report:
    """A persisted, immutable snapshot of one insight run."""

    id: str
    generated_at: str
    summary: str
    sentiment: str
    topics: list[str] = field(default_factory=list)
    raw_data: dict = field(default_factory=dict)

    @classmethod
    def from_row(cls, row: dict) -> Report:
        topics = row.get("topics")
        raw = row.get("raw_data")
        return cls(
            id=row["id"],
            generated_at=_text(row.get("generated_at")) or _text(row.get("created_at")),
            summary=_text(row.get("summary")),
            sentiment=_text(row.get("sentiment")),
            topics=[str(t) for t in topics] if topics is not None else [],
            raw_data=dict(raw) if isinstance(raw, dict) else {},
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "generated_at": self.generated_at,
            "summary": self.summary,
            "sentiment": self.sentiment,
            "topics": self.topics,
            "raw_data": self.raw_data,
        }


@dataclass
class QuizSettings:
    """Admin switch controlling quiz visibility."""

    id: str
    is_active: bool
    created_at: str
    updated_at: str

    @classmethod
    def from_row(cls, row: dict) -> QuizSettings:
        return cls(
            id=row["id"],
            is_active=bool(row.get("is_active")),
            created_at=_text(row.get("created_at")),
            updated_at=_text(row.get("updated_at")) or _text(row.get("created_at")),
        )
