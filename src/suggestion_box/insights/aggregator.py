"""Collect suggestion and feedback text into one stream of analysable items."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from enum import Enum

from suggestion_box.store.schemas import Feedback, Suggestion


class SourceKind(str, Enum):
    SUGGESTION = "suggestion"
    FEEDBACK = "feedback"


@dataclass(frozen=True)
class TextItem:
    """One unit of submitted text, tagged with where it came from."""

    text: str
    source_kind: SourceKind
    category: str | None = None


def _as_text(value: object) -> str:
    return value if isinstance(value, str) else ""


def aggregate(
    suggestions: Iterable[Suggestion],
    feedback: Iterable[Feedback],
) -> Iterator[TextItem]:
    """Yield every suggestion (title + content), then every feedback entry.

    Source order is preserved; nothing is filtered or deduplicated. Missing or
    non-string fields read as empty text so one bad record does not stop the rest.
    """
    for s in suggestions:
        title = _as_text(getattr(s, "title", None))
        content = _as_text(getattr(s, "content", None))
        yield TextItem(text=f"{title} {content}", source_kind=SourceKind.SUGGESTION)

    for f in feedback:
        yield TextItem(
            text=_as_text(getattr(f, "content", None)),
            source_kind=SourceKind.FEEDBACK,
            category=getattr(f, "category", None),
        )
