"""Domain models for captures, ranking results and answers."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional, List, Dict, Any
from enum import Enum


class CaptureType(Enum):
    """Types of saved captures."""
    TEXT = "text"
    LINK = "link"
    NOTE = "note"
    QUOTE = "quote"
    TODO = "todo"


def ensure_aware(value: datetime) -> datetime:
    """Treat naive datetimes as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def parse_timestamp(value: Any) -> datetime:
    """Parse a datetime or an ISO-8601 string (a trailing 'Z' is accepted)."""
    if isinstance(value, datetime):
        return ensure_aware(value)
    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        return ensure_aware(datetime.fromisoformat(text))
    raise ValueError(f"Unsupported timestamp: {value!r}")


@dataclass(frozen=True)
class Capture:
    """A single saved user artifact, as supplied by the persistence layer."""

    id: str
    content: Optional[str]
    created_at: datetime
    type: CaptureType = CaptureType.TEXT
    title: Optional[str] = None
    source: Optional[str] = None

    def __post_init__(self):
        if isinstance(self.type, str):
            object.__setattr__(self, "type", CaptureType(self.type))
        object.__setattr__(self, "created_at", parse_timestamp(self.created_at))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Capture":
        """Build a capture from the API's JSON shape."""
        if data.get("id") is None:
            raise ValueError("Capture has no id")

        created = data.get("createdAt", data.get("created_at"))
        if created is None:
            raise ValueError(f"Capture {data.get('id')!r} has no creation time")

        return cls(
            id=str(data["id"]),
            title=data.get("title"),
            content=data.get("content"),
            type=CaptureType(data.get("type", "text")),
            source=data.get("source"),
            created_at=parse_timestamp(created),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "content": self.content,
            "type": self.type.value,
            "source": self.source,
            "createdAt": self.created_at.isoformat(),
        }


@dataclass(frozen=True)
class ScoredCapture:
    """A capture with its relevance score for one query. Never persisted."""

    capture: Capture
    relevance_score: int

    @property
    def id(self) -> str:
        return self.capture.id

    @property
    def title(self) -> Optional[str]:
        return self.capture.title

    @property
    def content(self) -> Optional[str]:
        return self.capture.content

    @property
    def type(self) -> CaptureType:
        return self.capture.type

    @property
    def source(self) -> Optional[str]:
        return self.capture.source

    @property
    def created_at(self) -> datetime:
        return self.capture.created_at

    def to_dict(self) -> Dict[str, Any]:
        data = self.capture.to_dict()
        data["relevanceScore"] = self.relevance_score
        return data


@dataclass
class AnswerResult:
    """Represents the answer to a question and the captures it was built from."""

    answer: str
    captures_used: List[Capture]
    provider: Optional[str] = None
    model: Optional[str] = None
    used_fallback: bool = False
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def sources(self, limit: int = 5) -> List[Dict[str, Any]]:
        """Short descriptions of the captures shown to the user as sources."""
        return [
            {"id": c.id, "title": c.title, "type": c.type.value}
            for c in self.captures_used[:limit]
        ]

    def format_response(self, include_sources: bool = True) -> str:
        """Format the answer for display."""
        output = [self.answer]

        if include_sources and self.captures_used:
            output.append("\n\n---\nSources:")
            for i, capture in enumerate(self.captures_used[:5], 1):
                date_str = capture.created_at.strftime("%Y-%m-%d")
                output.append(f"{i}. {date_str}: {capture.title or 'Untitled'}")

        return "\n".join(output)
