"""Context building for language model prompts."""

from typing import List, Sequence
import logging

from context_hub.domain.models import Capture

logger = logging.getLogger(__name__)


EMPTY_CONTEXT_NOTE = (
    "\n\nNote: The user has not saved any captures yet, or no captures match "
    "this question. Let them know they should save some content first to get "
    "personalized answers.\n"
)


class ContextBuilder:
    """Builds the numbered capture block appended to a question."""

    HEADER = "\n\nHere is relevant information from your saved captures:\n\n"

    def __init__(self, max_content_chars: int = 500):
        self.max_content_chars = max_content_chars

    def build_context(self, captures: Sequence[Capture]) -> str:
        """
        Build the context block for a list of captures.

        Args:
            captures: Captures in the order they should be cited

        Returns:
            Context text, labelled [1], [2], ... or a note that nothing matched
        """
        if not captures:
            return EMPTY_CONTEXT_NOTE

        parts = [self.HEADER]
        for index, capture in enumerate(captures, 1):
            parts.append(self._format_capture(index, capture))

        logger.debug(f"Built context from {len(captures)} captures")
        return "".join(parts)

    def _format_capture(self, index: int, capture: Capture) -> str:
        """Format a single capture for context."""
        lines: List[str] = [
            f"[{index}] {capture.title or 'Untitled'}",
            f"Type: {capture.type.value}",
            (capture.content or "")[:self.max_content_chars],
        ]

        if capture.source:
            lines.append(f"Source: {capture.source}")

        lines.append(f"Created: {format_date(capture)}")

        return "\n".join(lines) + "\n\n"


def format_date(capture: Capture) -> str:
    """Short month/day/year date in the local timezone, e.g. 3/7/2025."""
    created = capture.created_at.astimezone()
    return f"{created.month}/{created.day}/{created.year}"
