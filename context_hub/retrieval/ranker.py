"""Keyword relevance ranking for captures."""

import re
import logging
from typing import List, Optional, Sequence
from datetime import datetime, timezone

from context_hub.domain.models import Capture, ScoredCapture, ensure_aware

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 86400


class RelevanceRanker:
    """Scores captures against a free-text query and keeps the best matches."""

    PHRASE_BONUS = 10
    TITLE_WORD_WEIGHT = 5
    CONTENT_WORD_WEIGHT = 2
    RECENCY_BONUS = 1
    MIN_WORD_LENGTH = 3

    def __init__(self, max_results: int = 10, recency_days: float = 7):
        self.max_results = max_results
        self.recency_days = recency_days

    def rank(
        self,
        query: str,
        candidates: Sequence[Capture],
        now: Optional[datetime] = None
    ) -> List[ScoredCapture]:
        """
        Rank captures by keyword relevance.

        Args:
            query: Free-text query
            candidates: Captures to score, in any order
            now: Reference time for the recency bonus

        Returns:
            At most max_results captures with a positive score, best first.
            Equal scores keep their input order.
        """
        now = ensure_aware(now) if now else datetime.now(timezone.utc)
        # Blank queries collapse to "", which matches every capture
        query_lower = query.lower() if query.strip() else ""
        query_words = self._query_words(query_lower)

        scored = [
            ScoredCapture(capture, self.score(capture, query_lower, query_words, now))
            for capture in candidates
        ]

        relevant = [s for s in scored if s.relevance_score > 0]
        relevant.sort(key=lambda s: s.relevance_score, reverse=True)

        return relevant[:self.max_results]

    def score(
        self,
        capture: Capture,
        query_lower: str,
        query_words: List[str],
        now: datetime
    ) -> int:
        """Compute the relevance score of a single capture."""
        title = (capture.title or "").lower()
        content = (capture.content or "").lower()
        combined = f"{title} {content}"

        score = 0

        # An empty query is a substring of everything
        if query_lower in combined:
            score += self.PHRASE_BONUS

        for word in query_words:
            score += self._count_matches(word, title) * self.TITLE_WORD_WEIGHT

        for word in query_words:
            score += self._count_matches(word, content) * self.CONTENT_WORD_WEIGHT

        days_since_created = (now - capture.created_at).total_seconds() / SECONDS_PER_DAY
        if days_since_created < self.recency_days:
            score += self.RECENCY_BONUS

        return score

    def _query_words(self, query_lower: str) -> List[str]:
        return [w for w in query_lower.split() if len(w) >= self.MIN_WORD_LENGTH]

    @staticmethod
    def _count_matches(word: str, text: str) -> int:
        """Count unanchored pattern matches of a query word."""
        try:
            return len(re.findall(word, text))
        except re.error:
            logger.debug(f"Ignoring query word that is not a valid pattern: {word!r}")
            return 0


def most_recent(captures: Sequence[Capture], limit: int = 10) -> List[Capture]:
    """Return the most recently created captures, newest first."""
    return sorted(captures, key=lambda c: c.created_at, reverse=True)[:limit]


_default_ranker = RelevanceRanker()


def rank(
    query: str,
    candidates: Sequence[Capture],
    now: Optional[datetime] = None
) -> List[ScoredCapture]:
    """Rank captures with the default settings (top 10, 7-day recency bonus)."""
    return _default_ranker.rank(query, candidates, now=now)
