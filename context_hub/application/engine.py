"""Main engine exposing the operations of the capture AI service."""

import logging
from datetime import datetime
from typing import List, Optional, Dict, Any, Sequence

from context_hub.domain.models import AnswerResult, Capture, ScoredCapture
from context_hub.application.config import Config
from context_hub.retrieval import RelevanceRanker, ContextBuilder, most_recent
from context_hub.generation import ContextAnswerer, ProviderSelector, get_default_selector
from context_hub.generation.generator import LLMFactory

logger = logging.getLogger(__name__)


class ContextHub:
    """Entry point used by the HTTP layer and the CLI."""

    def __init__(
        self,
        config: Optional[Config] = None,
        selector: Optional[ProviderSelector] = None,
        llm_factory: Optional[LLMFactory] = None
    ):
        use_environment = config is None
        self.config = config or Config()
        self._setup_logging()

        search = self.config.search
        self.ranker = RelevanceRanker(
            max_results=search.max_results,
            recency_days=search.recency_days
        )
        if selector is None:
            selector = get_default_selector() if use_environment else ProviderSelector(self.config.ai)
        self.selector = selector
        self.answerer = ContextAnswerer(
            self.selector,
            llm_factory=llm_factory,
            ranker=self.ranker,
            context_builder=ContextBuilder(max_content_chars=search.context_chars),
            fallback_count=search.fallback_count
        )

    def _setup_logging(self):
        """Setup logging configuration."""
        level = "DEBUG" if self.config.debug else self.config.log_level.upper()
        logging.basicConfig(
            level=getattr(logging, level, logging.INFO),
            format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            filename=self.config.log_file
        )

    def ask(
        self,
        question: str,
        captures: Sequence[Capture],
        now: Optional[datetime] = None
    ) -> AnswerResult:
        """Answer a question about the user's captures.

        Only the most recent ``max_candidates`` captures are considered.
        """
        if not question or not question.strip():
            raise ValueError("Question is required")

        candidates = most_recent(captures, self.config.search.max_candidates)
        logger.info(f"Found {len(candidates)} candidate captures")

        return self.answerer.ask(question, candidates, now=now)

    def search(
        self,
        query: str,
        captures: Sequence[Capture],
        now: Optional[datetime] = None
    ) -> List[ScoredCapture]:
        """Rank captures against a search query."""
        if not query or not query.strip():
            raise ValueError("Search query is required")

        results = self.ranker.rank(query, captures, now=now)
        logger.info(f"Search for {query!r} returned {len(results)} results")
        return results

    def status(self) -> Dict[str, Any]:
        """Report whether an AI provider is configured and which one."""
        provider = self.selector.active_provider()
        return {
            'configured': provider is not None,
            'provider': {
                'name': provider['name'],
                'model': provider['model'],
                'cost': provider['cost'],
            } if provider else None,
        }

    def summarize(self, content: str, capture_type: str = "text") -> Optional[str]:
        return self.answerer.summarize(content, capture_type)

    def embed(self, text: str) -> Optional[List[float]]:
        return self.answerer.embed(text)

    def close(self) -> None:
        self.answerer.close()
