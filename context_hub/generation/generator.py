"""Answer generation that combines capture ranking with a chat provider."""

import logging
import threading
from datetime import datetime
from typing import Callable, List, Optional, Sequence, Tuple

from context_hub.domain.models import AnswerResult, Capture
from context_hub.generation.errors import AIServiceError, ConfigurationError, ProviderError
from context_hub.generation.llm import LLMInterface, OpenAICompatibleLLM
from context_hub.generation.prompts import PromptTemplate
from context_hub.generation.providers import (
    ActiveProvider,
    ProviderKind,
    ProviderSelector,
    credential_for,
    get_descriptor,
)
from context_hub.retrieval.context import ContextBuilder
from context_hub.retrieval.ranker import RelevanceRanker, most_recent

logger = logging.getLogger(__name__)

LLMFactory = Callable[[ActiveProvider], LLMInterface]

NO_RESPONSE = "Sorry, I could not generate a response."
EMBEDDING_MODEL = "text-embedding-3-small"


def default_llm_factory(timeout: float = 30.0) -> LLMFactory:
    """Factory building an HTTP client for the resolved provider."""

    def build(provider: ActiveProvider) -> LLMInterface:
        return OpenAICompatibleLLM(
            base_url=provider.descriptor.api_base_url,
            api_key=provider.api_key,
            provider_name=provider.name,
            headers=provider.headers,
            timeout=timeout,
        )

    return build


class ContextAnswerer:
    """Answers questions about a user's captures through the active provider."""

    ANSWER_TEMPERATURE = 0.7
    ANSWER_MAX_TOKENS = 1000
    SUMMARY_TEMPERATURE = 0.5
    SUMMARY_MAX_TOKENS = 150
    SUMMARY_MIN_CHARS = 200
    SUMMARY_MAX_CHARS = 4000
    EMBEDDING_MAX_CHARS = 8000

    def __init__(
        self,
        selector: ProviderSelector,
        llm_factory: Optional[LLMFactory] = None,
        ranker: Optional[RelevanceRanker] = None,
        context_builder: Optional[ContextBuilder] = None,
        fallback_count: int = 10
    ):
        self.selector = selector
        self.llm_factory = llm_factory or default_llm_factory(selector.settings.request_timeout)
        self.ranker = ranker or RelevanceRanker()
        self.context_builder = context_builder or ContextBuilder()
        self.fallback_count = fallback_count
        self._llm: Optional[LLMInterface] = None
        self._llm_lock = threading.Lock()

    def is_configured(self) -> bool:
        return self.selector.is_configured()

    def active_provider(self):
        return self.selector.active_provider()

    def _client(self) -> Tuple[LLMInterface, ActiveProvider]:
        provider = self.selector.resolve()
        if self._llm is None:
            with self._llm_lock:
                if self._llm is None:
                    self._llm = self.llm_factory(provider)
        return self._llm, provider

    def select_context(
        self,
        question: str,
        captures: Sequence[Capture],
        now: Optional[datetime] = None
    ) -> Tuple[List[Capture], bool]:
        """
        Pick the captures to show the model.

        Returns the ranked matches, or the most recent captures when nothing
        matches, together with a flag telling whether the fallback was used.
        """
        ranked = self.ranker.rank(question, captures, now=now)
        if ranked:
            return [s.capture for s in ranked], False

        if captures:
            logger.info("No relevant captures found by search, using most recent captures as fallback")
            return most_recent(captures, self.fallback_count), True

        return [], False

    def ask(
        self,
        question: str,
        captures: Sequence[Capture],
        now: Optional[datetime] = None
    ) -> AnswerResult:
        """Rank the captures, pick the context and answer the question."""
        context, used_fallback = self.select_context(question, captures, now=now)
        logger.info(f"Using {len(context)} captures for AI context")

        answer = self.answer(question, context)
        provider = self.selector.resolve()

        return AnswerResult(
            answer=answer,
            captures_used=context,
            provider=provider.name,
            model=provider.model,
            used_fallback=used_fallback,
        )

    def answer(self, question: str, context_captures: Sequence[Capture]) -> str:
        """
        Answer a question using the given captures as context.

        Raises:
            ConfigurationError: no provider credential is set
            AuthError: the provider rejected the credential
            RateLimitError: the provider is throttling requests
            ProviderError: any other upstream failure
        """
        llm, provider = self._client()

        context = self.context_builder.build_context(context_captures)
        messages = PromptTemplate.question_answering(question, context)

        try:
            text = llm.complete(
                messages,
                model=provider.model,
                temperature=self.ANSWER_TEMPERATURE,
                max_tokens=self.ANSWER_MAX_TOKENS,
            )
        except AIServiceError as e:
            logger.error(f"Error answering question via {provider.name}: {e}")
            raise
        except Exception as e:
            logger.error(f"Error answering question via {provider.name}: {e}")
            raise ProviderError(f"AI service error: {e}") from e

        logger.info(f"AI question answered successfully via {provider.name}")
        return text or NO_RESPONSE

    def summarize(self, content: str, capture_type: str = "text") -> Optional[str]:
        """Best-effort summary of a capture. Returns None instead of failing."""
        if not content or len(content) < self.SUMMARY_MIN_CHARS:
            return None

        try:
            llm, provider = self._client()
            messages = PromptTemplate.summarization(
                content[:self.SUMMARY_MAX_CHARS],
                capture_type
            )
            summary = llm.complete(
                messages,
                model=provider.model,
                temperature=self.SUMMARY_TEMPERATURE,
                max_tokens=self.SUMMARY_MAX_TOKENS,
            )
        except ConfigurationError as e:
            logger.info(f"Skipping summary: {e}")
            return None
        except Exception as e:
            logger.error(f"Error generating summary: {e}")
            return None

        logger.info(f"Summary generated successfully via {provider.name}")
        return summary or None

    def embed(self, text: str) -> Optional[List[float]]:
        """Best-effort embedding; only OpenAI offers an embeddings endpoint."""
        api_key = credential_for(self.selector.settings, ProviderKind.OPENAI)
        if not api_key:
            logger.info("OpenAI not configured - skipping embeddings")
            return None

        provider = ActiveProvider(
            descriptor=get_descriptor(ProviderKind.OPENAI),
            api_key=api_key,
            model=EMBEDDING_MODEL,
            headers={},
        )

        llm = self.llm_factory(provider)
        try:
            embedding = llm.embed(text[:self.EMBEDDING_MAX_CHARS], model=EMBEDDING_MODEL)
        except Exception as e:
            logger.error(f"Error generating embedding: {e}")
            return None
        finally:
            llm.close()

        logger.info("Embedding generated successfully via OpenAI")
        return embedding

    def close(self) -> None:
        if self._llm is not None:
            self._llm.close()
            self._llm = None
