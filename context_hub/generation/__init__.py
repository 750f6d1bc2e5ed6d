"""Language model generation modules."""

from .errors import AIServiceError, ConfigurationError, AuthError, RateLimitError, ProviderError
from .llm import LLMInterface, OpenAICompatibleLLM, MockLLM
from .providers import ProviderKind, ProviderDescriptor, ProviderSelector, PROVIDERS, get_default_selector
from .generator import ContextAnswerer
from .prompts import PromptTemplate

__all__ = [
    "AIServiceError", "ConfigurationError", "AuthError", "RateLimitError", "ProviderError",
    "LLMInterface", "OpenAICompatibleLLM", "MockLLM",
    "ProviderKind", "ProviderDescriptor", "ProviderSelector", "PROVIDERS", "get_default_selector",
    "ContextAnswerer", "PromptTemplate",
]
