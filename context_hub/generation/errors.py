"""Errors raised by the AI answering service."""


class AIServiceError(Exception):
    """Base class for AI service failures."""


class ConfigurationError(AIServiceError):
    """No provider credential is configured."""


class AuthError(AIServiceError):
    """The active provider rejected the credential."""


class RateLimitError(AIServiceError):
    """The active provider is throttling requests."""


class ProviderError(AIServiceError):
    """Any other upstream failure, including timeouts and malformed responses."""
