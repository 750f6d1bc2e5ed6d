"""Chat-completion clients for OpenAI-compatible providers."""

from abc import ABC, abstractmethod
from typing import Optional, Dict, Any, List
import logging

import httpx

from context_hub.generation.errors import (
    AuthError,
    ProviderError,
    RateLimitError,
)

logger = logging.getLogger(__name__)

Message = Dict[str, str]


class LLMInterface(ABC):
    """Abstract interface for text-generation backends."""

    @abstractmethod
    def complete(
        self,
        messages: List[Message],
        model: str,
        temperature: float = 0.7,
        max_tokens: int = 1000
    ) -> Optional[str]:
        """Return the completion text, or None when the backend returned none."""
        pass

    @abstractmethod
    def embed(self, text: str, model: str) -> Optional[List[float]]:
        """Return an embedding vector for the text."""
        pass

    def close(self) -> None:
        """Release any held resources."""


class OpenAICompatibleLLM(LLMInterface):
    """Client for the /chat/completions and /embeddings endpoints."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        provider_name: str = "AI provider",
        headers: Optional[Dict[str, str]] = None,
        timeout: float = 30.0,
        transport: Optional[httpx.BaseTransport] = None
    ):
        self.provider_name = provider_name
        self._client = httpx.Client(
            base_url=base_url.rstrip("/") + "/",
            timeout=httpx.Timeout(timeout),
            headers={
                "Authorization": f"Bearer {api_key}",
                "Content-Type": "application/json",
                **(headers or {}),
            },
            transport=transport,
        )

    def complete(
        self,
        messages: List[Message],
        model: str,
        temperature: float = 0.7,
        max_tokens: int = 1000
    ) -> Optional[str]:
        """Generate a chat completion."""
        data = self._post("chat/completions", {
            "model": model,
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
        })

        try:
            choices = data.get("choices") or []
            if not choices:
                return None
            return (choices[0].get("message") or {}).get("content") or None
        except AttributeError as e:
            raise ProviderError(f"AI service error: malformed response ({e})") from e

    def embed(self, text: str, model: str) -> Optional[List[float]]:
        """Generate an embedding vector."""
        data = self._post("embeddings", {"model": model, "input": text})

        try:
            items = data.get("data") or []
            return items[0].get("embedding") if items else None
        except AttributeError as e:
            raise ProviderError(f"AI service error: malformed response ({e})") from e

    def _post(self, path: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        """POST a JSON request and translate failures into service errors."""
        try:
            response = self._client.post(path, json=payload)
        except httpx.TimeoutException as e:
            raise ProviderError(f"AI service error: request timed out ({e})") from e
        except httpx.HTTPError as e:
            raise ProviderError(f"AI service error: {e}") from e

        if response.status_code == 401:
            raise AuthError(
                f"Invalid API key for {self.provider_name}. "
                f"Please check your configuration."
            )
        if response.status_code == 429:
            raise RateLimitError("Rate limit exceeded. Please try again in a moment.")
        if response.status_code >= 400:
            raise ProviderError(
                f"AI service error: {self.provider_name} returned "
                f"HTTP {response.status_code}: {response.text[:200]}"
            )

        try:
            data = response.json()
        except ValueError as e:
            raise ProviderError(f"AI service error: invalid JSON response ({e})") from e

        if not isinstance(data, dict):
            raise ProviderError("AI service error: unexpected response body")
        return data

    def close(self) -> None:
        self._client.close()


class MockLLM(LLMInterface):
    """Mock backend for testing without network access."""

    def __init__(self, response: Optional[str] = "This is a mock answer based on your captures."):
        self.response = response
        self.calls: List[Dict[str, Any]] = []

    def complete(
        self,
        messages: List[Message],
        model: str,
        temperature: float = 0.7,
        max_tokens: int = 1000
    ) -> Optional[str]:
        """Record the request and return the canned response."""
        self.calls.append({
            'messages': messages,
            'model': model,
            'temperature': temperature,
            'max_tokens': max_tokens,
        })
        return self.response

    def embed(self, text: str, model: str) -> Optional[List[float]]:
        self.calls.append({'input': text, 'model': model})
        return [0.0] * 8
