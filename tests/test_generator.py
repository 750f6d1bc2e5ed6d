"""Tests for answering questions from captures."""

import json
import threading
import time

import httpx
import pytest

from context_hub.application.config import AISettings
from context_hub.generation.errors import (
    AuthError,
    ConfigurationError,
    ProviderError,
    RateLimitError,
)
from context_hub.generation.generator import ContextAnswerer, NO_RESPONSE
from context_hub.generation.llm import MockLLM, OpenAICompatibleLLM
from context_hub.generation.providers import ProviderSelector


@pytest.fixture
def mock_llm():
    return MockLLM(response="You saved a note about Rust [1].")


@pytest.fixture
def answerer(mock_llm):
    selector = ProviderSelector(AISettings(groq_api_key="gsk-test"))
    return ContextAnswerer(selector, llm_factory=lambda provider: mock_llm)


def http_answerer(handler, **settings):
    """Answerer whose provider calls go to an httpx mock transport."""
    selector = ProviderSelector(AISettings(**settings))

    def factory(provider):
        return OpenAICompatibleLLM(
            base_url=provider.descriptor.api_base_url,
            api_key=provider.api_key,
            provider_name=provider.name,
            headers=provider.headers,
            transport=httpx.MockTransport(handler),
        )

    return ContextAnswerer(selector, llm_factory=factory)


def test_answer_uses_context_and_settings(answerer, mock_llm, make_capture):
    capture = make_capture("Rust ownership", "borrow checker notes", days_ago=0)

    answer = answerer.answer("What about rust?", [capture])

    assert answer == "You saved a note about Rust [1]."
    call = mock_llm.calls[0]
    assert call['model'] == "llama-3.3-70b-versatile"
    assert call['temperature'] == 0.7
    assert call['max_tokens'] == 1000
    user = call['messages'][1]['content']
    assert user.startswith("What about rust?\n\nHere is relevant information")
    assert "[1] Rust ownership" in user


def test_answer_without_context(answerer, mock_llm):
    answerer.answer("Anything?", [])

    assert "has not saved any captures yet" in mock_llm.calls[0]['messages'][1]['content']


def test_empty_completion_gets_apology(make_capture):
    selector = ProviderSelector(AISettings(groq_api_key="gsk-test"))
    answerer = ContextAnswerer(selector, llm_factory=lambda provider: MockLLM(response=None))

    assert answerer.answer("Hello?", []) == NO_RESPONSE


def test_answer_requires_configuration():
    answerer = ContextAnswerer(ProviderSelector(AISettings()), llm_factory=lambda p: MockLLM())

    assert answerer.is_configured() is False
    with pytest.raises(ConfigurationError):
        answerer.answer("Hello?", [])


def test_ask_ranks_captures(answerer, make_capture, now):
    rust = make_capture("Rust ownership", "borrow checker notes", days_ago=0)
    shopping = make_capture("Shopping list", "milk eggs bread", days_ago=10)

    result = answerer.ask("rust borrow", [shopping, rust], now=now)

    assert result.captures_used == [rust]
    assert result.used_fallback is False
    assert result.provider == "Groq"
    assert result.sources() == [{'id': rust.id, 'title': "Rust ownership", 'type': "note"}]


def test_ask_falls_back_to_recent_captures(answerer, mock_llm, make_capture, now):
    captures = [make_capture(f"Recipe {i}", "flour and sugar", days_ago=10 + i) for i in range(15)]

    result = answerer.ask("quantum entanglement", captures, now=now)

    assert result.used_fallback is True
    assert result.captures_used == captures[:10]
    user = mock_llm.calls[0]['messages'][1]['content']
    assert "[10] Recipe 9" in user
    assert "[11]" not in user


def test_ask_with_no_captures(answerer, mock_llm, now):
    result = answerer.ask("anything", [], now=now)

    assert result.captures_used == []
    assert result.used_fallback is False
    assert "has not saved any captures yet" in mock_llm.calls[0]['messages'][1]['content']


def test_llm_created_once(make_capture):
    created = []

    def factory(provider):
        created.append(provider)
        return MockLLM()

    answerer = ContextAnswerer(ProviderSelector(AISettings(grok_api_key="xai")), llm_factory=factory)
    answerer.answer("one", [])
    answerer.answer("two", [])

    assert len(created) == 1
    assert created[0].descriptor.display_name == "Grok"


def test_auth_error_propagates():
    answerer = http_answerer(lambda request: httpx.Response(401), openrouter_api_key="bad")

    with pytest.raises(AuthError, match="OpenRouter"):
        answerer.answer("Hello?", [])


def test_rate_limit_propagates():
    answerer = http_answerer(lambda request: httpx.Response(429), groq_api_key="gsk")

    with pytest.raises(RateLimitError):
        answerer.answer("Hello?", [])


def test_unexpected_failure_becomes_provider_error():
    class BrokenLLM(MockLLM):
        def complete(self, *args, **kwargs):
            raise RuntimeError("socket closed")

    answerer = ContextAnswerer(ProviderSelector(AISettings(groq_api_key="gsk")), llm_factory=lambda p: BrokenLLM())

    with pytest.raises(ProviderError, match="socket closed"):
        answerer.answer("Hello?", [])


def test_summary_of_short_content_is_skipped(answerer, mock_llm):
    assert answerer.summarize("too short") is None
    assert mock_llm.calls == []


def test_summary_request(answerer, mock_llm):
    content = "word " * 1000

    summary = answerer.summarize(content, "link")

    assert summary == "You saved a note about Rust [1]."
    call = mock_llm.calls[0]
    assert call['temperature'] == 0.5
    assert call['max_tokens'] == 150
    user = call['messages'][1]['content']
    assert user == f"Summarize this link:\n\n{content[:4000]}"


def test_summary_without_configuration_returns_none():
    answerer = ContextAnswerer(ProviderSelector(AISettings()), llm_factory=lambda p: MockLLM())

    assert answerer.summarize("x" * 300) is None


def test_summary_failure_returns_none():
    answerer = http_answerer(lambda request: httpx.Response(500), groq_api_key="gsk")

    assert answerer.summarize("x" * 300) is None


def test_embedding_requires_openai_key(answerer, mock_llm):
    assert answerer.embed("text") is None
    assert mock_llm.calls == []


def test_embedding_via_openai():
    def handler(request):
        assert request.url.host == "api.openai.com"
        assert len(json.loads(request.content)['input']) == 8000
        return httpx.Response(200, json={'data': [{'embedding': [1.0, 2.0]}]})

    answerer = http_answerer(handler, groq_api_key="gsk", openai_api_key="oa")

    assert answerer.embed("z" * 9000) == [1.0, 2.0]


def test_embedding_failure_returns_none():
    answerer = http_answerer(lambda request: httpx.Response(401), openai_api_key="oa")

    assert answerer.embed("text") is None


def test_llm_created_once_across_threads():
    created = []

    def slow_factory(provider):
        created.append(provider)
        time.sleep(0.05)
        return MockLLM()

    answerer = ContextAnswerer(ProviderSelector(AISettings(groq_api_key="gsk")), llm_factory=slow_factory)
    threads = [threading.Thread(target=answerer.answer, args=("hi", [])) for _ in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(created) == 1
