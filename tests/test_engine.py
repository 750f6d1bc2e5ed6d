"""Tests for the application engine and configuration."""

import json

import pytest

from context_hub.application.config import AISettings, Config, SearchConfig
from context_hub.application.engine import ContextHub
from context_hub.domain.models import Capture, CaptureType
from context_hub.generation.llm import MockLLM


@pytest.fixture
def mock_llm():
    return MockLLM()


@pytest.fixture
def hub(mock_llm):
    config = Config(ai=AISettings(openrouter_api_key="or-key"))
    return ContextHub(config, llm_factory=lambda provider: mock_llm)


def test_config_defaults():
    config = Config()

    assert config.search.max_results == 10
    assert config.search.max_candidates == 100
    assert config.ai.request_timeout == 30.0
    assert config.ai.groq_api_key is None


def test_config_reads_provider_environment(monkeypatch):
    monkeypatch.setenv("GROQ_API_KEY", "gsk-env")
    monkeypatch.setenv("AI_MODEL", "custom-model")

    config = Config()

    assert config.ai.groq_api_key == "gsk-env"
    assert config.ai.ai_model == "custom-model"


def test_config_file_round_trip(tmp_path):
    config = Config(ai=AISettings(groq_api_key="secret"), search=SearchConfig(max_results=5))
    path = tmp_path / "hub.yaml"

    config.save_to_file(path)
    loaded = Config.load_from_file(path)

    assert "secret" not in path.read_text()
    assert loaded.search.max_results == 5
    assert loaded.ai.groq_api_key is None


def test_config_rejects_unknown_format(tmp_path):
    with pytest.raises(ValueError):
        Config().save_to_file(tmp_path / "hub.toml")


def test_status_configured(hub):
    assert hub.status() == {
        'configured': True,
        'provider': {
            'name': 'OpenRouter',
            'model': 'meta-llama/llama-3.1-8b-instruct',
            'cost': '$0.06 per 1M tokens',
        },
    }


def test_status_not_configured():
    assert ContextHub(Config()).status() == {'configured': False, 'provider': None}


def test_ask_rejects_blank_question(hub):
    with pytest.raises(ValueError, match="Question is required"):
        hub.ask("   ", [])


def test_search_rejects_blank_query(hub):
    with pytest.raises(ValueError, match="Search query is required"):
        hub.search("", [])


def test_ask_limits_candidate_pool(mock_llm, make_capture, now):
    config = Config(
        ai=AISettings(groq_api_key="gsk"),
        search=SearchConfig(max_candidates=3)
    )
    hub = ContextHub(config, llm_factory=lambda provider: mock_llm)
    # Only the oldest capture mentions the topic; it falls outside the pool
    captures = [make_capture("lighthouse", "", days_ago=50)]
    captures += [make_capture(f"other {i}", "", days_ago=20 + i) for i in range(5)]

    result = hub.ask("lighthouse", captures, now=now)

    assert result.used_fallback is True
    assert [c.title for c in result.captures_used] == ["other 0", "other 1", "other 2"]


def test_search(hub, make_capture, now):
    rust = make_capture("Rust ownership", "borrow checker notes", days_ago=0)
    shopping = make_capture("Shopping list", "milk eggs bread", days_ago=10)

    results = hub.search("rust borrow", [rust, shopping], now=now)

    assert [r.id for r in results] == [rust.id]
    assert results[0].to_dict()['relevanceScore'] == 8


def test_summarize_and_embed_delegate(hub, mock_llm):
    assert hub.summarize("x" * 250) == mock_llm.response
    assert hub.embed("text") is None


def test_capture_from_dict():
    capture = Capture.from_dict({
        'id': 42,
        'title': 'Quote of the day',
        'content': 'Stay hungry',
        'type': 'quote',
        'source': None,
        'createdAt': '2025-06-01T08:00:00.000Z',
    })

    assert capture.id == "42"
    assert capture.type is CaptureType.QUOTE
    assert capture.created_at.tzinfo is not None
    assert json.loads(json.dumps(capture.to_dict()))['type'] == 'quote'


def test_capture_from_dict_rejects_unknown_type():
    with pytest.raises(ValueError):
        Capture.from_dict({'id': 1, 'content': 'x', 'type': 'video', 'createdAt': '2025-06-01'})


def test_hub_without_config_uses_default_selector(monkeypatch):
    from context_hub.generation.providers import get_default_selector

    hub = ContextHub()
    assert hub.selector is get_default_selector()
    assert hub.status()['configured'] is False

    monkeypatch.setenv("OPENAI_API_KEY", "oa-env")

    assert hub.status()['provider']['name'] == "OpenAI"


def test_capture_from_dict_requires_id():
    with pytest.raises(ValueError, match="no id"):
        Capture.from_dict({'title': 'x', 'content': 'x', 'createdAt': '2025-06-01'})
