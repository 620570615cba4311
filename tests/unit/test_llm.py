"""Unit tests for the text-generation provider base class."""

import pytest

from lettersmith.exceptions import GenerationError
from lettersmith.utils import llm
from lettersmith.utils.llm import LLMProvider, LLMResponse, get_provider


class TransientError(Exception):
    pass


class ScriptedProvider(LLMProvider):
    """Replays a list of outcomes: strings are returned, exceptions raised."""

    _provider_prefix = "scripted"
    _retryable_exception = TransientError
    _retry_message = "Scripted failure"

    def __init__(self, outcomes, model="test-model"):
        self.outcomes = list(outcomes)
        self.calls = []
        self.max_tokens = 100
        self.update_model(model)

    def _call_api(self, system_prompt, user_prompt):
        self.calls.append((system_prompt, user_prompt))
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return LLMResponse(content=outcome, model=self.model, source=self.source)


@pytest.fixture(autouse=True)
def no_sleep(monkeypatch):
    monkeypatch.setattr(llm.time, "sleep", lambda seconds: None)


@pytest.mark.unit
def test_generate_returns_response():
    provider = ScriptedProvider(["Dear Hiring Manager"])

    response = provider.generate("Write a letter", system_prompt="System")

    assert response.content == "Dear Hiring Manager"
    assert response.source == "scripted"
    assert provider.calls == [("System", "Write a letter")]


@pytest.mark.unit
def test_generate_retries_transient_errors():
    provider = ScriptedProvider([TransientError(), TransientError(), "Draft"])

    assert provider.generate("prompt").content == "Draft"
    assert len(provider.calls) == 3


@pytest.mark.unit
def test_generate_gives_up_after_max_retries():
    provider = ScriptedProvider([TransientError() for _ in range(llm.MAX_RETRIES)])

    with pytest.raises(TransientError):
        provider.generate("prompt")
    assert len(provider.calls) == llm.MAX_RETRIES


@pytest.mark.unit
def test_generate_does_not_retry_other_errors():
    provider = ScriptedProvider([RuntimeError("bad request"), "never reached"])

    with pytest.raises(RuntimeError):
        provider.generate("prompt")
    assert len(provider.calls) == 1


@pytest.mark.unit
def test_generate_rejects_empty_content():
    with pytest.raises(GenerationError, match="scripted/test-model"):
        ScriptedProvider(["   "]).generate("prompt")


@pytest.mark.unit
def test_update_model_refreshes_name():
    provider = ScriptedProvider([])
    provider.update_model("other-model")

    assert provider.name == "scripted/other-model"


@pytest.mark.unit
def test_get_provider_unknown():
    with pytest.raises(ValueError, match="Unknown provider"):
        get_provider("mistral")


@pytest.mark.unit
def test_providers_require_api_keys(monkeypatch):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)

    with pytest.raises(ValueError, match="OPENAI_API_KEY"):
        get_provider("openai")
    with pytest.raises(ValueError, match="ANTHROPIC_API_KEY"):
        get_provider("anthropic")
