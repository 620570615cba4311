"""Unit tests for concurrent draft generation."""

import threading

import pytest

from lettersmith.contexts.drafting.drafts import generate_drafts
from lettersmith.exceptions import GenerationError
from lettersmith.utils.llm import LLMProvider, LLMResponse


class FakeProvider(LLMProvider):
    _provider_prefix = "fake"
    _retryable_exception = ConnectionError
    _retry_message = "Fake provider busy"

    def __init__(self, model, reply, barrier=None):
        self.reply = reply
        self.barrier = barrier
        self.prompts = []
        self.max_tokens = 100
        self.update_model(model)

    def _call_api(self, system_prompt, user_prompt):
        self.prompts.append(user_prompt)
        if self.barrier is not None:
            self.barrier.wait()
        return LLMResponse(
            content=self.reply,
            model=self.model,
            source=self.source,
            input_tokens=10,
            output_tokens=20,
        )


@pytest.mark.unit
def test_generate_drafts_labels_and_order():
    providers = [FakeProvider("one", "Draft from one"), FakeProvider("two", "Draft from two")]

    drafts = generate_drafts("Write a letter", providers)

    assert [d.label for d in drafts] == ["A", "B"]
    assert [d.provider_name for d in drafts] == ["fake/one", "fake/two"]
    assert [d.content for d in drafts] == ["Draft from one", "Draft from two"]
    assert all(p.prompts == ["Write a letter"] for p in providers)


@pytest.mark.unit
def test_generate_drafts_runs_providers_concurrently():
    """Test that both providers are in flight at once (the barrier needs both threads)."""
    barrier = threading.Barrier(2, timeout=5)
    providers = [FakeProvider("one", "A", barrier), FakeProvider("two", "B", barrier)]

    drafts = generate_drafts("prompt", providers)

    assert len(drafts) == 2


@pytest.mark.unit
def test_generate_drafts_propagates_failures():
    providers = [FakeProvider("one", "Draft"), FakeProvider("two", "")]

    with pytest.raises(GenerationError):
        generate_drafts("prompt", providers)


@pytest.mark.unit
def test_generate_drafts_requires_providers():
    with pytest.raises(ValueError):
        generate_drafts("prompt", [])
