"""
Text-generation provider abstraction.

Provides a provider-agnostic `generate(prompt) -> LLMResponse` interface with
automatic retries on transient errors (rate limits, overload).
"""

import os
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from functools import partial
from typing import Callable, Optional, TypeVar

from loguru import logger

from lettersmith.exceptions import GenerationError

# Retry configuration
MAX_RETRIES = 5
BASE_DELAY = 1.0

DEFAULT_SYSTEM_PROMPT = "You are a professional cover letter writer."

T = TypeVar("T")


def _retry_with_backoff(
    operation: Callable[[], T],
    retryable_exception: type[Exception],
    error_message: str,
    base_delay: float = BASE_DELAY,
) -> T:
    """
    Execute operation with exponential backoff retry on a specific exception.

    Args:
        operation: Callable that performs the API request and returns result
        retryable_exception: Exception type that triggers retry
        error_message: Message prefix for retry logging (e.g., "API overloaded")
        base_delay: Delay before the first retry, doubled on each attempt
    """
    for attempt in range(MAX_RETRIES):
        try:
            return operation()
        except retryable_exception:
            if attempt == MAX_RETRIES - 1:
                raise
            delay = base_delay * (2**attempt)
            logger.warning(
                f"{error_message}, retrying in {delay:.1f}s... "
                f"(attempt {attempt + 1}/{MAX_RETRIES})"
            )
            time.sleep(delay)


@dataclass
class LLMResponse:
    """Response from an LLM provider."""

    content: str
    model: str
    source: str
    input_tokens: int = 0
    output_tokens: int = 0
    metadata: dict = field(default_factory=dict)


class LLMProvider(ABC):
    """
    Abstract base for LLM providers.

    Subclasses must:
    - Set _provider_prefix class attribute (e.g., "anthropic", "openai")
    - Set self._retryable_exception to the exception type that triggers retry
    - Set self._retry_message for logging during retries
    - Implement _call_api() for the actual API call
    - Call update_model(model) in __init__ to set model and name
    """

    _provider_prefix: str
    _retryable_exception: type[Exception]
    _retry_message: str

    name: str
    model: str
    max_tokens: int

    def update_model(self, model: str):
        """Update the model and refresh the provider name."""
        self.model = model
        self.name = f"{self._provider_prefix}/{model}"

    @property
    def source(self) -> str:
        return self._provider_prefix

    @abstractmethod
    def _call_api(self, system_prompt: str, user_prompt: str) -> LLMResponse:
        """Make a single API call (no retries). Implemented by subclasses."""
        pass

    def generate(self, prompt: str, system_prompt: str = DEFAULT_SYSTEM_PROMPT) -> LLMResponse:
        """
        Generate a response with automatic retry on transient errors.

        Raises:
            GenerationError: If the provider returns an empty completion
        """
        response = _retry_with_backoff(
            partial(self._call_api, system_prompt, prompt),
            self._retryable_exception,
            self._retry_message,
        )
        if not response.content or not response.content.strip():
            raise GenerationError(f"Failed to generate content: {self.name} returned no text")
        return response


class AnthropicProvider(LLMProvider):
    """Anthropic Claude provider with exponential backoff retry."""

    _provider_prefix = "anthropic"
    _retry_message = "API overloaded"

    def __init__(
        self,
        model: str = "claude-3-sonnet-20240229",
        max_tokens: int = 1024,
        api_key: Optional[str] = None,
    ):
        # Lazy import - anthropic SDK is heavy, only load if this provider is used
        import anthropic

        api_key = api_key or os.getenv("ANTHROPIC_API_KEY")
        if not api_key:
            raise ValueError("ANTHROPIC_API_KEY environment variable not set")

        self.client = anthropic.Anthropic(api_key=api_key)
        self._retryable_exception = anthropic.RateLimitError
        self.max_tokens = max_tokens
        self.update_model(model)

    def _call_api(self, system_prompt: str, user_prompt: str) -> LLMResponse:
        response = self.client.messages.create(
            model=self.model,
            max_tokens=self.max_tokens,
            system=system_prompt,
            messages=[{"role": "user", "content": user_prompt}],
        )
        text = "".join(
            block.text for block in response.content if getattr(block, "type", None) == "text"
        )
        return LLMResponse(
            content=text,
            model=self.model,
            source=self.source,
            input_tokens=response.usage.input_tokens,
            output_tokens=response.usage.output_tokens,
            metadata={"stop_reason": response.stop_reason},
        )


class OpenAIProvider(LLMProvider):
    """OpenAI GPT provider with exponential backoff retry."""

    _provider_prefix = "openai"
    _retry_message = "Rate limit hit"

    def __init__(
        self,
        model: str = "gpt-4",
        max_tokens: int = 1000,
        api_key: Optional[str] = None,
    ):
        # Lazy import - openai SDK is heavy, only load if this provider is used
        import openai

        api_key = api_key or os.getenv("OPENAI_API_KEY")
        if not api_key:
            raise ValueError("OPENAI_API_KEY environment variable not set")

        self.client = openai.OpenAI(api_key=api_key)
        self._retryable_exception = openai.RateLimitError
        self.max_tokens = max_tokens
        self.update_model(model)

    def _call_api(self, system_prompt: str, user_prompt: str) -> LLMResponse:
        response = self.client.chat.completions.create(
            model=self.model,
            max_tokens=self.max_tokens,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
        )
        choice = response.choices[0]
        usage = response.usage
        return LLMResponse(
            content=choice.message.content or "",
            model=self.model,
            source=self.source,
            input_tokens=usage.prompt_tokens if usage else 0,
            output_tokens=usage.completion_tokens if usage else 0,
            metadata={"finish_reason": choice.finish_reason},
        )


# --- Provider Factory ---


def get_provider(provider_name: str, model: str = None, max_tokens: int = None) -> LLMProvider:
    """
    Get an LLM provider instance.

    Args:
        provider_name: "anthropic" or "openai"
        model: Model name (default: provider-specific default)
        max_tokens: Completion token cap (default: provider-specific default)

    Returns:
        LLMProvider instance
    """
    kwargs = {}
    if model:
        kwargs["model"] = model
    if max_tokens:
        kwargs["max_tokens"] = max_tokens

    provider_name = provider_name.lower()
    if provider_name == "anthropic":
        return AnthropicProvider(**kwargs)
    elif provider_name == "openai":
        return OpenAIProvider(**kwargs)
    else:
        raise ValueError(f"Unknown provider: {provider_name}. Use 'anthropic' or 'openai'")
