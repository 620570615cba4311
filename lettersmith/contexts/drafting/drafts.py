"""
Concurrent draft generation across text-generation providers.

Each provider receives the same prompt; drafts are produced in parallel threads and
returned in provider order, labelled A, B, ...
"""

import string
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import List, Sequence

from lettersmith.contexts.drafting.logger import (
    log_draft_failed,
    log_draft_generated,
    log_drafts_complete,
    log_drafts_start,
)
from lettersmith.utils.llm import DEFAULT_SYSTEM_PROMPT, LLMProvider, LLMResponse


@dataclass
class Draft:
    """
    One generated cover letter draft.

    Attributes:
        label: Display label ("A", "B", ...)
        provider_name: Provider that wrote it (e.g., "openai/gpt-4")
        response: Full provider response
    """

    label: str
    provider_name: str
    response: LLMResponse

    @property
    def content(self) -> str:
        return self.response.content


def generate_drafts(
    prompt: str,
    providers: Sequence[LLMProvider],
    system_prompt: str = DEFAULT_SYSTEM_PROMPT,
) -> List[Draft]:
    """
    Generate one draft per provider, all providers running concurrently.

    Any provider failure (after its own retries) is raised once every call has
    finished; no partial list is returned.

    Args:
        prompt: User prompt shared by all providers
        providers: Providers to query, at most 26
        system_prompt: System prompt shared by all providers

    Returns:
        Drafts in the same order as providers
    """
    if not providers:
        raise ValueError("At least one provider is required")
    if len(providers) > len(string.ascii_uppercase):
        raise ValueError(f"At most {len(string.ascii_uppercase)} providers are supported")

    labels = string.ascii_uppercase[: len(providers)]
    log_drafts_start([provider.name for provider in providers])

    with ThreadPoolExecutor(max_workers=len(providers)) as executor:
        futures = [
            executor.submit(provider.generate, prompt, system_prompt) for provider in providers
        ]

    drafts = []
    for label, provider, future in zip(labels, providers, futures):
        try:
            response = future.result()
        except Exception as e:
            log_draft_failed(label, provider.name, e)
            raise
        log_draft_generated(label, provider.name, response.input_tokens, response.output_tokens)
        drafts.append(Draft(label=label, provider_name=provider.name, response=response))

    log_drafts_complete(len(drafts))
    return drafts
