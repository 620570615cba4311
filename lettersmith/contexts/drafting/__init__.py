"""
Drafting Context

Responsibilities:
- Renders the cover letter prompt from profile, ranking and past letters
- Requests drafts from several text-generation providers in parallel

Owns: Prompt template, draft generation
Never: Writes to the similarity store
"""

from lettersmith.contexts.drafting.drafts import Draft, generate_drafts
from lettersmith.contexts.drafting.prompt_builder import PromptBuilder, format_profile

__all__ = ["Draft", "PromptBuilder", "format_profile", "generate_drafts"]
