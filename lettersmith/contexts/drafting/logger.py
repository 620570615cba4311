"""
Drafting context logger.

Provides logging interface for the drafting context with automatic [draft] prefix.
All drafting modules should import from this module, not from loguru directly.
"""

from typing import Sequence

from loguru import logger

CONTEXT_PREFIX = "[draft]"


# Wrapper functions with automatic [draft] prefix


def _log_info(message: str) -> None:
    """Log info message with [draft] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [draft] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [draft] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [draft] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# High-level drafting-specific logging helpers


def log_prompt_built(template_name: str, prompt_length: int, past_letter_count: int) -> None:
    """Log a rendered prompt."""
    _log_debug(
        f"Rendered {template_name}: {prompt_length} chars, {past_letter_count} past letter(s)"
    )


def log_drafts_start(provider_names: Sequence[str]) -> None:
    _log_info(f"Generating {len(provider_names)} drafts: {', '.join(provider_names)}")


def log_draft_generated(label: str, provider_name: str, input_tokens: int, output_tokens: int) -> None:
    """Log one finished draft with its token usage."""
    _log_debug(
        f"Draft {label} from {provider_name}: {input_tokens} input / {output_tokens} output tokens"
    )


def log_draft_failed(label: str, provider_name: str, error: Exception) -> None:
    _log_error(f"Draft {label} from {provider_name} failed: {error}")


def log_drafts_complete(count: int) -> None:
    _log_success(f"Generated {count} drafts")
