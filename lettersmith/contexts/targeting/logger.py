"""
Targeting context logger.

Provides logging interface for the targeting context with automatic [target] prefix.
All targeting modules should import from this module, not from loguru directly.
"""

from loguru import logger

CONTEXT_PREFIX = "[target]"


def _log_debug(message: str) -> None:
    """Log debug message with [target] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


def log_summary_selection(
    job_keyword_count: int,
    experience: tuple,
    achievements: tuple,
    total_experience: int,
    total_achievements: int,
) -> None:
    """Log which experience entries and how many achievements were selected."""
    _log_debug(f"Job description yielded {job_keyword_count} keywords")
    _log_debug(f"Selected {len(experience)}/{total_experience} experience entries")
    for scored in experience:
        _log_debug(f"  {scored.item.role} @ {scored.item.company}: relevance {scored.relevance}")
    _log_debug(f"Selected {len(achievements)}/{total_achievements} achievements")
