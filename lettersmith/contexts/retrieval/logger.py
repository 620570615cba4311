"""
Retrieval context logger.

Provides logging interface for the retrieval context with automatic [retrieve] prefix.
All retrieval modules should import from this module, not from loguru directly.
"""

from loguru import logger

CONTEXT_PREFIX = "[retrieve]"


# Wrapper functions with automatic [retrieve] prefix


def _log_info(message: str) -> None:
    """Log info message with [retrieve] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [retrieve] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [retrieve] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [retrieve] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# High-level retrieval-specific logging helpers


def log_search_start(collection: str, limit: int, query_length: int) -> None:
    """Log start of a similarity search."""
    _log_debug(f"Searching '{collection}' for {limit} neighbors ({query_length} chars of query text)")


def log_search_complete(collection: str, found: int) -> None:
    """Log result count of a similarity search."""
    if found == 0:
        _log_info(f"No similar letters found in '{collection}'")
    else:
        _log_info(f"Found {found} similar letter(s) in '{collection}'")


def log_letter_stored(job_id: str, object_id: str) -> None:
    """Log a successfully persisted cover letter."""
    _log_success(f"Stored cover letter {job_id} (object {object_id})")


def log_collection_created(collection: str, backend: str) -> None:
    _log_info(f"Created collection '{collection}' ({backend})")


def log_connection_failed(backend: str, error: Exception) -> None:
    _log_warning(f"{backend} connection check failed: {error}")
