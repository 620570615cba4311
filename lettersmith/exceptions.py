"""Exception hierarchy shared across contexts."""

from typing import Optional


class LettersmithError(Exception):
    """Base class for all lettersmith errors."""


class UpstreamFailure(LettersmithError):
    """
    Exception raised when an embedding or vector store call fails.

    Propagated to the caller as-is. An upstream failure is never turned into an empty
    result, so "no similar letters" and "the store is down" stay distinguishable.

    Attributes:
        message: Error description
        operation: Name of the failed operation (e.g., 'embed', 'upsert')
        original_error: The exception raised by the client library, if any
    """

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        self.message = message
        self.operation = operation
        self.original_error = original_error

        parts = [message]

        if operation:
            parts.append(f"Operation: {operation}")

        if original_error:
            parts.append(f"Original error: {original_error}")

        super().__init__("\n".join(parts))


class EmbeddingError(UpstreamFailure):
    """Raised when the embedding gateway cannot produce a valid vector."""


class SimilarityStoreError(UpstreamFailure):
    """Raised when a similarity store operation fails."""


class CollectionSchemaMismatch(SimilarityStoreError):
    """Raised when a collection exists with a descriptor different from the requested one."""


class PayloadValidationError(SimilarityStoreError, ValueError):
    """
    Raised when an upsert does not satisfy the collection's declared schema.

    Covers missing or unknown payload fields, non-string values, and vectors whose
    dimensionality differs from the collection's.
    """


class InvalidProfileError(LettersmithError, ValueError):
    """
    Raised when a candidate profile is missing required fields.

    Attributes:
        reason: Which check failed (e.g., 'Name is required')
        source: Path of the profile file, when loaded from disk
    """

    def __init__(self, reason: str, source: Optional[str] = None):
        self.reason = reason
        self.source = source
        message = f"Invalid profile format: {reason}"
        if source:
            message += f" ({source})"
        super().__init__(message)


class GenerationError(LettersmithError):
    """Raised when a text-generation provider returns no usable text."""
