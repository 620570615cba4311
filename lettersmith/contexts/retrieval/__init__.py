"""
Retrieval Context

Responsibilities:
- Embeds text through a configured embedding model
- Persists accepted cover letters with their vectors
- Finds the stored letters most similar to a new job description

Owns: Embedding gateways, similarity stores, the cover letter archive
Never: Ranks profile content or builds prompts
"""

from lettersmith.contexts.retrieval.cover_letter_archive import (
    COVER_LETTER_SCHEMA,
    DEFAULT_SIMILAR_LETTERS_LIMIT,
    CoverLetterArchive,
    StoredCoverLetter,
    new_job_id,
)
from lettersmith.contexts.retrieval.embedding import (
    EmbeddingGateway,
    HashingEmbeddingGateway,
    OpenAIEmbeddingGateway,
)
from lettersmith.contexts.retrieval.similarity_store import (
    ChromaSimilarityStore,
    CollectionSchema,
    InMemorySimilarityStore,
    SimilarityStore,
)

__all__ = [
    "COVER_LETTER_SCHEMA",
    "DEFAULT_SIMILAR_LETTERS_LIMIT",
    "ChromaSimilarityStore",
    "CollectionSchema",
    "CoverLetterArchive",
    "EmbeddingGateway",
    "HashingEmbeddingGateway",
    "InMemorySimilarityStore",
    "OpenAIEmbeddingGateway",
    "SimilarityStore",
    "StoredCoverLetter",
    "new_job_id",
]
