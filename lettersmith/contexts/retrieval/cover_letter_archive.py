"""
Archive of submitted cover letters with similarity retrieval.

CoverLetterArchive is stateless: it embeds text through an EmbeddingGateway and reads
or writes the SubmittedCoverLetter collection of a SimilarityStore. Failures from either
collaborator propagate unchanged; nothing is retried and an upsert is never attempted
once embedding has failed.
"""

import itertools
import time
from dataclasses import dataclass
from typing import Callable, List, Mapping, Optional, Sequence, Tuple

from lettersmith.contexts.retrieval.embedding import EmbeddingGateway
from lettersmith.contexts.retrieval.logger import (
    log_letter_stored,
    log_search_complete,
    log_search_start,
)
from lettersmith.contexts.retrieval.similarity_store import CollectionSchema, SimilarityStore

COVER_LETTER_SCHEMA = CollectionSchema(
    name="SubmittedCoverLetter",
    fields=("jobId", "jobDescription", "submittedCoverLetter"),
    vectorizer="none",
    id_field="jobId",
)

DEFAULT_SIMILAR_LETTERS_LIMIT = 3
RETRIEVED_FIELDS = ("submittedCoverLetter",)

# Payload field name -> StoredCoverLetter attribute
_FIELD_ATTRIBUTES = {
    "jobId": "job_id",
    "jobDescription": "job_description",
    "submittedCoverLetter": "submitted_cover_letter",
}


@dataclass(frozen=True)
class StoredCoverLetter:
    """
    A cover letter as persisted in, or returned from, the archive.

    Fields the query did not request are None.
    """

    job_id: Optional[str] = None
    job_description: Optional[str] = None
    submitted_cover_letter: Optional[str] = None
    vector: Optional[Tuple[float, ...]] = None

    @classmethod
    def from_payload(cls, payload: Mapping[str, str]) -> "StoredCoverLetter":
        return cls(
            **{
                attribute: payload[field]
                for field, attribute in _FIELD_ATTRIBUTES.items()
                if field in payload
            }
        )


_sequence = itertools.count(1)


def new_job_id() -> str:
    """
    Generate a job id: job-<epoch ms>-<sequence>.

    The sequence is process-local and strictly increasing, so two ids generated in
    the same millisecond still differ.
    """
    return f"job-{time.time_ns() // 1_000_000}-{next(_sequence)}"


class CoverLetterArchive:
    """
    Stores accepted cover letters and finds the ones most similar to a job.

    Args:
        embedding_gateway: Turns text into vectors
        similarity_store: Persists vectors and answers nearest-neighbor queries
        collection: Schema of the collection letters are kept in
        job_id_factory: Produces a fresh job id per stored letter
    """

    def __init__(
        self,
        embedding_gateway: EmbeddingGateway,
        similarity_store: SimilarityStore,
        collection: CollectionSchema = COVER_LETTER_SCHEMA,
        job_id_factory: Callable[[], str] = new_job_id,
    ):
        self.embedding_gateway = embedding_gateway
        self.similarity_store = similarity_store
        self.collection = collection
        self.job_id_factory = job_id_factory

    def ensure_collection(self) -> None:
        """Create the letters collection if the store does not have it yet."""
        self.similarity_store.ensure_collection(self.collection)

    def find_similar(
        self,
        job_description: str,
        limit: int = DEFAULT_SIMILAR_LETTERS_LIMIT,
        fields: Sequence[str] = RETRIEVED_FIELDS,
    ) -> List[StoredCoverLetter]:
        """
        Return up to limit stored letters, most similar to job_description first.

        Only the submitted letter text is fetched by default. An empty archive gives
        an empty list; EmbeddingError and SimilarityStoreError propagate.
        """
        log_search_start(self.collection.name, limit, len(job_description))

        vector = self.embedding_gateway.embed(job_description)
        payloads = self.similarity_store.nearest_neighbors(
            self.collection.name, vector, list(fields), limit
        )

        letters = [StoredCoverLetter.from_payload(payload) for payload in payloads]
        log_search_complete(self.collection.name, len(letters))
        return letters

    def store(self, job_description: str, cover_letter: str) -> str:
        """
        Persist an accepted cover letter.

        Returns the similarity store's object id, not the generated jobId. The jobId is
        kept in the stored payload; the object id is what the store derives from it.

        The vector is computed from the letter text, while find_similar() queries with
        a job-description vector. Existing archives were built this way, so both sides
        must stay as they are for old and new letters to remain comparable.
        """
        vector = self.embedding_gateway.embed(cover_letter)

        job_id = self.job_id_factory()
        payload = {
            "jobId": job_id,
            "jobDescription": job_description,
            "submittedCoverLetter": cover_letter,
        }
        object_id = self.similarity_store.upsert(self.collection.name, payload, vector)

        log_letter_stored(job_id, object_id)
        return object_id
