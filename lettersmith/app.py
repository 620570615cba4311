"""
Composition root.

Builds the embedding gateway, similarity store, cover letter archive and generation
providers from settings. Everything else in the package receives its collaborators as
constructor arguments; this is the only module that picks concrete implementations.
"""

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import List, Optional

from loguru import logger
from omegaconf import DictConfig

from lettersmith.contexts.drafting.prompt_builder import PromptBuilder
from lettersmith.contexts.intake.profile_data_structure import UserProfile
from lettersmith.contexts.retrieval.cover_letter_archive import (
    COVER_LETTER_SCHEMA,
    CoverLetterArchive,
)
from lettersmith.contexts.retrieval.embedding import (
    EmbeddingGateway,
    HashingEmbeddingGateway,
    OpenAIEmbeddingGateway,
)
from lettersmith.contexts.retrieval.similarity_store import (
    ChromaSimilarityStore,
    InMemorySimilarityStore,
    SimilarityStore,
)
from lettersmith.exceptions import SimilarityStoreError
from lettersmith.utils.llm import LLMProvider, get_provider

EMBEDDING_PROVIDERS = ("openai", "hashing")
STORE_BACKENDS = ("chroma", "memory")
GENERATION_PROVIDERS = ("openai", "anthropic")


@dataclass
class Services:
    """Wired-up application services."""

    settings: DictConfig
    archive: CoverLetterArchive
    prompt_builder: PromptBuilder
    providers: List[LLMProvider] = field(default_factory=list)

    @property
    def similar_letters_limit(self) -> int:
        return self.settings.retrieval.similar_letters_limit

    def load_profile(self, path: Optional[Path] = None) -> UserProfile:
        return UserProfile.from_file(Path(path or self.settings.profile.path))


def build_embedding_gateway(settings: DictConfig) -> EmbeddingGateway:
    """Embedding gateway named by settings.embedding.provider."""
    provider = settings.embedding.provider.lower()
    dimensions = settings.embedding.dimensions

    if provider == "openai":
        return OpenAIEmbeddingGateway(model=settings.embedding.model, dimensions=dimensions)
    elif provider == "hashing":
        if dimensions is None:
            return HashingEmbeddingGateway()
        return HashingEmbeddingGateway(dimensions=dimensions)
    else:
        raise ValueError(
            f"Unknown embedding provider: {provider}. Use one of {', '.join(EMBEDDING_PROVIDERS)}"
        )


def build_similarity_store(settings: DictConfig) -> SimilarityStore:
    """Similarity store named by settings.store.backend."""
    backend = settings.store.backend.lower()

    if backend == "memory":
        return InMemorySimilarityStore()
    elif backend == "chroma":
        if settings.store.host:
            return ChromaSimilarityStore.http(
                host=settings.store.host, port=settings.store.port, ssl=settings.store.ssl
            )
        return ChromaSimilarityStore.persistent(path=str(settings.store.path))
    else:
        raise ValueError(
            f"Unknown store backend: {backend}. Use one of {', '.join(STORE_BACKENDS)}"
        )


def build_providers(settings: DictConfig) -> List[LLMProvider]:
    """One generation provider per configured vendor, in draft order (A = OpenAI, B = Anthropic)."""
    return [
        get_provider(
            name,
            model=settings.generation[name].model,
            max_tokens=settings.generation[name].max_tokens,
        )
        for name in GENERATION_PROVIDERS
    ]


def initialize_store(archive: CoverLetterArchive) -> None:
    """
    Verify the store is reachable and make sure the letters collection exists.

    Raises:
        SimilarityStoreError: If the connection check fails
        CollectionSchemaMismatch: If the collection exists with another schema
    """
    if not archive.similarity_store.check_connection():
        raise SimilarityStoreError("Similarity store is not reachable", operation="check_connection")
    archive.ensure_collection()
    logger.debug(f"Collection '{archive.collection.name}' ready")


def build_services(
    settings: DictConfig,
    with_providers: bool = True,
    similarity_store: Optional[SimilarityStore] = None,
    embedding_gateway: Optional[EmbeddingGateway] = None,
) -> Services:
    """
    Wire all services from settings and initialize the store.

    Args:
        settings: Output of load_settings()
        with_providers: Also build generation providers (requires API keys)
        similarity_store: Use this store instead of building one from settings
        embedding_gateway: Use this gateway instead of building one from settings
    """
    schema = replace(COVER_LETTER_SCHEMA, dimensions=settings.embedding.dimensions)

    archive = CoverLetterArchive(
        embedding_gateway=embedding_gateway or build_embedding_gateway(settings),
        similarity_store=similarity_store or build_similarity_store(settings),
        collection=schema,
    )
    initialize_store(archive)

    return Services(
        settings=settings,
        archive=archive,
        prompt_builder=PromptBuilder(),
        providers=build_providers(settings) if with_providers else [],
    )
