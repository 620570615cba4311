"""Unit tests for service wiring."""

import json
from unittest.mock import MagicMock

import pytest

from lettersmith.app import (
    build_embedding_gateway,
    build_services,
    build_similarity_store,
    initialize_store,
)
from lettersmith.contexts.retrieval.cover_letter_archive import CoverLetterArchive
from lettersmith.contexts.retrieval.embedding import HashingEmbeddingGateway
from lettersmith.contexts.retrieval.similarity_store import InMemorySimilarityStore, SimilarityStore
from lettersmith.exceptions import SimilarityStoreError
from lettersmith.utils.config import load_settings

OFFLINE_ENV = {
    "EMBEDDING_PROVIDER": "hashing",
    "EMBEDDING_DIMENSIONS": "64",
    "VECTOR_STORE_BACKEND": "memory",
}


@pytest.mark.unit
def test_build_services_offline():
    services = build_services(load_settings(environ=OFFLINE_ENV), with_providers=False)

    assert isinstance(services.archive.embedding_gateway, HashingEmbeddingGateway)
    assert isinstance(services.archive.similarity_store, InMemorySimilarityStore)
    assert services.archive.collection.dimensions == 64
    assert services.providers == []
    assert services.similar_letters_limit == 3

    services.archive.store("Golang role", "Golang letter")
    assert services.archive.find_similar("Golang role")[0].submitted_cover_letter == "Golang letter"


@pytest.mark.unit
def test_build_services_uses_injected_collaborators(vocabulary_gateway):
    store = InMemorySimilarityStore()
    settings = load_settings(environ={**OFFLINE_ENV, "EMBEDDING_DIMENSIONS": "7"})

    services = build_services(
        settings, with_providers=False, similarity_store=store, embedding_gateway=vocabulary_gateway
    )

    assert services.archive.similarity_store is store
    assert services.archive.embedding_gateway is vocabulary_gateway


@pytest.mark.unit
def test_unknown_backends():
    with pytest.raises(ValueError, match="Unknown store backend"):
        build_similarity_store(load_settings(environ={"VECTOR_STORE_BACKEND": "weaviate"}))
    with pytest.raises(ValueError, match="Unknown embedding provider"):
        build_embedding_gateway(load_settings(environ={"EMBEDDING_PROVIDER": "cohere"}))


@pytest.mark.unit
def test_initialize_store_unreachable(vocabulary_gateway):
    store = MagicMock(spec=SimilarityStore)
    store.check_connection.return_value = False
    archive = CoverLetterArchive(vocabulary_gateway, store)

    with pytest.raises(SimilarityStoreError, match="not reachable"):
        initialize_store(archive)
    store.ensure_collection.assert_not_called()


@pytest.mark.unit
def test_load_profile(tmp_path, profile_data):
    path = tmp_path / "profile.json"
    path.write_text(json.dumps(profile_data))
    settings = load_settings(environ={**OFFLINE_ENV, "PROFILE_PATH": str(path)})

    services = build_services(settings, with_providers=False)

    assert services.load_profile().name == "Jordan Rivera"
