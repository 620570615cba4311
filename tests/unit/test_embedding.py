"""Unit tests for embedding gateways."""

from types import SimpleNamespace
from unittest.mock import MagicMock

import numpy as np
import openai
import pytest

from lettersmith.contexts.retrieval.embedding import (
    EmbeddingGateway,
    HashingEmbeddingGateway,
    OpenAIEmbeddingGateway,
)
from lettersmith.exceptions import EmbeddingError


class FixedGateway(EmbeddingGateway):
    def __init__(self, vector, dimensions=None):
        super().__init__(model="fixed", dimensions=dimensions)
        self.vector = vector

    def _embed(self, text):
        return self.vector


def _cosine(a, b):
    a, b = np.asarray(a), np.asarray(b)
    return float(a @ b / (np.linalg.norm(a) * np.linalg.norm(b)))


def _openai_response(vector):
    return SimpleNamespace(data=[SimpleNamespace(embedding=vector)])


# ============================================================================
# Base contract
# ============================================================================


@pytest.mark.unit
def test_embed_rejects_empty_vector():
    with pytest.raises(EmbeddingError, match="empty embedding"):
        FixedGateway([]).embed("text")


@pytest.mark.unit
def test_embed_rejects_wrong_dimensions():
    with pytest.raises(EmbeddingError, match="expected 3"):
        FixedGateway([0.1, 0.2], dimensions=3).embed("text")


@pytest.mark.unit
def test_embed_accepts_any_length_without_dimensions():
    assert FixedGateway([0.5] * 7).embed("text") == [0.5] * 7


# ============================================================================
# Hashing gateway
# ============================================================================


@pytest.mark.unit
def test_hashing_is_deterministic_and_normalized():
    gateway = HashingEmbeddingGateway(dimensions=64)

    first = gateway.embed("Golang backend services")
    second = HashingEmbeddingGateway(dimensions=64).embed("Golang backend services")

    assert first == second
    assert len(first) == 64
    assert np.linalg.norm(first) == pytest.approx(1.0)
    assert gateway.model == "hashing-64"


@pytest.mark.unit
def test_hashing_shared_vocabulary_is_closer():
    gateway = HashingEmbeddingGateway()

    golang = gateway.embed("golang backend services kubernetes")
    golang_job = gateway.embed("golang kubernetes backend platform")
    react = gateway.embed("react frontend design system")

    assert _cosine(golang, golang_job) > _cosine(golang, react)


@pytest.mark.unit
def test_hashing_text_without_words():
    vector = HashingEmbeddingGateway(dimensions=16).embed("...")

    assert vector == [0.0] * 16


@pytest.mark.unit
def test_hashing_rejects_non_positive_dimensions():
    with pytest.raises(ValueError):
        HashingEmbeddingGateway(dimensions=0)


# ============================================================================
# OpenAI gateway
# ============================================================================


@pytest.mark.unit
def test_openai_gateway_calls_embeddings_api():
    client = MagicMock()
    client.embeddings.create.return_value = _openai_response([0.1, 0.2, 0.3])
    gateway = OpenAIEmbeddingGateway(model="text-embedding-test", dimensions=3, client=client)

    vector = gateway.embed("job description")

    assert vector == [0.1, 0.2, 0.3]
    client.embeddings.create.assert_called_once_with(
        model="text-embedding-test", input="job description"
    )


@pytest.mark.unit
def test_openai_gateway_wraps_sdk_errors():
    client = MagicMock()
    sdk_error = openai.OpenAIError("connection refused")
    client.embeddings.create.side_effect = sdk_error
    gateway = OpenAIEmbeddingGateway(client=client)

    with pytest.raises(EmbeddingError) as excinfo:
        gateway.embed("text")

    assert excinfo.value.original_error is sdk_error
    assert excinfo.value.operation == "embed"


@pytest.mark.unit
def test_openai_gateway_no_data():
    client = MagicMock()
    client.embeddings.create.return_value = SimpleNamespace(data=[])

    with pytest.raises(EmbeddingError):
        OpenAIEmbeddingGateway(client=client).embed("text")


@pytest.mark.unit
def test_openai_gateway_dimension_mismatch():
    client = MagicMock()
    client.embeddings.create.return_value = _openai_response([0.1, 0.2])

    with pytest.raises(EmbeddingError):
        OpenAIEmbeddingGateway(dimensions=1536, client=client).embed("text")


@pytest.mark.unit
def test_openai_gateway_requires_api_key(monkeypatch):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)

    with pytest.raises(ValueError, match="OPENAI_API_KEY"):
        OpenAIEmbeddingGateway()
