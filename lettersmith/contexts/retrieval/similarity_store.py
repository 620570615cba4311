"""
Similarity stores: persistence and nearest-neighbor lookup over explicit vectors.

A store holds named collections. Each collection is declared by a CollectionSchema
(field names, vectorizer, dimensionality, optional id field); objects are upserted with a
caller-supplied vector and queried back by cosine similarity.

Adapters:
- InMemorySimilarityStore: process-local, thread-safe, numpy cosine similarity
- ChromaSimilarityStore: chromadb collection in cosine space (persistent, HTTP or ephemeral)
"""

import threading
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

import numpy as np

from lettersmith.contexts.retrieval.logger import log_collection_created, log_connection_failed
from lettersmith.exceptions import (
    CollectionSchemaMismatch,
    PayloadValidationError,
    SimilarityStoreError,
)

# Metadata keys used to persist a CollectionSchema alongside a chroma collection
_FIELDS_KEY = "lettersmith:fields"
_VECTORIZER_KEY = "lettersmith:vectorizer"
_DIMENSIONS_KEY = "lettersmith:dimensions"
_ID_FIELD_KEY = "lettersmith:id_field"


# ============================================================================
# Collection schema
# ============================================================================


@dataclass(frozen=True)
class CollectionSchema:
    """
    Declared shape of a collection.

    Attributes:
        name: Collection name
        fields: Payload property names; every object carries exactly these, as strings
        vectorizer: "none" means vectors are always supplied by the caller
        dimensions: Required vector length, or None to accept any non-empty vector
        id_field: Payload field the object id is derived from (same value, same id).
            Without it every upsert creates a new object.
    """

    name: str
    fields: Tuple[str, ...]
    vectorizer: str = "none"
    dimensions: Optional[int] = None
    id_field: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "fields", tuple(self.fields))
        if self.id_field is not None and self.id_field not in self.fields:
            raise ValueError(f"id_field '{self.id_field}' is not one of {self.fields}")

    def validate_payload(self, payload: Mapping[str, str]) -> None:
        """Raise PayloadValidationError unless payload has exactly the declared string fields."""
        missing = [field for field in self.fields if field not in payload]
        if missing:
            raise PayloadValidationError(
                f"Payload for '{self.name}' is missing fields: {', '.join(missing)}",
                operation="upsert",
            )

        unknown = sorted(set(payload) - set(self.fields))
        if unknown:
            raise PayloadValidationError(
                f"Payload for '{self.name}' has unknown fields: {', '.join(unknown)}",
                operation="upsert",
            )

        for field in self.fields:
            if not isinstance(payload[field], str):
                raise PayloadValidationError(
                    f"Field '{field}' of '{self.name}' must be a string, "
                    f"got {type(payload[field]).__name__}",
                    operation="upsert",
                )

    def validate_vector(self, vector: Sequence[float], operation: str) -> None:
        """Raise PayloadValidationError for an empty or wrongly-sized vector."""
        if len(vector) == 0:
            raise PayloadValidationError(
                f"Empty vector for collection '{self.name}'", operation=operation
            )
        if self.dimensions is not None and len(vector) != self.dimensions:
            raise PayloadValidationError(
                f"Vector has {len(vector)} dimensions, collection '{self.name}' "
                f"expects {self.dimensions}",
                operation=operation,
            )

    def validate_fields(self, fields: Sequence[str]) -> None:
        unknown = [field for field in fields if field not in self.fields]
        if unknown:
            raise SimilarityStoreError(
                f"Collection '{self.name}' has no fields: {', '.join(unknown)}",
                operation="nearest_neighbors",
            )

    def object_id(self, payload: Mapping[str, str]) -> str:
        """Deterministic id from the id field when declared, otherwise a fresh uuid4."""
        if self.id_field is None:
            return str(uuid.uuid4())
        return str(uuid.uuid5(uuid.NAMESPACE_URL, f"{self.name}/{payload[self.id_field]}"))

    def to_metadata(self) -> Dict[str, object]:
        """Flatten into chroma-compatible collection metadata (no None values)."""
        metadata: Dict[str, object] = {
            _FIELDS_KEY: ",".join(self.fields),
            _VECTORIZER_KEY: self.vectorizer,
        }
        if self.dimensions is not None:
            metadata[_DIMENSIONS_KEY] = self.dimensions
        if self.id_field is not None:
            metadata[_ID_FIELD_KEY] = self.id_field
        return metadata

    @classmethod
    def from_metadata(cls, name: str, metadata: Optional[Mapping[str, object]]) -> "CollectionSchema":
        """Rebuild a schema from collection metadata written by to_metadata()."""
        metadata = metadata or {}
        if _FIELDS_KEY not in metadata:
            raise CollectionSchemaMismatch(
                f"Collection '{name}' exists but carries no schema descriptor",
                operation="ensure_collection",
            )
        dimensions = metadata.get(_DIMENSIONS_KEY)
        return cls(
            name=name,
            fields=tuple(str(metadata[_FIELDS_KEY]).split(",")),
            vectorizer=str(metadata.get(_VECTORIZER_KEY, "none")),
            dimensions=int(dimensions) if dimensions is not None else None,
            id_field=metadata.get(_ID_FIELD_KEY),
        )


# ============================================================================
# Store contract
# ============================================================================


class SimilarityStore(ABC):
    """Abstract base for similarity stores."""

    @abstractmethod
    def ensure_collection(self, schema: CollectionSchema) -> None:
        """
        Create the collection if absent. Idempotent.

        Raises:
            CollectionSchemaMismatch: If a collection with that name exists with
                a different descriptor
        """
        pass

    @abstractmethod
    def upsert(self, collection: str, payload: Mapping[str, str], vector: Sequence[float]) -> str:
        """
        Insert or replace an object and return its id.

        Raises:
            PayloadValidationError: If payload or vector violate the collection schema
            SimilarityStoreError: If the collection does not exist or the backend fails
        """
        pass

    @abstractmethod
    def nearest_neighbors(
        self,
        collection: str,
        vector: Sequence[float],
        fields: Sequence[str],
        limit: int,
    ) -> List[Dict[str, str]]:
        """
        Return up to limit payloads, most similar first, restricted to fields.

        An empty collection yields an empty list.
        """
        pass

    @abstractmethod
    def check_connection(self) -> bool:
        """True when the backend is reachable."""
        pass


def _check_limit(limit: int) -> None:
    if limit <= 0:
        raise ValueError(f"limit must be positive, got {limit}")


# ============================================================================
# In-memory adapter
# ============================================================================


class _MemoryCollection:
    def __init__(self, schema: CollectionSchema):
        self.schema = schema
        # object id -> (vector, payload); dict order is insertion order
        self.objects: Dict[str, Tuple[np.ndarray, Dict[str, str]]] = {}


class InMemorySimilarityStore(SimilarityStore):
    """
    Process-local store.

    All operations hold one lock, so concurrent upserts and queries are safe.
    Re-upserting an existing id replaces the object in place (last write wins).
    Equal similarities come back in insertion order.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._collections: Dict[str, _MemoryCollection] = {}

    def ensure_collection(self, schema: CollectionSchema) -> None:
        with self._lock:
            existing = self._collections.get(schema.name)
            if existing is None:
                self._collections[schema.name] = _MemoryCollection(schema)
                log_collection_created(schema.name, backend="memory")
                return
            if existing.schema != schema:
                raise CollectionSchemaMismatch(
                    f"Collection '{schema.name}' exists with schema {existing.schema}, "
                    f"requested {schema}",
                    operation="ensure_collection",
                )

    def _get(self, collection: str, operation: str) -> _MemoryCollection:
        try:
            return self._collections[collection]
        except KeyError:
            raise SimilarityStoreError(
                f"Collection '{collection}' does not exist", operation=operation
            ) from None

    def upsert(self, collection: str, payload: Mapping[str, str], vector: Sequence[float]) -> str:
        with self._lock:
            target = self._get(collection, "upsert")
            target.schema.validate_payload(payload)
            target.schema.validate_vector(vector, operation="upsert")

            object_id = target.schema.object_id(payload)
            target.objects[object_id] = (np.asarray(vector, dtype=float), dict(payload))
            return object_id

    def nearest_neighbors(
        self,
        collection: str,
        vector: Sequence[float],
        fields: Sequence[str],
        limit: int,
    ) -> List[Dict[str, str]]:
        _check_limit(limit)
        with self._lock:
            target = self._get(collection, "nearest_neighbors")
            target.schema.validate_fields(fields)
            target.schema.validate_vector(vector, operation="nearest_neighbors")

            if not target.objects:
                return []
            stored = list(target.objects.values())

        matrix = np.vstack([item_vector for item_vector, _ in stored])
        query = np.asarray(vector, dtype=float)

        norms = np.linalg.norm(matrix, axis=1) * np.linalg.norm(query)
        dots = matrix @ query
        scores = np.divide(dots, norms, out=np.zeros_like(dots), where=norms > 0)

        order = np.argsort(-scores, kind="stable")[:limit]
        return [{field: stored[i][1][field] for field in fields} for i in order]

    def check_connection(self) -> bool:
        return True


# ============================================================================
# Chroma adapter
# ============================================================================


class ChromaSimilarityStore(SimilarityStore):
    """
    chromadb-backed store.

    Collections live in cosine space and carry their CollectionSchema in metadata, so
    a later process can validate payloads without re-declaring the schema. Vectors are
    always supplied, so no chroma embedding function is attached.
    """

    def __init__(self, client):
        import chromadb.errors

        self.client = client
        self._sdk_error = chromadb.errors.ChromaError
        self._schemas: Dict[str, CollectionSchema] = {}

    @classmethod
    def persistent(cls, path: str) -> "ChromaSimilarityStore":
        import chromadb
        from chromadb.config import Settings

        return cls(chromadb.PersistentClient(path=path, settings=Settings(anonymized_telemetry=False)))

    @classmethod
    def http(cls, host: str, port: int = 8000, ssl: bool = False) -> "ChromaSimilarityStore":
        import chromadb
        from chromadb.config import Settings

        return cls(
            chromadb.HttpClient(
                host=host, port=port, ssl=ssl, settings=Settings(anonymized_telemetry=False)
            )
        )

    @classmethod
    def ephemeral(cls) -> "ChromaSimilarityStore":
        import chromadb
        from chromadb.config import Settings

        return cls(chromadb.EphemeralClient(settings=Settings(anonymized_telemetry=False)))

    def _wrap(self, message: str, operation: str, error: Exception) -> SimilarityStoreError:
        return SimilarityStoreError(message, operation=operation, original_error=error)

    def ensure_collection(self, schema: CollectionSchema) -> None:
        metadata = {**schema.to_metadata(), "hnsw:space": "cosine"}
        # create first: get_or_create may rewrite metadata of an existing collection
        try:
            self.client.create_collection(name=schema.name, metadata=metadata, embedding_function=None)
        except (self._sdk_error, ValueError):
            collection, existing = self._collection(schema.name, "ensure_collection")
            if existing != schema:
                raise CollectionSchemaMismatch(
                    f"Collection '{schema.name}' exists with schema {existing}, requested {schema}",
                    operation="ensure_collection",
                )
            return

        self._schemas[schema.name] = schema
        log_collection_created(schema.name, backend="chroma")

    def _collection(self, name: str, operation: str):
        try:
            collection = self.client.get_collection(name=name, embedding_function=None)
        except (self._sdk_error, ValueError) as e:
            raise self._wrap(f"Collection '{name}' does not exist", operation, e) from e

        if name not in self._schemas:
            self._schemas[name] = CollectionSchema.from_metadata(name, collection.metadata)
        return collection, self._schemas[name]

    def upsert(self, collection: str, payload: Mapping[str, str], vector: Sequence[float]) -> str:
        target, schema = self._collection(collection, "upsert")
        schema.validate_payload(payload)
        schema.validate_vector(vector, operation="upsert")

        object_id = schema.object_id(payload)
        try:
            target.upsert(
                ids=[object_id],
                embeddings=[[float(v) for v in vector]],
                metadatas=[dict(payload)],
            )
        except (self._sdk_error, ValueError) as e:
            raise self._wrap(f"Upsert into '{collection}' failed", "upsert", e) from e
        return object_id

    def nearest_neighbors(
        self,
        collection: str,
        vector: Sequence[float],
        fields: Sequence[str],
        limit: int,
    ) -> List[Dict[str, str]]:
        _check_limit(limit)
        target, schema = self._collection(collection, "nearest_neighbors")
        schema.validate_fields(fields)
        schema.validate_vector(vector, operation="nearest_neighbors")

        try:
            count = target.count()
            if count == 0:
                return []
            results = target.query(
                query_embeddings=[[float(v) for v in vector]],
                n_results=min(limit, count),
                include=["metadatas"],
            )
        except (self._sdk_error, ValueError) as e:
            raise self._wrap(f"Query on '{collection}' failed", "nearest_neighbors", e) from e

        metadatas = results["metadatas"][0] if results.get("metadatas") else []
        return [{field: metadata[field] for field in fields} for metadata in metadatas]

    def check_connection(self) -> bool:
        try:
            self.client.heartbeat()
        except Exception as e:
            log_connection_failed("chroma", e)
            return False
        return True
