"""Vector indexes answering top-K cosine similarity queries.

Vectors are L2-normalized at write time and at query time, so ranking by a
plain dot product is ranking by cosine similarity. That keeps the index
portable to any backend offering inner-product search.
"""

import logging
import threading
import uuid
from typing import Protocol

from ravendb import DocumentStore

from f1rag.constants import DEFAULT_COLLECTION, DEFAULT_EMBEDDING_DIMENSIONS, DEFAULT_TOP_K
from f1rag.errors import BackendUnavailableError, InvalidInputError
from f1rag.models import CollectionStats, IndexEntry, SearchResult
from f1rag.service.database import (
    IndexedChunk,
    count_documents,
    create_document_store,
    ensure_index_exists,
)
from f1rag.service.database.utils import cosine_similarity, dot_product, normalize_vector

logger = logging.getLogger(__name__)


class VectorIndex(Protocol):
    """Stores (vector, metadata) pairs and answers nearest-neighbour queries."""

    dimension: int

    def upsert(self, entries: list[IndexEntry]) -> int:
        ...

    def search(self, query_vector: list[float], k: int = DEFAULT_TOP_K) -> list[SearchResult]:
        ...

    def stats(self) -> CollectionStats:
        ...


def _validate_entries(entries: list[IndexEntry], dimension: int) -> None:
    if not entries:
        raise InvalidInputError("Invalid entries: at least one entry is required")
    for position, entry in enumerate(entries):
        if len(entry.vector) != dimension:
            raise InvalidInputError(
                f"Entry {position} has dimension {len(entry.vector)}, index expects {dimension}"
            )


def _validate_query(query_vector: list[float], dimension: int) -> None:
    if query_vector is None or len(query_vector) != dimension:
        size = 0 if query_vector is None else len(query_vector)
        raise InvalidInputError(f"Invalid query vector: expected dimension {dimension}, got {size}")


class InMemoryVectorIndex:
    """Process-local vector index guarded by a lock.

    Entries are keyed by id; upserting an existing id overwrites it in place.
    Searches scan a snapshot, so concurrent writers never block a ranking
    already under way.
    """

    def __init__(self, dimension: int = DEFAULT_EMBEDDING_DIMENSIONS) -> None:
        self.dimension = dimension
        self._entries: dict[str, IndexEntry] = {}
        self._lock = threading.Lock()

    def upsert(self, entries: list[IndexEntry]) -> int:
        _validate_entries(entries, self.dimension)
        stored = [
            IndexEntry(
                vector=normalize_vector(entry.vector),
                metadata=dict(entry.metadata),
                entry_id=entry.entry_id or str(uuid.uuid4()),
            )
            for entry in entries
        ]
        with self._lock:
            for entry in stored:
                self._entries[entry.entry_id] = entry
        logger.info(f"✅ Upserted {len(stored)} vectors into the in-memory index")
        return len(stored)

    def search(self, query_vector: list[float], k: int = DEFAULT_TOP_K) -> list[SearchResult]:
        _validate_query(query_vector, self.dimension)
        if k <= 0:
            return []

        query = normalize_vector(query_vector)
        with self._lock:
            snapshot = list(self._entries.values())

        scored = [
            SearchResult(
                id=entry.entry_id,
                score=max(-1.0, min(1.0, dot_product(query, entry.vector))),
                metadata=dict(entry.metadata),
            )
            for entry in snapshot
        ]
        # Stable sort keeps insertion order among equal scores
        scored.sort(key=lambda result: result.score, reverse=True)
        return scored[:k]

    def stats(self) -> CollectionStats:
        with self._lock:
            total = len(self._entries)
        return CollectionStats(total_documents=total, dimension=self.dimension)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()


class RavenDBVectorIndex:
    """Vector index persisted in RavenDB and queried with its vector search.

    Backend failures surface as BackendUnavailableError, except in ``stats``,
    which degrades to a zero-valued result so health checks keep working.
    """

    def __init__(
        self,
        store: DocumentStore | None = None,
        collection: str = DEFAULT_COLLECTION,
        dimension: int = DEFAULT_EMBEDDING_DIMENSIONS,
        url: str | None = None,
        database: str | None = None,
    ) -> None:
        self.collection = collection
        self.dimension = dimension
        self._url = url
        self._database = database
        self._store = store
        self._index_ready = False
        self._lock = threading.Lock()

    @property
    def store(self) -> DocumentStore:
        with self._lock:
            if self._store is None:
                self._store = create_document_store(self._url, self._database)
            return self._store

    def _ensure_index(self) -> None:
        if not self._index_ready:
            ensure_index_exists(self.store, self.collection, self.dimension)
            self._index_ready = True

    def upsert(self, entries: list[IndexEntry]) -> int:
        _validate_entries(entries, self.dimension)
        try:
            self._ensure_index()
            with self.store.open_session() as session:
                for entry in entries:
                    entry_id = entry.entry_id or str(uuid.uuid4())
                    doc = IndexedChunk(
                        Id=entry_id,
                        title=entry.metadata.get("title", ""),
                        content=entry.metadata.get("content", ""),
                        type=entry.metadata.get("type", ""),
                        source=entry.metadata.get("source", ""),
                        embedding=normalize_vector(entry.vector),
                        metadata=dict(entry.metadata),
                    )
                    session.store(doc, entry_id)
                    session.advanced.get_metadata_for(doc)["@collection"] = self.collection
                session.save_changes()
        except Exception as e:
            logger.error(f"❌ RavenDB upsert failed: {e}", exc_info=True)
            raise BackendUnavailableError(f"Vector store upsert failed: {e}") from e

        logger.info(f"✅ Upserted {len(entries)} vectors into RavenDB collection '{self.collection}'")
        return len(entries)

    def search(self, query_vector: list[float], k: int = DEFAULT_TOP_K) -> list[SearchResult]:
        _validate_query(query_vector, self.dimension)
        if k <= 0:
            return []

        query = normalize_vector(query_vector)
        try:
            with self.store.open_session() as session:
                raw_results = list(
                    session.query_collection(self.collection, object_type=dict)
                    .vector_search("embedding", query)
                    .order_by_score()
                    .take(k)
                )
        except Exception as e:
            logger.error(f"❌ RavenDB vector search failed: {e}", exc_info=True)
            raise BackendUnavailableError(f"Vector store search failed: {e}") from e

        # Re-score client side so scores are exact cosine values in [-1, 1]
        results = [
            SearchResult(
                id=raw.get("Id") or raw.get("@metadata", {}).get("@id", ""),
                score=cosine_similarity(query, raw.get("embedding", [])),
                metadata=raw.get("metadata") or {
                    "title": raw.get("title", ""),
                    "content": raw.get("content", ""),
                    "type": raw.get("type", ""),
                    "source": raw.get("source", ""),
                },
            )
            for raw in raw_results
        ]
        results.sort(key=lambda result: result.score, reverse=True)
        return results[:k]

    def stats(self) -> CollectionStats:
        try:
            total = count_documents(self.store, self.collection)
            return CollectionStats(total_documents=total, dimension=self.dimension)
        except Exception as e:
            logger.error(f"❌ Failed to get collection stats: {e}")
            return CollectionStats(total_documents=0, dimension=self.dimension, available=False)

    def close(self) -> None:
        with self._lock:
            if self._store is not None:
                self._store.close()
                self._store = None
