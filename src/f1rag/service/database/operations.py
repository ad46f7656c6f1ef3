"""Database operations for RavenDB: store lifecycle, vector index and counts."""

import logging
from contextlib import contextmanager
from typing import Iterator

import requests
from ravendb import DocumentStore
from ravendb.documents.indexes.definitions import (
    FieldIndexing,
    FieldStorage,
    IndexDefinition,
    IndexFieldOptions,
)
from ravendb.documents.indexes.vector.options import VectorOptions
from ravendb.documents.operations.indexes import GetIndexNamesOperation, PutIndexesOperation
from ravendb.serverwide.operations.common import DeleteDatabaseOperation

from f1rag.constants import DEFAULT_COLLECTION, get_embedding_dimensions, get_request_timeout
from f1rag.service.database.config import RavenDBConfig

logger = logging.getLogger(__name__)


def _resolve(url: str | None, database: str | None) -> tuple[str, str]:
    """Fill in the server URL and database name from RavenDBConfig."""
    return url or RavenDBConfig.get_url(), database or RavenDBConfig.get_database_name()


def create_document_store(url: str | None = None, database: str | None = None) -> DocumentStore:
    """Create and initialize a DocumentStore.

    Args:
        url: RavenDB server URL (default: RAVENDB_URL)
        database: Database name (default: RAVENDB_DATABASE)

    Returns:
        DocumentStore: Initialized store; the caller owns closing it
    """
    url, database = _resolve(url, database)
    store = DocumentStore([url], database)
    store.initialize()
    return store


@contextmanager
def _short_lived_store(url: str | None, database: str | None) -> Iterator[DocumentStore]:
    url, database = _resolve(url, database)
    store = DocumentStore([url], database)
    try:
        store.initialize()
        yield store
    finally:
        store.close()


def ensure_index_exists(
    store: DocumentStore,
    collection: str = DEFAULT_COLLECTION,
    dimensions: int | None = None,
) -> str:
    """Ensure the vector search index over ``collection`` exists.

    Args:
        store: Initialized DocumentStore instance
        collection: Collection holding index entries
        dimensions: Vector dimension (default: EMBEDDING_DIMENSIONS or 768)

    Returns:
        str: The index name, ``{collection}/ByEmbedding``
    """
    index_name = f"{collection}/ByEmbedding"

    existing_indexes = store.maintenance.send(GetIndexNamesOperation(0, 100))
    if index_name in existing_indexes:
        return index_name

    dimensions = dimensions or get_embedding_dimensions()
    logger.info(f"🔧 Creating vector index {index_name} (dim={dimensions})")

    index_definition = IndexDefinition()
    index_definition.name = index_name
    index_definition.maps = {
        f"""from entry in docs.{collection}
        select new {{
            title = entry.title,
            type = entry.type,
            source = entry.source,
            embedding = CreateField("embedding", entry.embedding, new CreateFieldOptions {{ Storage = FieldStorage.Yes, Indexing = FieldIndexing.No }})
        }}"""
    }
    index_definition.fields = {
        "embedding": IndexFieldOptions(
            storage=FieldStorage.YES,
            indexing=FieldIndexing.NO,
            vector=VectorOptions(dimensions=dimensions),
        )
    }

    store.maintenance.send(PutIndexesOperation(index_definition))
    return index_name


def database_exists(url: str | None = None, database: str | None = None) -> bool:
    """Return True when the database answers a trivial query."""
    try:
        with _short_lived_store(url, database) as store:
            with store.open_session() as session:
                list(session.query().take(0))
        return True
    except Exception as e:
        logger.debug(f"Database check failed: {e}")
        return False


def create_database(url: str | None = None, database: str | None = None) -> None:
    """Create the database through the RavenDB admin REST endpoint.

    Raises:
        requests.HTTPError: If the server rejects the request
    """
    url, database = _resolve(url, database)
    payload = {"DatabaseName": database, "Settings": {}, "Disabled": False}

    response = requests.put(f"{url}/admin/databases", json=payload, timeout=get_request_timeout())
    response.raise_for_status()
    logger.info(f"✅ Created database '{database}'")


def delete_database(url: str | None = None, database: str | None = None) -> None:
    """Hard-delete the database and everything in it.

    WARNING: This operation is irreversible.
    """
    _, database = _resolve(url, database)
    with _short_lived_store(url, database) as store:
        store.maintenance.server.send(
            DeleteDatabaseOperation(database_name=database, hard_delete=True)
        )
    logger.info(f"🗑️ Deleted database '{database}'")


def count_documents(store: DocumentStore, collection: str = DEFAULT_COLLECTION) -> int:
    """Count the index entries stored in ``collection``."""
    with store.open_session() as session:
        return len(list(session.advanced.raw_query(f"from {collection}", object_type=dict)))
