"""RavenDB configuration, connection management and vector utilities.

This package provides the building blocks behind the RavenDB vector index:
- Configuration management (RavenDBConfig)
- Document store creation and vector index management
- Database lifecycle operations (exists, create, delete, count)
- Vector math (cosine_similarity, normalize_vector)

Usage:
    from f1rag.service.database import (
        RavenDBConfig,
        create_document_store,
        ensure_index_exists,
        normalize_vector,
    )
"""

from f1rag.service.database.config import RavenDBConfig
from f1rag.service.database.models import IndexedChunk
from f1rag.service.database.operations import (
    count_documents,
    create_database,
    create_document_store,
    database_exists,
    delete_database,
    ensure_index_exists,
)
from f1rag.service.database.utils import cosine_similarity, dot_product, normalize_vector

__all__ = [
    # Config
    "RavenDBConfig",
    # Models
    "IndexedChunk",
    # Operations
    "create_document_store",
    "ensure_index_exists",
    "database_exists",
    "create_database",
    "delete_database",
    "count_documents",
    # Utils
    "cosine_similarity",
    "dot_product",
    "normalize_vector",
]
