"""Composition root: picks each strategy once and wires the RAG pipeline."""

import logging
import os

from dotenv import load_dotenv

from f1rag.constants import (
    DEFAULT_CHUNK_MAX_LENGTH,
    DEFAULT_INGEST_WORKERS,
    DEFAULT_METADATA_PATH,
    DEFAULT_TOP_K,
    get_embedding_dimensions,
    get_embedding_model,
)
from f1rag.llm import get_llm_service
from f1rag.service.conversation import ConversationStore
from f1rag.service.database import RavenDBConfig
from f1rag.service.embedder import BackendEmbedder, Embedder, MockEmbedder
from f1rag.service.generator import Generator, LLMGenerator, RuleBasedGenerator
from f1rag.service.ingestion import IngestionService, MetadataFileReporter
from f1rag.service.rag import RAGPipeline
from f1rag.service.vector_index import InMemoryVectorIndex, RavenDBVectorIndex, VectorIndex

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)


def create_embedder(config: dict | None = None) -> Embedder:
    """Create the embedding strategy.

    Args:
        config: Optional overrides. Keys: 'backend' ("mock", "ollama", "gemini"),
                'model', 'dimension', plus LLM service keys ('host', 'timeout').

    Returns:
        Embedder: MockEmbedder or a BackendEmbedder over the chosen service
    """
    config = config or {}
    backend = config.get("backend", os.getenv("EMBEDDING_BACKEND", "mock"))
    dimension = config.get("dimension", get_embedding_dimensions())

    if backend == "mock":
        logger.info("🧠 Using deterministic mock embeddings")
        return MockEmbedder(dimension)

    llm_config = {key: config[key] for key in ("host", "timeout") if key in config}
    llm_config["service"] = backend
    llm_service = get_llm_service(llm_config)
    model = config.get("model", get_embedding_model(backend))
    return BackendEmbedder(llm_service, model=model, dimension=dimension)


def create_vector_index(config: dict | None = None) -> VectorIndex:
    """Create the vector index ("memory" or "ravendb")."""
    config = config or {}
    backend = config.get("backend", os.getenv("VECTOR_BACKEND", "memory"))
    dimension = config.get("dimension", get_embedding_dimensions())

    if backend == "memory":
        logger.info(f"📦 Using in-memory vector index (dim={dimension})")
        return InMemoryVectorIndex(dimension)

    if backend == "ravendb":
        collection = config.get("collection", RavenDBConfig.get_collection())
        logger.info(f"📦 Using RavenDB vector index (collection={collection}, dim={dimension})")
        return RavenDBVectorIndex(
            collection=collection,
            dimension=dimension,
            url=config.get("url"),
            database=config.get("database"),
        )

    raise ValueError(f"Unsupported vector backend: {backend}")


def create_generator(config: dict | None = None) -> Generator:
    """Create the generator ("rule", "ollama" or "gemini")."""
    config = config or {}
    backend = config.get("backend", os.getenv("GENERATOR_BACKEND", "rule"))

    if backend == "rule":
        logger.info("💬 Using rule-based responder")
        return RuleBasedGenerator()

    llm_config = {key: config[key] for key in ("host", "model", "timeout") if key in config}
    llm_config["service"] = backend
    return LLMGenerator(get_llm_service(llm_config))


def create_pipeline(config: dict | None = None) -> RAGPipeline:
    """Build the long-lived pipeline from configuration.

    Args:
        config: Optional dictionary with 'embedding', 'vector', 'generator'
                sub-dictionaries and 'top_k', 'chunk_max_length',
                'ingest_workers', 'metadata_path' overrides. Anything missing
                comes from environment variables.

    Returns:
        RAGPipeline: Pipeline with its collaborators wired in
    """
    config = config or {}
    embedder = create_embedder(config.get("embedding"))
    vector_index = create_vector_index(config.get("vector"))
    generator = create_generator(config.get("generator"))

    metadata_path = config.get("metadata_path", os.getenv("METADATA_PATH", DEFAULT_METADATA_PATH))
    ingestion = IngestionService(
        embedder,
        vector_index,
        max_chunk_length=int(
            config.get("chunk_max_length", os.getenv("CHUNK_MAX_LENGTH", DEFAULT_CHUNK_MAX_LENGTH))
        ),
        max_workers=int(
            config.get("ingest_workers", os.getenv("INGEST_WORKERS", DEFAULT_INGEST_WORKERS))
        ),
        reporter=MetadataFileReporter(metadata_path) if metadata_path else None,
    )

    logger.info("✅ RAG pipeline initialized")
    return RAGPipeline(
        embedder=embedder,
        vector_index=vector_index,
        generator=generator,
        conversations=ConversationStore(),
        ingestion=ingestion,
        top_k=int(config.get("top_k", DEFAULT_TOP_K)),
    )
