"""Pytest configuration and shared fixtures for the test suite."""

import requests

import pytest

from f1rag.models import Document
from f1rag.service.conversation import ConversationStore
from f1rag.service.embedder import MockEmbedder
from f1rag.service.generator import RuleBasedGenerator
from f1rag.service.ingestion import IngestionService
from f1rag.service.rag import RAGPipeline
from f1rag.service.vector_index import InMemoryVectorIndex

# Small dimension keeps mock vectors cheap while exercising slot collisions
TEST_DIMENSION = 64


# Service availability checks
def ollama_available() -> bool:
    """Check if Ollama server is running and accessible.

    Returns:
        True if Ollama is available, False otherwise
    """
    try:
        response = requests.get("http://localhost:11434/api/tags", timeout=2)
        return response.status_code == 200
    except requests.RequestException:
        return False


def ravendb_available() -> bool:
    """Check if RavenDB server is running and accessible.

    Returns:
        True if RavenDB is available, False otherwise
    """
    try:
        response = requests.get("http://localhost:8080/databases", timeout=2)
        return response.status_code == 200 or response.status_code == 401  # Auth required is OK
    except requests.RequestException:
        return False


# Service fixtures with skip markers
@pytest.fixture
def ollama_service():
    """Provide OllamaService instance, skip if Ollama not available."""
    if not ollama_available():
        pytest.skip("Ollama server not running on localhost:11434")

    from f1rag.llm import OllamaService

    return OllamaService(host="http://localhost:11434", model="llama3")


@pytest.fixture
def ravendb_store():
    """Provide RavenDB DocumentStore, skip if RavenDB not available.

    Yields:
        Initialized DocumentStore instance
    """
    if not ravendb_available():
        pytest.skip("RavenDB server not running on localhost:8080")

    from f1rag.service.database import create_document_store

    store = create_document_store()
    yield store
    store.close()


# Pipeline fixtures
@pytest.fixture
def embedder() -> MockEmbedder:
    return MockEmbedder(TEST_DIMENSION)


@pytest.fixture
def vector_index() -> InMemoryVectorIndex:
    return InMemoryVectorIndex(TEST_DIMENSION)


@pytest.fixture
def conversations() -> ConversationStore:
    return ConversationStore()


@pytest.fixture
def pipeline(embedder, vector_index, conversations) -> RAGPipeline:
    """Fully in-process pipeline: mock embeddings, memory index, rule-based answers."""
    return RAGPipeline(
        embedder=embedder,
        vector_index=vector_index,
        generator=RuleBasedGenerator(),
        conversations=conversations,
        ingestion=IngestionService(embedder, vector_index, max_workers=2),
    )


@pytest.fixture
def mercedes_document() -> Document:
    return Document(
        title="Mercedes F1 Team",
        content=(
            "Mercedes-AMG Petronas F1 Team is one of the most successful teams in Formula 1. "
            "They won eight consecutive Constructors' Championships from 2014 to 2021."
        ),
        type="team",
        source="f1_teams",
    )


@pytest.fixture
def f1_documents(mercedes_document) -> list[Document]:
    """A small mixed corpus of F1 documents."""
    return [
        mercedes_document,
        Document(
            title="Max Verstappen",
            content=(
                "Max Verstappen drives for Red Bull Racing. He won the 2021, 2022 and 2023 "
                "World Championships. He set a record with 19 wins in 2023."
            ),
            type="driver",
            source="f1_drivers",
        ),
        Document(
            title="Circuit de Monaco",
            content=(
                "The Monaco Grand Prix is held on the streets of Monte Carlo. "
                "Overtaking is notoriously difficult on the narrow track!"
            ),
            type="circuit",
            source="f1_circuits",
        ),
    ]


# Test data generators
@pytest.fixture
def create_test_document():
    """Factory fixture to create test documents.

    Returns:
        Function that creates a test document with custom parameters
    """

    def _create_document(
        title: str = "Test Document",
        content: str = "First sentence. Second sentence.",
        doc_type: str = "general",
        source: str = "test",
    ) -> Document:
        return Document(title=title, content=content, type=doc_type, source=source)

    return _create_document
