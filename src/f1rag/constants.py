"""Application-wide constants and defaults for f1rag.

This module provides a single source of truth for configuration defaults,
magic numbers, and other constants used throughout the application.
"""

import os

# =============================================================================
# Retrieval and Embedding
# =============================================================================
DEFAULT_EMBEDDING_DIMENSIONS = 768
DEFAULT_TOP_K = 5  # Default number of results for vector search
DEFAULT_CHUNK_MAX_LENGTH = 500  # Characters per chunk
BACKEND_TEXT_LIMIT = 512  # Characters sent to a real embedding backend
MOCK_EMBEDDING_SCALE = 0.1

# =============================================================================
# Conversations
# =============================================================================
MAX_HISTORY_TURNS = 20
GENERATION_HISTORY_TURNS = 5  # Turns handed to an LLM generator

# =============================================================================
# Display Settings
# =============================================================================
CONTENT_PREVIEW_LENGTH = 200  # Characters to show in content previews
NO_CONTEXT_SENTINEL = "No relevant F1 information found."

# =============================================================================
# Default URLs, Hosts and Paths
# =============================================================================
DEFAULT_OLLAMA_HOST = "http://localhost:11434"
DEFAULT_RAVENDB_URL = "http://localhost:8080"
DEFAULT_RAVENDB_DATABASE = "f1rag"
DEFAULT_COLLECTION = "IndexEntries"
DEFAULT_METADATA_PATH = "data/metadata.json"
DEFAULT_REQUEST_TIMEOUT = 10.0  # Seconds
DEFAULT_INGEST_WORKERS = 4

# =============================================================================
# Backend Defaults
# =============================================================================
EMBEDDING_DEFAULTS = {
    "ollama": "nomic-embed-text",
    "gemini": "text-embedding-004",
}

LLM_MODEL_DEFAULTS = {
    "ollama": "llama3",
    "gemini": "gemini-2.5-flash",
}

# =============================================================================
# Domain Vocabulary
# =============================================================================
# Topic label -> keywords matched case-insensitively against a whole turn
TOPIC_KEYWORDS = {
    "Drivers": ("driver", "piloto"),
    "Teams": ("team", "equipo"),
    "Races": ("race", "carrera"),
    "Championship": ("championship", "campeonato"),
    "Circuits": ("circuit", "circuito"),
    "Technology": ("engine", "motor"),
    "Regulations": ("regulation", "reglamento"),
}

AVAILABLE_TOPICS = [
    {"id": "teams", "name": "F1 Teams",
     "description": "Information about current and historical F1 teams"},
    {"id": "drivers", "name": "F1 Drivers",
     "description": "Profiles and statistics of F1 drivers"},
    {"id": "circuits", "name": "F1 Circuits",
     "description": "Information about F1 racing circuits"},
    {"id": "regulations", "name": "F1 Regulations",
     "description": "Technical and sporting regulations"},
    {"id": "history", "name": "F1 History",
     "description": "Historical information about Formula 1"},
    {"id": "current", "name": "Current Season",
     "description": "Information about the current F1 season"},
]


def get_embedding_model(service: str | None = None) -> str:
    """Get the default embedding model for a given backend service.

    Checks the EMBEDDING_MODEL environment variable first, then falls back
    to service-specific defaults.

    Args:
        service: The backend name ("ollama" or "gemini").
                If None, uses EMBEDDING_BACKEND env var or defaults to "ollama".

    Returns:
        str: The embedding model name to use.
    """
    env_model = os.getenv("EMBEDDING_MODEL")
    if env_model:
        return env_model

    if service is None:
        service = os.getenv("EMBEDDING_BACKEND", "ollama")

    return EMBEDDING_DEFAULTS.get(service, EMBEDDING_DEFAULTS["ollama"])


def get_embedding_dimensions() -> int:
    """Get the index dimension from EMBEDDING_DIMENSIONS (default: 768)."""
    return int(os.getenv("EMBEDDING_DIMENSIONS", str(DEFAULT_EMBEDDING_DIMENSIONS)))


def get_request_timeout() -> float:
    """Get the per-request backend timeout in seconds."""
    return float(os.getenv("REQUEST_TIMEOUT", str(DEFAULT_REQUEST_TIMEOUT)))
