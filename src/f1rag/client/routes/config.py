"""Shared configuration for route modules."""

from dataclasses import dataclass
from pathlib import Path

from f1rag.service.rag import RAGPipeline


@dataclass
class RouteConfig:
    """Configuration container for Flask route dependencies.

    Holds the long-lived pipeline built at startup so routes never reach
    for module-level service globals.
    """

    pipeline: RAGPipeline | None = None
    corpus_dir: Path | None = None


# Single shared config instance
_config = RouteConfig()


def get_config() -> RouteConfig:
    """Get the shared route configuration.

    Returns:
        RouteConfig instance with current settings
    """
    return _config


def init_config(
    pipeline: RAGPipeline | None = None,
    corpus_dir: Path | None = None,
) -> None:
    """Initialize the shared route configuration.

    Args:
        pipeline: The RAG pipeline serving requests
        corpus_dir: Default corpus directory for /api/init-data
    """
    if pipeline is not None:
        _config.pipeline = pipeline
    if corpus_dir is not None:
        _config.corpus_dir = corpus_dir
