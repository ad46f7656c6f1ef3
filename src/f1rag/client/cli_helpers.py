"""Helper functions for CLI commands."""

import os
from pathlib import Path

import click

from f1rag.client.loaders import load_documents_from_directory
from f1rag.models import SearchResult
from f1rag.service.database import (
    RavenDBConfig,
    count_documents,
    create_database,
    create_document_store,
    database_exists,
)
from f1rag.service.factory import create_pipeline
from f1rag.service.rag import RAGPipeline


def uses_ravendb() -> bool:
    return os.getenv("VECTOR_BACKEND", "memory") == "ravendb"


def ensure_database_exists(
    create_if_missing: bool = False,
    directory: str | None = None,
) -> bool:
    """Check if database exists, optionally create it.

    Only meaningful for the RavenDB backend; the in-memory index always exists.

    Args:
        create_if_missing: If True, attempt to create the database
        directory: Directory path for error message context

    Returns:
        True if database exists (or was created)

    Raises:
        click.Abort: If database doesn't exist and can't be created
    """
    if not uses_ravendb() or database_exists():
        return True

    if create_if_missing:
        click.echo("Database does not exist. Creating database...")
        try:
            create_database()
            click.echo("✓ Database created successfully!")
            return True
        except Exception as e:
            click.echo(f"✗ Failed to create database: {e}", err=True)
            click.echo("\nPlease ensure RavenDB is running and accessible.", err=True)
            raise click.Abort()

    click.echo("✗ Error: Database does not exist!", err=True)
    click.echo("\nPlease create the database first using:", err=True)
    click.echo(f"  f1rag-ingest {directory or '<directory>'} --create-database", err=True)
    raise click.Abort()


def build_pipeline(corpus: Path | None = None) -> RAGPipeline:
    """Build the pipeline and, when its index is empty, load a corpus into it.

    The in-memory index starts empty in every process, so one-shot commands
    pass ``--corpus`` (or set CORPUS_DIR) to have something to search.
    """
    pipeline = create_pipeline()
    corpus = corpus or (Path(os.environ["CORPUS_DIR"]) if os.getenv("CORPUS_DIR") else None)

    if corpus is not None and pipeline.needs_ingestion():
        documents = load_documents_from_directory(corpus)
        if documents:
            result = pipeline.ingest(documents)
            click.echo(f"📚 Loaded {result.documents_stored} chunk(s) from {corpus}\n")
    return pipeline


def format_search_result(index: int, result: SearchResult, max_length: int = 200) -> str:
    """Format a search result for display.

    Args:
        index: Result number (1-based)
        result: Search result with score and chunk metadata
        max_length: Maximum content length before truncation

    Returns:
        Formatted string for display
    """
    content = result.content
    display_content = (
        content[:max_length] + "..." if len(content) > max_length else content
    )
    source = result.metadata.get("source", "unknown")
    chunk_idx = result.metadata.get("chunk_index", 0)

    lines = [
        f"{index}. {result.title} [{source} - chunk #{chunk_idx}] (score: {result.score:.4f})",
        f"   {display_content}",
        "",
    ]
    return "\n".join(lines)


def get_database_info() -> tuple[str, str, int | None]:
    """Get database connection info and document count.

    Returns:
        Tuple of (url, database_name, document_count or None if error)
    """
    settings = RavenDBConfig.from_env()
    url, db_name = settings.url, settings.database

    doc_count = None
    try:
        store = create_document_store(url, db_name)
        try:
            doc_count = count_documents(store, settings.collection)
        finally:
            store.close()
    except Exception as e:
        click.echo(f"⚠️ Could not count documents: {e}", err=True)

    return url, db_name, doc_count
