"""Command-line interface for f1rag using Click."""

import logging
import os
from pathlib import Path

import click
from dotenv import load_dotenv

from f1rag.client.cli_helpers import (
    build_pipeline,
    ensure_database_exists,
    format_search_result,
    get_database_info,
    uses_ravendb,
)
from f1rag.client.loaders import load_documents_from_directory
from f1rag.errors import BackendUnavailableError, F1RagError, InvalidInputError
from f1rag.service.database import database_exists, delete_database
from f1rag.service.factory import create_pipeline

# Load environment variables
load_dotenv()

# Command output goes through click.echo; log records only show problems by default
logging.basicConfig(
    level=getattr(logging, os.getenv("LOG_LEVEL", "WARNING")),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

CORPUS_OPTION = click.option(
    "--corpus",
    type=click.Path(exists=True, file_okay=False, dir_okay=True, path_type=Path),
    default=None,
    help="Directory to load into an empty index first (default: CORPUS_DIR env)",
)


@click.command()
@click.argument(
    "directory",
    type=click.Path(exists=True, file_okay=False, dir_okay=True, path_type=Path),
)
@click.option(
    "--type",
    "doc_type",
    type=str,
    default=None,
    help="Document type tag (default: the directory name)",
)
@click.option(
    "--create-database",
    "create_database_flag",
    is_flag=True,
    default=False,
    help="Create the RavenDB database if it doesn't exist",
)
def ingest(directory: Path, doc_type: str | None, create_database_flag: bool) -> None:
    """Ingest documents from DIRECTORY into the F1 knowledge base.

    Reads .txt, .md, .pdf and .json files.

    Example:
        f1rag-ingest data/f1/
        f1rag-ingest data/f1/drivers --type driver
        f1rag-ingest data/f1/ --create-database
    """
    ensure_database_exists(create_if_missing=create_database_flag, directory=str(directory))

    documents = load_documents_from_directory(directory, doc_type)
    if not documents:
        click.echo(f"No documents found in '{directory}'")
        return

    click.echo(f"Found {len(documents)} document(s)")
    if not uses_ravendb():
        click.echo("ℹ️ VECTOR_BACKEND=memory: the index only lives for this command")

    try:
        result = create_pipeline().ingest(documents)
    except BackendUnavailableError as e:
        click.echo(f"\n✗ Vector store unavailable: {e}", err=True)
        raise click.Abort()

    click.echo(
        f"✓ Ingestion complete! Stored {result.documents_stored} of "
        f"{result.documents_processed} chunks ({result.chunks_failed} failed)."
    )
    if not result.success:
        raise click.Abort()


@click.command()
def stats() -> None:
    """Show the number of chunks in the knowledge base.

    Example:
        f1rag-stats
    """
    ensure_database_exists()
    collection = create_pipeline().get_collection_stats()
    if not collection.available:
        click.echo("✗ Vector store unavailable", err=True)
        raise click.Abort()

    click.echo(f"📊 Knowledge base contains {collection.total_documents} chunk(s)")
    click.echo(f"   Vector dimension: {collection.dimension}")


@click.command()
@click.argument("query", type=str)
@click.option("--top-k", type=int, default=5, help="Number of results to return (default: 5)")
@CORPUS_OPTION
def search(query: str, top_k: int, corpus: Path | None) -> None:
    """Search for similar passages using vector search.

    QUERY is the text to search for.

    Example:
        f1rag-search "Monaco Grand Prix"
        f1rag-search "Red Bull" --top-k 3 --corpus data/f1/
    """
    ensure_database_exists()
    pipeline = build_pipeline(corpus)

    click.echo(f"🔍 Searching for: '{query}'")
    click.echo(f"   Returning top {top_k} results...\n")

    try:
        results = pipeline.search(query, top_k=top_k)
    except InvalidInputError as e:
        click.echo(f"✗ Error: {e}", err=True)
        raise click.Abort()
    except BackendUnavailableError as e:
        click.echo(f"✗ Connection error: {e}", err=True)
        click.echo("\nPlease ensure the vector store is running.", err=True)
        raise click.Abort()

    if not results:
        click.echo("No results found.")
        return

    click.echo(f"✅ Found {len(results)} result(s):\n")
    for i, result in enumerate(results, 1):
        click.echo(format_search_result(i, result))


@click.command()
@click.argument("question", type=str)
@CORPUS_OPTION
def ask(question: str, corpus: Path | None) -> None:
    """Ask the F1 assistant a question.

    Example:
        f1rag-ask "Who won the 2023 championship?" --corpus data/f1/
    """
    ensure_database_exists()
    pipeline = build_pipeline(corpus)

    try:
        result = pipeline.process_query(question)
    except F1RagError as e:
        click.echo(f"✗ Error: {e}", err=True)
        raise click.Abort()

    click.echo(result.response)
    if result.sources:
        click.echo("\nSources:")
        for source in result.sources:
            click.echo(f"  • {source.title} (score: {source.score:.4f})")


@click.command()
@click.option("--yes", "-y", is_flag=True, default=False, help="Skip confirmation prompt")
def delete_db(yes: bool) -> None:
    """Delete the RavenDB database and all its contents.

    WARNING: This is irreversible and deletes all chunks, embeddings, and indexes.

    Example:
        f1rag-delete-db          # Will prompt for confirmation
        f1rag-delete-db --yes    # Skip confirmation
    """
    url, db_name, doc_count = get_database_info()

    if not database_exists():
        click.echo(f"✓ Database '{db_name}' does not exist at {url}")
        return

    if not yes:
        click.echo(f"⚠️  WARNING: You are about to delete the database '{db_name}'")
        click.echo(f"   Location: {url}\n")

        if doc_count is not None:
            click.echo(f"📊 Current database contains: {doc_count} chunk(s)\n")

        if not click.confirm("Are you sure you want to proceed?", default=False):
            click.echo("Deletion cancelled.")
            return

    click.echo(f"🗑️  Deleting database '{db_name}'...")
    try:
        delete_database()
        click.echo(f"✓ Database '{db_name}' successfully deleted!")
    except Exception as e:
        click.echo(f"✗ Error deleting database: {e}", err=True)
        raise click.Abort()


if __name__ == "__main__":
    ingest()
