"""Batch ingestion: chunk documents, embed chunks in parallel, upsert vectors.

Ingestion is best effort per chunk. A chunk whose embedding fails is logged,
counted and left out of the stored set; the rest of the batch continues.
"""

import json
import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Protocol

from f1rag.chunking import chunk_document
from f1rag.constants import DEFAULT_CHUNK_MAX_LENGTH, DEFAULT_INGEST_WORKERS
from f1rag.errors import InvalidInputError
from f1rag.models import (
    Chunk,
    Document,
    EmbeddedChunk,
    IndexEntry,
    IngestionResult,
    IngestionSummary,
)
from f1rag.service.embedder import Embedder
from f1rag.service.vector_index import VectorIndex

logger = logging.getLogger(__name__)


class IngestionReporter(Protocol):
    """Sink for the metadata summary produced after each ingestion."""

    def report(self, summary: IngestionSummary) -> None:
        ...


class MetadataFileReporter:
    """Writes the ingestion summary as JSON for external tooling."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    def report(self, summary: IngestionSummary) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(summary.to_dict(), indent=2))
        logger.info(f"📝 Wrote ingestion metadata to {self.path}")


def summarize_chunks(chunks: list[Chunk]) -> IngestionSummary:
    """Build the metadata summary: chunk count plus distinct types and sources."""
    return IngestionSummary(
        total_documents=len(chunks),
        types=list(dict.fromkeys(chunk.type for chunk in chunks)),
        sources=list(dict.fromkeys(chunk.source for chunk in chunks)),
    )


class IngestionService:
    """Runs the chunk -> embed -> upsert path for a batch of documents."""

    def __init__(
        self,
        embedder: Embedder,
        vector_index: VectorIndex,
        max_chunk_length: int = DEFAULT_CHUNK_MAX_LENGTH,
        max_workers: int = DEFAULT_INGEST_WORKERS,
        reporter: IngestionReporter | None = None,
    ) -> None:
        self.embedder = embedder
        self.vector_index = vector_index
        self.max_chunk_length = max_chunk_length
        self.max_workers = max_workers
        self.reporter = reporter

    def chunk_documents(self, documents: list[Document]) -> list[Chunk]:
        chunks = []
        for document in documents:
            chunks.extend(chunk_document(document, self.max_chunk_length))
        return chunks

    def embed_chunks(self, chunks: list[Chunk]) -> tuple[list[EmbeddedChunk], int]:
        """Embed chunks concurrently.

        Results are collected in submission order, so per-document chunk
        order is preserved whatever order the workers finish in.

        Returns:
            Tuple of (embedded chunks in input order, number of failed chunks)
        """
        embedded: list[EmbeddedChunk] = []
        failed = 0

        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            futures = [(chunk, executor.submit(self.embedder.embed, chunk.content)) for chunk in chunks]
            for chunk, future in futures:
                try:
                    embedded.append(EmbeddedChunk(chunk=chunk, embedding=future.result()))
                except Exception as e:
                    failed += 1
                    logger.error(f"❌ Failed to generate embedding for chunk {chunk.chunk_id}: {e}")

        return embedded, failed

    def ingest(self, documents: list[Document]) -> IngestionResult:
        """Ingest documents into the vector index.

        Args:
            documents: Documents to chunk, embed and store

        Returns:
            IngestionResult: processed / stored / failed chunk counts
        """
        if not documents:
            raise InvalidInputError("Invalid documents: at least one document is required")

        logger.info(f"🚀 Ingesting {len(documents)} documents...")
        chunks = self.chunk_documents(documents)
        logger.info(f"🔧 Processed {len(chunks)} chunks")

        embedded, failed = self.embed_chunks(chunks)
        logger.info(f"🧠 Generated embeddings for {len(embedded)} chunks ({failed} failed)")

        stored = 0
        if embedded:
            # Chunk ids as entry ids make re-ingestion overwrite instead of duplicate
            entries = [
                IndexEntry(
                    vector=item.embedding,
                    metadata=item.chunk.metadata(),
                    entry_id=item.chunk.chunk_id,
                )
                for item in embedded
            ]
            stored = self.vector_index.upsert(entries)
            logger.info(f"💾 Stored {stored} chunks in the vector index")

        self._report(chunks)
        return IngestionResult(
            documents_processed=len(chunks),
            documents_stored=stored,
            chunks_failed=failed,
        )

    def _report(self, chunks: list[Chunk]) -> None:
        if self.reporter is None:
            return
        try:
            self.reporter.report(summarize_chunks(chunks))
        except Exception as e:
            logger.warning(f"⚠️ Failed to report ingestion metadata: {e}")
