"""Tests for batch ingestion."""

import json
from unittest.mock import MagicMock

import pytest

from f1rag.errors import InvalidInputError
from f1rag.service.embedder import MockEmbedder
from f1rag.service.ingestion import IngestionService, MetadataFileReporter, summarize_chunks
from f1rag.service.vector_index import InMemoryVectorIndex


class FailingEmbedder(MockEmbedder):
    """Mock embedder that fails for texts containing a marker word."""

    def __init__(self, marker: str, dimension: int = 64) -> None:
        super().__init__(dimension)
        self.marker = marker

    def embed(self, text: str) -> list[float]:
        if self.marker in text:
            raise ConnectionError("Embedding backend unreachable")
        return super().embed(text)


class TestIngestionService:
    """Tests for IngestionService."""

    def test_ingest_stores_every_chunk(self, embedder, vector_index, f1_documents):
        """Test the happy path: all chunks embedded and stored."""
        service = IngestionService(embedder, vector_index, max_workers=2)

        result = service.ingest(f1_documents)

        assert result.documents_processed == 3
        assert result.documents_stored == 3
        assert result.chunks_failed == 0
        assert result.success is True
        assert vector_index.stats().total_documents == 3

    def test_empty_document_list_is_rejected(self, embedder, vector_index):
        """Test that ingesting nothing is an input error."""
        with pytest.raises(InvalidInputError):
            IngestionService(embedder, vector_index).ingest([])

    def test_failed_chunks_are_counted_and_skipped(self, vector_index, f1_documents):
        """Test that one failing chunk does not abort the batch."""
        service = IngestionService(FailingEmbedder("Monaco"), vector_index)

        result = service.ingest(f1_documents)

        assert result.documents_processed == 3
        assert result.documents_stored == 2
        assert result.chunks_failed == 1
        titles = {r.title for r in vector_index.search(MockEmbedder(64).embed("x"), k=10)}
        assert "Circuit de Monaco" not in titles

    def test_all_chunks_failing_skips_upsert(self, f1_documents):
        """Test that the index is not called when nothing was embedded."""
        mock_index = MagicMock()
        service = IngestionService(FailingEmbedder(" "), mock_index)

        result = service.ingest(f1_documents)

        assert result.documents_stored == 0
        assert result.chunks_failed == 3
        assert result.success is False
        mock_index.upsert.assert_not_called()

    def test_reingestion_overwrites_by_chunk_id(self, embedder, vector_index, f1_documents):
        """Test that ingesting the same documents twice does not duplicate entries."""
        service = IngestionService(embedder, vector_index)
        service.ingest(f1_documents)
        service.ingest(f1_documents)

        assert vector_index.stats().total_documents == 3

    def test_embedded_chunks_keep_input_order(self, embedder, vector_index, create_test_document):
        """Test that parallel embedding preserves per-document chunk order."""
        document = create_test_document(content=" ".join(f"Lap {i} was fast." for i in range(40)))
        service = IngestionService(embedder, vector_index, max_chunk_length=40, max_workers=8)

        chunks = service.chunk_documents([document])
        embedded, failed = service.embed_chunks(chunks)

        assert failed == 0
        assert [item.chunk.chunk_index for item in embedded] == list(range(len(chunks)))
        assert embedded[3].embedding == embedder.embed(chunks[3].content)

    def test_entries_carry_chunk_metadata(self, embedder, f1_documents):
        """Test that stored entries are keyed by chunk id with metadata."""
        mock_index = MagicMock()
        mock_index.upsert.return_value = 3
        service = IngestionService(embedder, mock_index)

        service.ingest(f1_documents)

        entries = mock_index.upsert.call_args[0][0]
        assert entries[0].entry_id == "team_Mercedes_F1_Team_0"
        assert entries[0].metadata["title"] == "Mercedes F1 Team"
        assert entries[0].metadata["type"] == "team"
        assert entries[0].metadata["chunk_index"] == 0


class TestMetadataReporting:
    """Tests for the post-ingestion metadata summary."""

    def test_metadata_file_is_written(self, embedder, vector_index, f1_documents, tmp_path):
        """Test that the summary lists counts, types and sources."""
        path = tmp_path / "data" / "metadata.json"
        service = IngestionService(embedder, vector_index, reporter=MetadataFileReporter(path))

        service.ingest(f1_documents)

        metadata = json.loads(path.read_text())
        assert metadata["total_documents"] == 3
        assert metadata["types"] == ["team", "driver", "circuit"]
        assert metadata["sources"] == ["f1_teams", "f1_drivers", "f1_circuits"]
        assert "timestamp" in metadata

    def test_reporter_failure_does_not_fail_ingestion(self, embedder, vector_index, f1_documents):
        """Test that a broken reporter is logged and ignored."""
        reporter = MagicMock()
        reporter.report.side_effect = OSError("disk full")
        service = IngestionService(embedder, vector_index, reporter=reporter)

        result = service.ingest(f1_documents)

        assert result.documents_stored == 3
        reporter.report.assert_called_once()


def test_summarize_chunks_deduplicates_in_first_seen_order(embedder, vector_index, f1_documents):
    """Test the summary builder."""
    service = IngestionService(embedder, vector_index)
    chunks = service.chunk_documents(f1_documents + f1_documents[:1])

    summary = summarize_chunks(chunks)

    assert summary.total_documents == 4
    assert summary.types == ["team", "driver", "circuit"]
