"""Tests for the RAG pipeline."""

import threading
from unittest.mock import MagicMock

import pytest

from f1rag.constants import NO_CONTEXT_SENTINEL
from f1rag.errors import (
    BackendUnavailableError,
    EmbeddingError,
    InvalidInputError,
    QueryCancelledError,
    RagProcessingError,
)
from f1rag.models import CollectionStats, Document, SearchResult
from f1rag.service.generator import DEFAULT_RESPONSE, RuleBasedGenerator
from f1rag.service.rag import RAGPipeline, create_context, preview


class TestProcessQuery:
    """Tests for the query-response cycle."""

    def test_mercedes_end_to_end(self, pipeline, mercedes_document):
        """Test ingesting a document then asking about it."""
        pipeline.ingest([mercedes_document])

        result = pipeline.process_query("Tell me about Mercedes")

        assert "Mercedes-AMG Petronas" in result.response
        assert result.conversation_id
        assert len(result.sources) == 1
        assert result.sources[0].title == "Mercedes F1 Team"
        assert result.context.documents_found == 1
        expected_context = f"[Mercedes F1 Team]: {mercedes_document.content.strip()}"
        assert result.context.total_context_length == len(expected_context)

        history = pipeline.get_history(result.conversation_id)
        assert len(history) == 1
        assert history[0].user == "Tell me about Mercedes"
        assert history[0].bot == result.response
        assert history[0].sources[0].title == "Mercedes F1 Team"

    def test_empty_index_answers_without_sources(self, pipeline):
        """Test that an empty index still yields a rule-based answer."""
        result = pipeline.process_query("hello there")

        assert result.response == DEFAULT_RESPONSE
        assert result.sources == []
        assert result.context.documents_found == 0
        assert result.context.total_context_length == len(NO_CONTEXT_SENTINEL)

    def test_sources_are_ordered_by_score(self, pipeline, f1_documents):
        """Test that sources come back best first."""
        pipeline.ingest(f1_documents)

        result = pipeline.process_query("Who is Max Verstappen?")

        scores = [source.score for source in result.sources]
        assert scores == sorted(scores, reverse=True)
        assert len(result.sources) == 3

    def test_conversation_id_is_reused(self, pipeline):
        """Test that passing an id appends to the same conversation."""
        first = pipeline.process_query("Tell me about Ferrari", "race-weekend")
        second = pipeline.process_query("And McLaren?", first.conversation_id)

        assert first.conversation_id == second.conversation_id == "race-weekend"
        assert len(pipeline.get_history("race-weekend")) == 2

    def test_history_is_bounded(self, pipeline):
        """Test that 25 queries leave the newest 20 turns."""
        for i in range(25):
            pipeline.process_query(f"Question {i} about Monaco", "long-chat")

        history = pipeline.get_history("long-chat")
        assert len(history) == 20
        assert history[0].user == "Question 5 about Monaco"

    def test_history_is_passed_to_generator(self, embedder, vector_index):
        """Test that the generator sees prior turns of the conversation."""
        generator = MagicMock()
        generator.generate.return_value = "Answer."
        pipeline = RAGPipeline(embedder, vector_index, generator)

        pipeline.process_query("First question", "c1")
        pipeline.process_query("Second question", "c1")

        history = generator.generate.call_args[0][2]
        assert [turn.user for turn in history] == ["First question"]

    def test_long_content_is_previewed(self, pipeline):
        """Test that source content is truncated to a preview."""
        pipeline.ingest([Document(title="Long", content="a" * 300)])

        result = pipeline.process_query("anything")

        assert result.sources[0].content == "a" * 200 + "..."

    @pytest.mark.parametrize("message", ["", "   ", None])
    def test_invalid_message_is_rejected(self, pipeline, message):
        """Test that blank messages raise and record nothing."""
        with pytest.raises(InvalidInputError):
            pipeline.process_query(message, "c1")
        assert pipeline.get_history("c1") == []

    def test_embedding_failure_raises_embedding_error(self, vector_index):
        """Test that a query that cannot be embedded aborts the request."""
        embedder = MagicMock()
        embedder.embed.side_effect = RuntimeError("no embedding")
        pipeline = RAGPipeline(embedder, vector_index, RuleBasedGenerator())

        with pytest.raises(EmbeddingError) as exc_info:
            pipeline.process_query("Tell me about Mercedes", "c1")

        assert isinstance(exc_info.value, RagProcessingError)
        assert isinstance(exc_info.value.cause, RuntimeError)
        assert pipeline.get_history("c1") == []

    def test_search_failure_raises_processing_error(self, embedder):
        """Test that a vector store failure is wrapped with its cause."""
        vector_index = MagicMock()
        vector_index.search.side_effect = BackendUnavailableError("RavenDB down")
        pipeline = RAGPipeline(embedder, vector_index, RuleBasedGenerator())

        with pytest.raises(RagProcessingError) as exc_info:
            pipeline.process_query("Tell me about Mercedes")

        assert isinstance(exc_info.value.cause, BackendUnavailableError)

    def test_generation_failure_raises_processing_error(self, embedder, vector_index):
        """Test that a generator failure aborts the request."""
        generator = MagicMock()
        generator.generate.side_effect = RuntimeError("generation failed")
        pipeline = RAGPipeline(embedder, vector_index, generator)

        with pytest.raises(RagProcessingError, match="generation failed"):
            pipeline.process_query("Tell me about Mercedes", "c1")
        assert pipeline.get_history("c1") == []

    def test_recording_failure_is_swallowed(self, embedder, vector_index):
        """Test that an answer is returned even if the turn cannot be recorded."""
        conversations = MagicMock()
        conversations.history.return_value = []
        conversations.append.side_effect = RuntimeError("store broken")
        pipeline = RAGPipeline(embedder, vector_index, RuleBasedGenerator(), conversations)

        result = pipeline.process_query("Tell me about Mercedes")

        assert "Mercedes" in result.response
        conversations.append.assert_called_once()

    def test_cancelled_query_records_nothing(self, pipeline):
        """Test that a cancelled query raises and leaves history untouched."""
        cancel_event = threading.Event()
        cancel_event.set()

        with pytest.raises(QueryCancelledError):
            pipeline.process_query("Tell me about Mercedes", "c1", cancel_event=cancel_event)
        assert pipeline.get_history("c1") == []

    def test_unset_cancel_event_completes(self, pipeline):
        """Test that an unset event does not interfere."""
        result = pipeline.process_query("Tell me about Mercedes", "c1", cancel_event=threading.Event())
        assert len(pipeline.get_history(result.conversation_id)) == 1


class TestPipelineQueries:
    """Tests for the pipeline's read-only operations."""

    def test_search_returns_ranked_results(self, pipeline, f1_documents):
        """Test direct search."""
        pipeline.ingest(f1_documents)
        results = pipeline.search("Monaco Grand Prix", top_k=2)
        assert len(results) == 2

    def test_search_with_zero_top_k_returns_nothing(self, pipeline, f1_documents):
        """Test that an explicit top_k of 0 is not replaced by the default."""
        pipeline.ingest(f1_documents)

        assert pipeline.search("Monaco Grand Prix", top_k=0) == []
        assert len(pipeline.search("Monaco Grand Prix")) > 0

    def test_conversation_summary(self, pipeline):
        """Test the summary after a couple of turns."""
        pipeline.process_query("Who is the best driver?", "c1")
        pipeline.process_query("Which team is fastest?", "c1")

        summary = pipeline.get_conversation_summary("c1")

        assert summary.turn_count == 2
        assert "Drivers" in summary.topics
        assert "Teams" in summary.topics
        assert summary.last_message is not None

    def test_collection_stats_and_needs_ingestion(self, pipeline, mercedes_document):
        """Test stats before and after ingestion."""
        assert pipeline.needs_ingestion() is True
        pipeline.ingest([mercedes_document])

        stats = pipeline.get_collection_stats()
        assert stats.total_documents == 1
        assert pipeline.needs_ingestion() is False

    def test_collection_stats_degrade(self, embedder):
        """Test that a failing index reports zero values instead of raising."""
        vector_index = MagicMock()
        vector_index.dimension = 64
        vector_index.stats.side_effect = ConnectionError("down")
        pipeline = RAGPipeline(embedder, vector_index, RuleBasedGenerator())

        assert pipeline.get_collection_stats() == CollectionStats(0, 64, available=False)

    def test_topics_are_copies(self, pipeline):
        """Test that callers cannot mutate the topic catalogue."""
        topics = pipeline.get_topics()
        assert len(topics) == 6
        topics[0]["name"] = "Changed"
        assert pipeline.get_topics()[0]["name"] == "F1 Teams"


class TestContextHelpers:
    """Tests for context assembly helpers."""

    def test_create_context_joins_blocks(self):
        results = [
            SearchResult("a", 0.9, {"title": "Spa", "content": "Eau Rouge."}),
            SearchResult("b", 0.8, {"content": "Untitled passage."}),
        ]
        assert create_context(results) == "[Spa]: Eau Rouge.\n\n[F1 Document]: Untitled passage."

    def test_create_context_without_results(self):
        assert create_context([]) == NO_CONTEXT_SENTINEL

    def test_preview_keeps_short_content(self):
        assert preview("short") == "short"
