"""RAG pipeline orchestrating one query-response cycle.

Per query: resolve conversation id -> embed query -> retrieve top-K ->
assemble context -> generate -> record turn -> respond. Failures in the
embed..generate steps abort the request with a RagProcessingError; recording
the turn is best effort and never fails a request that already has an answer.
"""

import logging
import threading
import uuid

from f1rag.constants import (
    AVAILABLE_TOPICS,
    CONTENT_PREVIEW_LENGTH,
    DEFAULT_TOP_K,
    NO_CONTEXT_SENTINEL,
)
from f1rag.errors import (
    EmbeddingError,
    InvalidInputError,
    QueryCancelledError,
    RagProcessingError,
)
from f1rag.models import (
    CollectionStats,
    ContextMetrics,
    ConversationSummary,
    ConversationTurn,
    Document,
    IngestionResult,
    QueryResponse,
    SearchResult,
    SourceReference,
    SourceSummary,
)
from f1rag.service.conversation import ConversationStore
from f1rag.service.embedder import Embedder
from f1rag.service.generator import Generator
from f1rag.service.ingestion import IngestionService
from f1rag.service.vector_index import VectorIndex

logger = logging.getLogger(__name__)


def create_context(results: list[SearchResult]) -> str:
    """Join retrieved passages as ``[title]: content`` blocks.

    Args:
        results: Retrieved entries, best first

    Returns:
        str: The context block, or the no-context sentinel when empty
    """
    if not results:
        return NO_CONTEXT_SENTINEL
    return "\n\n".join(f"[{result.title}]: {result.content}" for result in results)


def preview(content: str, max_length: int = CONTENT_PREVIEW_LENGTH) -> str:
    return content[:max_length] + "..." if len(content) > max_length else content


class RAGPipeline:
    """Composes embedder, vector index, generator and conversation store.

    All collaborators are long-lived service objects handed in at
    construction time; see ``f1rag.service.factory`` for the wiring used by
    the applications.
    """

    def __init__(
        self,
        embedder: Embedder,
        vector_index: VectorIndex,
        generator: Generator,
        conversations: ConversationStore | None = None,
        ingestion: IngestionService | None = None,
        top_k: int = DEFAULT_TOP_K,
    ) -> None:
        self.embedder = embedder
        self.vector_index = vector_index
        self.generator = generator
        self.conversations = conversations or ConversationStore()
        self.ingestion = ingestion or IngestionService(embedder, vector_index)
        self.top_k = top_k

    def search(self, query: str, top_k: int | None = None) -> list[SearchResult]:
        """Embed a query and return the nearest index entries."""
        query_vector = self.embedder.embed(query)
        return self.vector_index.search(query_vector, self.top_k if top_k is None else top_k)

    def process_query(
        self,
        message: str,
        conversation_id: str | None = None,
        cancel_event: threading.Event | None = None,
    ) -> QueryResponse:
        """Answer a message within a conversation.

        Args:
            message: The user's question
            conversation_id: Existing conversation id; a new one is minted if omitted
            cancel_event: Optional event; once set, the query stops before its
                turn is recorded

        Returns:
            QueryResponse: answer, conversation id, ranked sources and context metrics

        Raises:
            InvalidInputError: If the message is empty or whitespace-only
            EmbeddingError: If the query cannot be embedded
            RagProcessingError: If retrieval, context assembly or generation fails
            QueryCancelledError: If ``cancel_event`` was set
        """
        if not isinstance(message, str) or not message.strip():
            raise InvalidInputError("Please provide a message to process")

        conversation_id = conversation_id or str(uuid.uuid4())
        logger.info(f"🔄 Processing query: '{message[:100]}'")

        try:
            self._check_cancelled(cancel_event)
            try:
                query_vector = self.embedder.embed(message)
            except Exception as e:
                raise EmbeddingError(f"Query embedding failed: {e}", cause=e) from e
            logger.info("✅ Query embedding generated")

            results = self.vector_index.search(query_vector, self.top_k)
            logger.info(f"✅ Found {len(results)} relevant documents")

            context = create_context(results)
            logger.info(f"📄 Context created with {len(context)} characters")

            self._check_cancelled(cancel_event)
            history = self.conversations.history(conversation_id)
            response = self.generator.generate(message, context, history)
            logger.info("✅ Response generated")
        except (RagProcessingError, QueryCancelledError):
            raise
        except Exception as e:
            logger.error(f"❌ RAG processing error: {e}", exc_info=True)
            raise RagProcessingError(f"RAG processing failed: {e}", cause=e) from e

        self._check_cancelled(cancel_event)
        self._record_turn(conversation_id, message, response, results)

        return QueryResponse(
            response=response,
            conversation_id=conversation_id,
            sources=[
                SourceSummary(title=r.title, content=preview(r.content), score=r.score)
                for r in results
            ],
            context=ContextMetrics(
                documents_found=len(results),
                total_context_length=len(context),
            ),
        )

    @staticmethod
    def _check_cancelled(cancel_event: threading.Event | None) -> None:
        if cancel_event is not None and cancel_event.is_set():
            logger.info("🛑 Query cancelled by caller")
            raise QueryCancelledError("Query cancelled before completion")

    def _record_turn(
        self, conversation_id: str, message: str, response: str, results: list[SearchResult]
    ) -> None:
        turn = ConversationTurn(
            user=message,
            bot=response,
            sources=[SourceReference(title=r.title, score=r.score) for r in results],
        )
        try:
            self.conversations.append(conversation_id, turn)
        except Exception as e:
            logger.error(f"❌ Failed to record turn for conversation {conversation_id}: {e}", exc_info=True)

    def ingest(self, documents: list[Document]) -> IngestionResult:
        return self.ingestion.ingest(documents)

    def get_history(self, conversation_id: str) -> list[ConversationTurn]:
        return self.conversations.history(conversation_id)

    def get_conversation_summary(self, conversation_id: str) -> ConversationSummary:
        return self.conversations.summarize(conversation_id)

    def get_collection_stats(self) -> CollectionStats:
        """Index stats; degrades to zero values instead of raising."""
        try:
            return self.vector_index.stats()
        except Exception as e:
            logger.error(f"❌ Failed to get collection stats: {e}")
            return CollectionStats(
                total_documents=0, dimension=self.vector_index.dimension, available=False
            )

    def needs_ingestion(self) -> bool:
        return self.get_collection_stats().total_documents == 0

    @staticmethod
    def get_topics() -> list[dict]:
        return [dict(topic) for topic in AVAILABLE_TOPICS]
