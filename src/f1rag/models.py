"""Data models flowing through the RAG pipeline.

- Document / Chunk / EmbeddedChunk: the ingestion path
- IndexEntry / SearchResult / CollectionStats: the vector index
- ConversationTurn / ConversationSummary: conversation state
- QueryResponse / IngestionResult / IngestionSummary: pipeline results
"""

import re
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any


def normalize_title(title: str) -> str:
    """Replace whitespace runs in a title with underscores."""
    return re.sub(r"\s+", "_", title.strip())


def utc_timestamp() -> str:
    """Current UTC time as an ISO 8601 string."""
    return datetime.now(timezone.utc).isoformat()


@dataclass(frozen=True)
class Document:
    """A named, typed unit of source text. Immutable once created.

    Attributes:
        title: Human-readable title (e.g. "Mercedes F1 Team")
        content: Raw text content
        type: Domain category tag (e.g. "team", "driver", "circuit")
        source: Where the text came from (e.g. "f1_teams", a filename)
        doc_id: Stable identifier, derived from type and title when omitted
    """

    title: str
    content: str
    type: str = "general"
    source: str = "unknown"
    doc_id: str = ""

    def __post_init__(self) -> None:
        if not self.doc_id:
            object.__setattr__(self, "doc_id", f"{self.type}_{normalize_title(self.title)}")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Document":
        return cls(
            title=data["title"],
            content=data["content"],
            type=data.get("type", "general"),
            source=data.get("source", "unknown"),
            doc_id=data.get("doc_id", data.get("id", "")),
        )


@dataclass(frozen=True)
class Chunk:
    """A bounded-length slice of a document with positional metadata."""

    chunk_id: str
    doc_id: str
    title: str
    content: str
    type: str
    source: str
    chunk_index: int
    total_chunks: int

    def metadata(self) -> dict[str, Any]:
        """Metadata bag persisted alongside the chunk's vector."""
        return {
            "doc_id": self.doc_id,
            "title": self.title,
            "content": self.content,
            "type": self.type,
            "source": self.source,
            "chunk_index": self.chunk_index,
            "total_chunks": self.total_chunks,
        }


@dataclass(frozen=True)
class EmbeddedChunk:
    """A chunk paired with its embedding vector."""

    chunk: Chunk
    embedding: list[float]


@dataclass
class IndexEntry:
    """What the vector index stores: id, vector and metadata.

    ``entry_id`` may be None on input, in which case the index assigns one.
    """

    vector: list[float]
    metadata: dict[str, Any] = field(default_factory=dict)
    entry_id: str | None = None


@dataclass
class SearchResult:
    """One nearest-neighbour hit, scored by cosine similarity in [-1, 1]."""

    id: str
    score: float
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def title(self) -> str:
        return self.metadata.get("title") or "F1 Document"

    @property
    def content(self) -> str:
        return self.metadata.get("content") or self.metadata.get("text") or ""

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "score": self.score, "metadata": dict(self.metadata)}


@dataclass
class CollectionStats:
    """Read-only index accounting. ``available`` is False when degraded."""

    total_documents: int = 0
    dimension: int = 0
    available: bool = True

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class SourceReference:
    """A (title, score) pair recorded with a conversation turn."""

    title: str
    score: float


@dataclass
class ConversationTurn:
    """One user/bot exchange and the sources behind the answer."""

    user: str
    bot: str
    sources: list[SourceReference] = field(default_factory=list)
    timestamp: str = field(default_factory=utc_timestamp)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class ConversationSummary:
    turn_count: int = 0
    topics: list[str] = field(default_factory=list)
    last_message: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class SourceSummary:
    """A ranked source as shown to the caller, with a truncated preview."""

    title: str
    content: str
    score: float


@dataclass
class ContextMetrics:
    documents_found: int
    total_context_length: int


@dataclass
class QueryResponse:
    """Result of one query-response cycle."""

    response: str
    conversation_id: str
    sources: list[SourceSummary] = field(default_factory=list)
    context: ContextMetrics = field(default_factory=lambda: ContextMetrics(0, 0))

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class IngestionSummary:
    """Metadata summary written after a full ingestion."""

    total_documents: int
    types: list[str]
    sources: list[str]
    timestamp: str = field(default_factory=utc_timestamp)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class IngestionResult:
    """Counts for one ingestion batch.

    Attributes:
        documents_processed: Chunks produced from the input documents
        documents_stored: Chunks embedded and upserted into the index
        chunks_failed: Chunks skipped because their embedding failed
    """

    documents_processed: int = 0
    documents_stored: int = 0
    chunks_failed: int = 0

    @property
    def success(self) -> bool:
        return self.documents_stored > 0 or self.documents_processed == 0

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["success"] = self.success
        return data
