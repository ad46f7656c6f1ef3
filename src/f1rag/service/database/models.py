"""Data models for RavenDB document storage."""

from dataclasses import dataclass, field
from typing import Any


@dataclass(eq=False)
class IndexedChunk:
    """An index entry as stored in RavenDB.

    Note: eq=False ensures each instance is unique and hashable by identity,
    which is required for RavenDB's session entity tracking.

    Attributes:
        Id: RavenDB document ID (the index entry id)
        title: Title of the source document
        content: The chunk text
        type: Domain category tag
        source: Source tag
        embedding: L2-normalized embedding vector
        metadata: Full metadata bag returned with search hits
    """

    Id: str | None = None
    title: str = ""
    content: str = ""
    type: str = ""
    source: str = ""
    embedding: list[float] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)

    def __hash__(self) -> int:
        """Hash by object identity for RavenDB session tracking."""
        return id(self)
