"""Sentence-boundary chunking for documents."""

import logging
import re

from f1rag.constants import DEFAULT_CHUNK_MAX_LENGTH
from f1rag.errors import InvalidInputError
from f1rag.models import Chunk, Document, normalize_title

logger = logging.getLogger(__name__)

SENTENCE_TERMINATORS = re.compile(r"[.!?]+")
SENTENCE_SEPARATOR = ". "


def chunk_text(text: str, max_length: int = DEFAULT_CHUNK_MAX_LENGTH) -> list[str]:
    """Split text into chunks of whole sentences.

    Sentences are split on ``.``, ``!`` and ``?``, trimmed, and packed greedily
    into a buffer joined by ``". "``. A buffer is closed with a trailing ``.``
    once the next sentence would push it past ``max_length``; the period is
    left off when a lone sentence fills ``max_length`` exactly. A single
    sentence longer than ``max_length`` becomes its own chunk, unsplit.

    Args:
        text: The text to chunk
        max_length: Maximum chunk length in characters (default: 500)

    Returns:
        list[str]: Chunks in document order. Text without any sentence
        terminator comes back as one chunk equal to the trimmed input; blank
        text yields an empty list.
    """
    if max_length <= 0:
        raise InvalidInputError("max_length must be positive")

    if not text or not text.strip():
        return []

    if not SENTENCE_TERMINATORS.search(text):
        return [text.strip()]

    sentences = [s.strip() for s in SENTENCE_TERMINATORS.split(text) if s.strip()]
    if not sentences:
        return [text.strip()]

    chunks = []
    current_chunk = ""

    for sentence in sentences:
        candidate = current_chunk + SENTENCE_SEPARATOR + sentence if current_chunk else sentence
        # +1 for the closing period
        if len(candidate) + 1 <= max_length:
            current_chunk = candidate
            continue

        if current_chunk:
            chunks.append(_close_chunk(current_chunk, max_length))
        current_chunk = sentence

    if current_chunk:
        chunks.append(_close_chunk(current_chunk, max_length))

    return chunks


def _close_chunk(buffer: str, max_length: int) -> str:
    # Packed buffers always leave room for the period; only a lone sentence
    # can land exactly on the bound.
    if len(buffer) == max_length:
        return buffer
    return buffer + "."


def make_chunk_id(doc_type: str, title: str, chunk_index: int) -> str:
    """Build the chunk identifier ``{type}_{normalized title}_{index}``."""
    return f"{doc_type}_{normalize_title(title)}_{chunk_index}"


def chunk_document(
    document: Document, max_length: int = DEFAULT_CHUNK_MAX_LENGTH
) -> list[Chunk]:
    """Chunk a document into Chunk records carrying positional metadata.

    Args:
        document: The document to split
        max_length: Maximum chunk length in characters

    Returns:
        list[Chunk]: Chunks with ``chunk_index`` 0..n-1 and ``total_chunks`` n
    """
    pieces = chunk_text(document.content, max_length)
    if not pieces:
        logger.warning(f"⚠️ Document '{document.title}' has no content to chunk")
        return []

    return [
        Chunk(
            chunk_id=make_chunk_id(document.type, document.title, index),
            doc_id=document.doc_id,
            title=document.title,
            content=piece,
            type=document.type,
            source=document.source,
            chunk_index=index,
            total_chunks=len(pieces),
        )
        for index, piece in enumerate(pieces)
    ]
