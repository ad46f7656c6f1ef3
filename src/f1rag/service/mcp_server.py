"""FastMCP server exposing the RAG pipeline as tools."""

import asyncio
import logging
import os
from typing import Any

from dotenv import load_dotenv
from fastmcp import FastMCP

from f1rag.constants import DEFAULT_TOP_K
from f1rag.errors import InvalidInputError
from f1rag.service.factory import create_pipeline
from f1rag.service.rag import RAGPipeline

logger = logging.getLogger(__name__)

# Load environment variables
load_dotenv()

# Create FastMCP instance
mcp = FastMCP("F1 RAG Knowledge Base")

_pipeline: RAGPipeline | None = None


def set_pipeline(pipeline: RAGPipeline | None) -> None:
    """Install the pipeline the tools operate on."""
    global _pipeline
    _pipeline = pipeline


def get_pipeline() -> RAGPipeline:
    """Return the installed pipeline, building one from the environment if needed."""
    global _pipeline
    if _pipeline is None:
        _pipeline = create_pipeline()
    return _pipeline


async def ask_question_impl(message: str, conversation_id: str | None = None) -> dict[str, Any]:
    try:
        result = await asyncio.to_thread(get_pipeline().process_query, message, conversation_id)
        return result.to_dict()
    except InvalidInputError:
        raise
    except Exception as e:
        error_msg = f"Unexpected error: {type(e).__name__}: {e}"
        logger.error(f"❌ MCP Tool: {error_msg}", exc_info=True)
        raise ValueError(error_msg) from e


async def retrieve_document_chunks_impl(query: str, top_k: int = DEFAULT_TOP_K) -> list[dict[str, Any]]:
    logger.debug(f"MCP Tool: Parameters - query='{query[:100]}...', top_k={top_k}")
    try:
        results = await asyncio.to_thread(get_pipeline().search, query, top_k)
        logger.info(f"✅ MCP Tool: Returning {len(results)} results to MCP client")
        return [
            {
                "title": result.title,
                "content": result.content,
                "score": result.score,
                "metadata": result.metadata,
            }
            for result in results
        ]
    except InvalidInputError:
        raise
    except Exception as e:
        error_msg = f"Unexpected error: {type(e).__name__}: {e}"
        logger.error(f"❌ MCP Tool: {error_msg}", exc_info=True)
        raise ValueError(error_msg) from e


async def collection_stats_impl() -> dict[str, Any]:
    stats = await asyncio.to_thread(get_pipeline().get_collection_stats)
    return stats.to_dict()


async def conversation_history_impl(conversation_id: str) -> list[dict[str, Any]]:
    return [turn.to_dict() for turn in get_pipeline().get_history(conversation_id)]


@mcp.tool()
async def ask_question(message: str, conversation_id: str | None = None) -> dict[str, Any]:
    """
    Answers a Formula 1 question using the knowledge base. Retrieves relevant
    passages, generates an answer and records the exchange in the conversation.

    Args:
        message: The user's question
        conversation_id: Optional id of an ongoing conversation
    """
    return await ask_question_impl(message, conversation_id)


@mcp.tool()
async def retrieve_document_chunks(query: str, top_k: int = DEFAULT_TOP_K) -> list[dict[str, Any]]:
    """
    Searches the F1 knowledge base for passages semantically similar to the
    query. Returns the top_k most relevant passages with their scores.

    Args:
        query: The search query text
        top_k: Number of top results to return (default: 5)
    """
    return await retrieve_document_chunks_impl(query, top_k)


@mcp.tool()
async def collection_stats() -> dict[str, Any]:
    """
    Reports how many passages the knowledge base holds and the vector
    dimension. Returns zero counts instead of failing when the store is down.
    """
    return await collection_stats_impl()


@mcp.tool()
async def conversation_history(conversation_id: str) -> list[dict[str, Any]]:
    """
    Returns the recorded turns of a conversation, oldest first.

    Args:
        conversation_id: The conversation id returned by ask_question
    """
    return await conversation_history_impl(conversation_id)


def main() -> None:
    """Entry point for the MCP server command-line interface."""
    log_level = os.getenv("LOG_LEVEL", "INFO")
    logging.basicConfig(
        level=getattr(logging, log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    logger.info("🚀 Starting F1 RAG MCP Server...")
    set_pipeline(create_pipeline())
    host = os.getenv("MCP_HOST", "0.0.0.0")
    port = int(os.getenv("MCP_PORT", "8001"))
    mcp.run(transport="sse", host=host, port=port)


if __name__ == "__main__":
    main()
