"""Ollama LLM service implementation."""

import logging

import ollama

from f1rag.constants import DEFAULT_REQUEST_TIMEOUT, get_embedding_model
from f1rag.errors import BackendUnavailableError

logger = logging.getLogger(__name__)


class OllamaService:
    """Ollama LLM service implementation.

    Talks to a local Ollama server for chat completions and embeddings.
    Transport and API failures surface as BackendUnavailableError so the
    embedding and generation strategies can fall back.
    """

    def __init__(self, host: str, model: str, timeout: float = DEFAULT_REQUEST_TIMEOUT) -> None:
        """Initialize the Ollama service.

        Args:
            host: The Ollama server host URL (e.g., "http://localhost:11434")
            model: The chat model name to use (e.g., "llama3")
            timeout: Per-request timeout in seconds
        """
        self.host = host
        self.model = model
        logger.info(f"🤖 Initializing OllamaService: host={host}, model={model}")
        self.client = ollama.Client(host=host, timeout=timeout)

    async def generate_response(self, messages: list[dict]) -> str:
        """Generate a chat completion for the given messages.

        Returns:
            str: The reply content, or "" when the model sent none
        """
        logger.info(f"🗣️  Generating response with {self.model}")
        logger.debug(f"Messages: {len(messages)} messages")

        try:
            response = self.client.chat(model=self.model, messages=messages)
        except Exception as e:
            logger.error(f"❌ Ollama API error: {e}")
            raise BackendUnavailableError(f"Ollama chat request failed: {e}") from e

        content = response.message.content or ""
        logger.info(f"✅ Response generated: {len(content)} characters")
        return content

    def generate_embeddings(self, texts: list[str], model: str | None = None) -> list[list[float]]:
        """Embed all texts in a single request.

        Args:
            texts: List of text strings to embed
            model: Embedding model; defaults to EMBEDDING_MODEL or nomic-embed-text

        Returns:
            list[list[float]]: One vector per input text, in order
        """
        embedding_model = model or get_embedding_model("ollama")
        try:
            response = self.client.embed(model=embedding_model, input=texts)
        except Exception as e:
            logger.error(f"❌ Ollama embedding error: {e}")
            raise BackendUnavailableError(f"Ollama embedding request failed: {e}") from e

        embeddings = [list(vector) for vector in response["embeddings"]]
        logger.debug(f"Generated {len(embeddings)} embeddings with {embedding_model}")
        return embeddings
