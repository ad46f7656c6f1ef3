"""Google Gemini LLM service implementation."""

import logging

from google import genai

from f1rag.constants import DEFAULT_REQUEST_TIMEOUT, get_embedding_model
from f1rag.errors import BackendUnavailableError

logger = logging.getLogger(__name__)


class GeminiService:
    """Google Gemini LLM service implementation.

    The API key is automatically retrieved from the GEMINI_API_KEY environment variable.
    """

    def __init__(self, model: str, timeout: float = DEFAULT_REQUEST_TIMEOUT) -> None:
        self.model = model
        logger.info(f"🤖 Initializing GeminiService: model={model}")
        # HttpOptions.timeout is expressed in milliseconds
        self.client = genai.Client(
            http_options=genai.types.HttpOptions(timeout=int(timeout * 1000))
        )

    async def generate_response(self, messages: list[dict]) -> str:
        """Generate a response using Gemini.

        Gemini takes a flat prompt here, so message contents are joined by
        newlines with the system prompt and context first.
        """
        logger.info(f"🗣️  Generating response with {self.model}")
        contents = "\n".join(msg.get("content", "") for msg in messages)

        try:
            response = self.client.models.generate_content(model=self.model, contents=contents)
        except Exception as e:
            logger.error(f"❌ Gemini API error: {e}")
            raise BackendUnavailableError(f"Gemini request failed: {e}") from e

        content = response.text or ""
        logger.info(f"✅ Response generated: {len(content)} characters")
        return content

    def generate_embeddings(self, texts: list[str], model: str | None = None) -> list[list[float]]:
        """Embed all texts in a single request.

        Args:
            texts: List of text strings to embed
            model: Embedding model; defaults to EMBEDDING_MODEL or text-embedding-004

        Returns:
            list[list[float]]: One vector per input text, in order
        """
        embedding_model = model or get_embedding_model("gemini")
        try:
            response = self.client.models.embed_content(model=embedding_model, contents=texts)
        except Exception as e:
            logger.error(f"❌ Gemini embedding error: {e}")
            raise BackendUnavailableError(f"Gemini embedding request failed: {e}") from e

        embeddings = [list(embedding.values) for embedding in response.embeddings]
        logger.debug(f"Generated {len(embeddings)} embeddings with {embedding_model}")
        return embeddings
