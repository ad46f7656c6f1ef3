"""Tests for the LLM backend services."""

import os
from unittest.mock import MagicMock, patch

import pytest

from f1rag.llm import GeminiService, OllamaService, get_llm_service


class TestOllamaService:
    """Tests for OllamaService class."""

    @pytest.mark.asyncio
    async def test_generate_response_success(self):
        """Test successful response generation."""
        service = OllamaService(host="http://test:11434", model="test-model")

        # Mock the client.chat method with ChatResponse-like object
        mock_response = MagicMock()
        mock_response.message.content = "Verstappen won in 2023."
        service.client.chat = MagicMock(return_value=mock_response)

        messages = [{"role": "user", "content": "Who won in 2023?"}]
        response = await service.generate_response(messages)

        assert response == "Verstappen won in 2023."
        service.client.chat.assert_called_once_with(model="test-model", messages=messages)

    @pytest.mark.asyncio
    async def test_generate_response_empty_content(self):
        """Test that a missing message body becomes an empty string."""
        service = OllamaService(host="http://test:11434", model="test-model")
        mock_response = MagicMock()
        mock_response.message.content = None
        service.client.chat = MagicMock(return_value=mock_response)

        assert await service.generate_response([{"role": "user", "content": "Hi"}]) == ""

    @pytest.mark.asyncio
    async def test_generate_response_error_propagates(self):
        """Test that client errors are re-raised for the caller's fallback."""
        service = OllamaService(host="http://test:11434", model="test-model")
        service.client.chat = MagicMock(side_effect=ConnectionError("Ollama down"))

        with pytest.raises(ConnectionError, match="Ollama down"):
            await service.generate_response([{"role": "user", "content": "Hi"}])

    def test_generate_embeddings_multiple_texts(self):
        """Test that all texts are embedded in one request."""
        service = OllamaService(host="http://test:11434", model="test-model")

        service.client.embed = MagicMock(return_value={"embeddings": [[0.1, 0.2], [0.3, 0.4]]})

        embeddings = service.generate_embeddings(["Monaco", "Spa"], "nomic-embed-text")

        assert embeddings == [[0.1, 0.2], [0.3, 0.4]]
        service.client.embed.assert_called_once_with(model="nomic-embed-text", input=["Monaco", "Spa"])

    def test_generate_embeddings_default_model(self):
        """Test that the embedding model falls back to the environment default."""
        service = OllamaService(host="http://test:11434", model="test-model")
        service.client.embed = MagicMock(return_value={"embeddings": [[0.5]]})

        with patch.dict(os.environ, {"EMBEDDING_MODEL": "mxbai-embed-large"}):
            service.generate_embeddings(["Silverstone"])

        service.client.embed.assert_called_once_with(model="mxbai-embed-large", input=["Silverstone"])

    @pytest.mark.integration
    @pytest.mark.requires_ollama
    def test_generate_embeddings_real_ollama(self, ollama_service):
        """Test generating embeddings with real Ollama service."""
        embeddings = ollama_service.generate_embeddings(
            ["Monaco Grand Prix", "Red Bull Racing"], "nomic-embed-text"
        )

        assert len(embeddings) == 2
        assert len(embeddings[0]) == 768
        assert embeddings[0] != embeddings[1]


class TestGeminiService:
    """Tests for GeminiService class."""

    @pytest.mark.asyncio
    @patch("f1rag.llm.gemini.genai.Client")
    async def test_generate_response_success(self, mock_client_class):
        """Test successful response generation with joined message contents."""
        mock_client = MagicMock()
        mock_client.models.generate_content.return_value.text = "Ferrari is iconic."
        mock_client_class.return_value = mock_client
        service = GeminiService(model="gemini-2.5-flash")

        messages = [
            {"role": "system", "content": "You are an F1 assistant."},
            {"role": "user", "content": "Tell me about Ferrari"},
        ]
        response = await service.generate_response(messages)

        assert response == "Ferrari is iconic."
        mock_client.models.generate_content.assert_called_once_with(
            model="gemini-2.5-flash",
            contents="You are an F1 assistant.\nTell me about Ferrari",
        )

    @pytest.mark.asyncio
    @patch("f1rag.llm.gemini.genai.Client")
    async def test_generate_response_error(self, mock_client_class):
        """Test that API errors are re-raised."""
        mock_client = MagicMock()
        mock_client.models.generate_content.side_effect = Exception("quota exceeded")
        mock_client_class.return_value = mock_client
        service = GeminiService(model="gemini-2.5-flash")

        with pytest.raises(Exception, match="quota exceeded"):
            await service.generate_response([{"role": "user", "content": "Hi"}])

    @patch("f1rag.llm.gemini.genai.Client")
    def test_timeout_is_passed_in_milliseconds(self, mock_client_class):
        """Test that the request timeout is configured on the client."""
        GeminiService(model="gemini-2.5-flash", timeout=2.5)

        http_options = mock_client_class.call_args.kwargs["http_options"]
        assert http_options.timeout == 2500

    @patch("f1rag.llm.gemini.genai.Client")
    def test_generate_embeddings_multiple_texts(self, mock_client_class):
        """Test generating embeddings for multiple texts."""
        mock_client = MagicMock()
        mock_client.models.embed_content.return_value.embeddings = [
            MagicMock(values=[0.1, 0.2]),
            MagicMock(values=[0.3, 0.4]),
        ]
        mock_client_class.return_value = mock_client
        service = GeminiService(model="gemini-2.5-flash")

        embeddings = service.generate_embeddings(["Norris", "Piastri"], "text-embedding-004")

        assert embeddings == [[0.1, 0.2], [0.3, 0.4]]
        mock_client.models.embed_content.assert_called_once_with(
            model="text-embedding-004", contents=["Norris", "Piastri"]
        )


class TestGetLLMService:
    """Tests for get_llm_service factory function."""

    @patch("f1rag.llm.factory.OllamaService")
    def test_creates_ollama_service_with_custom_config(self, mock_ollama_class):
        """Test creating OllamaService with explicit configuration."""
        config = {"service": "ollama", "host": "http://custom:11434", "model": "mistral", "timeout": 5}

        service = get_llm_service(config)

        mock_ollama_class.assert_called_once_with(host="http://custom:11434", model="mistral", timeout=5)
        assert service is mock_ollama_class.return_value

    @patch("f1rag.llm.factory.OllamaService")
    def test_creates_ollama_service_from_environment(self, mock_ollama_class):
        """Test that environment variables fill in missing settings."""
        env = {"OLLAMA_HOST": "http://env:11434", "LLM_MODEL": "llama3.1", "REQUEST_TIMEOUT": "3"}
        with patch.dict(os.environ, env):
            get_llm_service({"service": "ollama"})

        mock_ollama_class.assert_called_once_with(host="http://env:11434", model="llama3.1", timeout=3.0)

    @patch("f1rag.llm.factory.GeminiService")
    def test_creates_gemini_service_with_config(self, mock_gemini_class):
        """Test creating GeminiService."""
        get_llm_service({"service": "gemini", "model": "gemini-2.5-pro", "timeout": 10})

        mock_gemini_class.assert_called_once_with(model="gemini-2.5-pro", timeout=10)

    @patch("f1rag.llm.factory.GeminiService")
    def test_gemini_default_model(self, mock_gemini_class):
        """Test the Gemini default model when none is configured."""
        with patch.dict(os.environ, {}, clear=True):
            get_llm_service({"service": "gemini"})

        assert mock_gemini_class.call_args.kwargs["model"] == "gemini-2.5-flash"

    def test_raises_error_for_unsupported_service(self):
        """Test that unsupported service types raise ValueError."""
        with pytest.raises(ValueError, match="Unsupported service type: openai"):
            get_llm_service({"service": "openai"})
