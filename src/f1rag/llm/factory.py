"""Factory function for creating LLM service instances."""

import logging
import os

from dotenv import load_dotenv

from f1rag.constants import DEFAULT_OLLAMA_HOST, LLM_MODEL_DEFAULTS, get_request_timeout
from f1rag.llm.base import LLMService
from f1rag.llm.gemini import GeminiService
from f1rag.llm.ollama import OllamaService

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)


def get_llm_service(config: dict | None = None) -> LLMService:
    """Factory function to create an LLM service instance.

    Args:
        config: Optional configuration dictionary. If None, uses environment variables.
                Expected keys:
                - 'service': Service type (default: from LLM_SERVICE env, or "ollama")
                - 'host': Ollama host URL (default: from OLLAMA_HOST env)
                - 'model': Model name (default: from LLM_MODEL env)
                - 'timeout': Request timeout in seconds (default: from REQUEST_TIMEOUT env)

    Returns:
        LLMService: An instance implementing the LLMService protocol.
    """
    if config is None:
        config = {}

    service_type = config.get("service", os.getenv("LLM_SERVICE", "ollama"))
    timeout = config.get("timeout", get_request_timeout())

    if service_type == "ollama":
        host = config.get("host", os.getenv("OLLAMA_HOST", DEFAULT_OLLAMA_HOST))
        model = config.get("model", os.getenv("LLM_MODEL", LLM_MODEL_DEFAULTS["ollama"]))
        return OllamaService(host=host, model=model, timeout=timeout)

    if service_type == "gemini":
        model = config.get("model", os.getenv("LLM_MODEL", LLM_MODEL_DEFAULTS["gemini"]))
        return GeminiService(model=model, timeout=timeout)

    raise ValueError(f"Unsupported service type: {service_type}")
