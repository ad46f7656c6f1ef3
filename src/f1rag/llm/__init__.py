"""LLM backend abstraction layer for f1rag.

This package provides a unified interface for multiple LLM providers:
- OllamaService: Local LLM via Ollama
- GeminiService: Google Gemini API

Both back the embedding and generation strategies when a real backend
is configured.

Usage:
    from f1rag.llm import get_llm_service

    # Create service from environment config
    service = get_llm_service()

    # Or with explicit config
    service = get_llm_service({"service": "gemini", "model": "gemini-2.5-flash"})
"""

from f1rag.llm.base import LLMService
from f1rag.llm.factory import get_llm_service
from f1rag.llm.gemini import GeminiService
from f1rag.llm.ollama import OllamaService

__all__ = [
    "LLMService",
    "OllamaService",
    "GeminiService",
    "get_llm_service",
]
