"""f1rag: Retrieval-Augmented Generation chat assistant for Formula 1 questions."""

__version__ = "0.1.0"
