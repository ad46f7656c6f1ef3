"""Core RAG services: embedding, vector index, generation, conversations and ingestion."""
