"""Flask web application for the F1 chat assistant.

This module provides the REST API in front of the RAG pipeline: chat,
conversation history, knowledge base initialization, topics and health.
The pipeline is built once at startup and shared by every request.
"""

import logging
import os
from pathlib import Path

from dotenv import load_dotenv
from flask import Flask

from f1rag.client.routes import (
    chat_bp,
    conversations_bp,
    data_bp,
    health_bp,
    init_config,
)
from f1rag.service.factory import create_pipeline
from f1rag.service.rag import RAGPipeline

# Load environment variables
load_dotenv()

# Configure logging
log_level = os.getenv("LOG_LEVEL", "INFO")
logging.basicConfig(
    level=getattr(logging, log_level),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Create Flask app
app = Flask(__name__)
logger.debug("Flask app created")

# Register blueprints
app.register_blueprint(chat_bp)
app.register_blueprint(conversations_bp)
app.register_blueprint(data_bp)
app.register_blueprint(health_bp)


def initialize_services(pipeline: RAGPipeline | None = None) -> RAGPipeline:
    """Build the RAG pipeline and hand it to the routes.

    Args:
        pipeline: Pre-built pipeline to use instead of one built from the environment

    Returns:
        RAGPipeline: The pipeline now serving requests
    """
    logger.info("🔧 Initializing services...")
    pipeline = pipeline or create_pipeline()

    corpus_dir = os.getenv("CORPUS_DIR")
    init_config(
        pipeline=pipeline,
        corpus_dir=Path(corpus_dir) if corpus_dir else None,
    )

    if pipeline.needs_ingestion():
        logger.info("ℹ️ Knowledge base is empty; POST /api/init-data to load documents")
    logger.info("✅ Services initialized successfully")
    return pipeline


def create_app(pipeline: RAGPipeline | None = None):
    """Factory function for creating the Flask application.

    This function is used by WSGI servers like gunicorn to create the app.
    It initializes services before returning the app instance.

    Returns:
        Flask: The configured Flask application instance
    """
    initialize_services(pipeline)
    return app


def main() -> None:
    """Entry point for the Flask application command-line interface."""
    print("🏎️ Starting F1 RAG Flask application...")

    print("📦 Initializing RAG pipeline...")
    initialize_services()
    print("✅ Services initialized successfully")

    host = os.getenv("FLASK_HOST", "0.0.0.0")
    port = int(os.getenv("FLASK_PORT", "5000"))
    debug = os.getenv("FLASK_ENV", "development") == "development"

    print(f"🌐 Starting Flask server on http://{host}:{port}")
    print(f"🔧 Debug mode: {debug}")
    print("📝 Press CTRL+C to quit")

    # The reloader would build a second pipeline with its own in-memory index
    app.run(host=host, port=port, debug=debug, use_reloader=False)


if __name__ == "__main__":
    main()
