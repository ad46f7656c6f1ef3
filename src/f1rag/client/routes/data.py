"""Knowledge base API routes: data initialization and topics."""

import logging
from pathlib import Path

from flask import Blueprint, jsonify, request

from f1rag.client.loaders import load_documents_from_directory
from f1rag.client.routes.config import get_config
from f1rag.errors import InvalidInputError
from f1rag.models import Document

logger = logging.getLogger(__name__)

data_bp = Blueprint("data", __name__)


@data_bp.route("/api/init-data", methods=["POST"])
def init_data():
    """Ingest documents into the knowledge base.

    Request (either form, both optional when CORPUS_DIR is configured):
        {"documents": [{"title": "...", "content": "...", "type": "...", "source": "..."}]}
        {"directory": "/path/to/corpus"}

    Response:
        {"success": true, "documents_processed": 12, "documents_stored": 12, "chunks_failed": 0}
    """
    config = get_config()
    data = request.get_json(silent=True) or {}

    try:
        if data.get("documents"):
            documents = [Document.from_dict(item) for item in data["documents"]]
        else:
            directory = data.get("directory") or config.corpus_dir
            if not directory or not Path(directory).is_dir():
                return jsonify({"error": "No documents provided and no corpus directory configured"}), 400
            documents = load_documents_from_directory(Path(directory))

        if not documents:
            return jsonify({"error": "No documents found to ingest"}), 400

        logger.info(f"🚀 Starting data initialization with {len(documents)} documents...")
        result = config.pipeline.ingest(documents)
        logger.info("✅ Data initialization completed")
        return jsonify(result.to_dict())

    except (InvalidInputError, KeyError, TypeError) as e:
        return jsonify({"error": f"Invalid documents: {e}"}), 400
    except Exception as e:
        logger.error(f"❌ Data initialization failed: {e}", exc_info=True)
        return jsonify({"error": "Failed to initialize F1 data", "details": str(e)}), 500


@data_bp.route("/api/topics", methods=["GET"])
def topics():
    """List the F1 knowledge areas users can ask about."""
    return jsonify({"topics": get_config().pipeline.get_topics()})
