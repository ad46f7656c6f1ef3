"""Health check and status API routes."""

import logging
from datetime import datetime, timezone

from flask import Blueprint, jsonify

from f1rag.client.routes.config import get_config

logger = logging.getLogger(__name__)

health_bp = Blueprint("health", __name__)


@health_bp.route("/api/health", methods=["GET"])
def health():
    """Health check endpoint.

    Collection stats never raise, so this endpoint stays up even when the
    vector store is unreachable.

    Returns:
        JSON with service status, collection stats and whether ingestion is needed
    """
    pipeline = get_config().pipeline
    if pipeline is None:
        return jsonify({"status": "starting", "pipeline": "not initialized"}), 503

    stats = pipeline.get_collection_stats()
    return jsonify(
        {
            "status": "OK" if stats.available else "DEGRADED",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "collection": stats.to_dict(),
            "needs_ingestion": stats.total_documents == 0,
        }
    )
