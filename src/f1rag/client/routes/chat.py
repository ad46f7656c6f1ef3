"""Chat API route running the RAG pipeline."""

import logging

from flask import Blueprint, jsonify, request

from f1rag.client.routes.config import get_config
from f1rag.errors import InvalidInputError, RagProcessingError

logger = logging.getLogger(__name__)

chat_bp = Blueprint("chat", __name__)


@chat_bp.route("/api/chat", methods=["POST"])
def chat():
    """Answer a message within a conversation.

    Request:
        {
            "message": "Tell me about Mercedes",
            "conversation_id": "uuid"  # Optional, minted when absent
        }

    Response:
        {
            "response": "Mercedes-AMG Petronas F1 Team is ...",
            "conversation_id": "uuid",
            "sources": [{"title": "...", "content": "...", "score": 0.83}],
            "context": {"documents_found": 1, "total_context_length": 412}
        }
    """
    config = get_config()
    data = request.get_json(silent=True) or {}
    message = data.get("message")

    if not isinstance(message, str) or not message.strip():
        logger.warning("❌ Missing 'message' field in request")
        return jsonify({"error": "Please provide a message to process"}), 400

    logger.info(f"📨 New chat request: '{message[:100]}'")
    try:
        result = config.pipeline.process_query(message, data.get("conversation_id"))
        return jsonify(result.to_dict())
    except InvalidInputError as e:
        return jsonify({"error": str(e)}), 400
    except RagProcessingError as e:
        logger.error(f"❌ Error processing chat request: {e}", exc_info=True)
        return jsonify({
            "error": "Sorry, I encountered an error processing your message",
            "details": str(e.cause or e),
        }), 500
