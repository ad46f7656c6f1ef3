"""Conversation history API routes."""

import logging

from flask import Blueprint, jsonify

from f1rag.client.routes.config import get_config

logger = logging.getLogger(__name__)

conversations_bp = Blueprint("conversations", __name__)


@conversations_bp.route("/api/conversations/<conversation_id>", methods=["GET"])
def get_history(conversation_id: str):
    """Return the recorded turns of a conversation, oldest first."""
    history = get_config().pipeline.get_history(conversation_id)
    return jsonify({"history": [turn.to_dict() for turn in history]})


@conversations_bp.route("/api/conversations/<conversation_id>/summary", methods=["GET"])
def get_summary(conversation_id: str):
    """Return turn count, detected topics and last message time."""
    summary = get_config().pipeline.get_conversation_summary(conversation_id)
    return jsonify(summary.to_dict())
