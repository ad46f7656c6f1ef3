"""Flask route blueprints for the f1rag web application."""

from f1rag.client.routes.chat import chat_bp
from f1rag.client.routes.config import get_config, init_config
from f1rag.client.routes.conversations import conversations_bp
from f1rag.client.routes.data import data_bp
from f1rag.client.routes.health import health_bp

__all__ = [
    "chat_bp",
    "conversations_bp",
    "data_bp",
    "health_bp",
    "init_config",
    "get_config",
]
