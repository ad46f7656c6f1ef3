"""In-memory, bounded conversation history.

Conversations live in an arena of records with an id -> slot lookup. Each
record carries its own lock, so appends to one conversation are serialized
while different conversations proceed independently. Everything is lost on
process restart.
"""

import logging
import threading
from dataclasses import dataclass, field
from typing import Protocol

from f1rag.constants import MAX_HISTORY_TURNS, TOPIC_KEYWORDS
from f1rag.errors import InvalidInputError
from f1rag.models import ConversationSummary, ConversationTurn

logger = logging.getLogger(__name__)


class EvictionPolicy(Protocol):
    """Trims a conversation's turn list in place after each append."""

    def evict(self, turns: list[ConversationTurn]) -> None:
        ...


class KeepLastTurns:
    """FIFO eviction keeping the newest ``max_turns`` turns."""

    def __init__(self, max_turns: int = MAX_HISTORY_TURNS) -> None:
        if max_turns <= 0:
            raise ValueError("max_turns must be positive")
        self.max_turns = max_turns

    def evict(self, turns: list[ConversationTurn]) -> None:
        overflow = len(turns) - self.max_turns
        if overflow > 0:
            del turns[:overflow]


@dataclass
class _ConversationRecord:
    conversation_id: str
    turns: list[ConversationTurn] = field(default_factory=list)
    lock: threading.Lock = field(default_factory=threading.Lock)


def extract_topics(turns: list[ConversationTurn]) -> list[str]:
    """Collect topic labels whose keywords appear in any turn, in first-seen order."""
    topics: dict[str, None] = {}
    for turn in turns:
        text = f"{turn.user} {turn.bot}".lower()
        for topic, keywords in TOPIC_KEYWORDS.items():
            if any(keyword in text for keyword in keywords):
                topics.setdefault(topic)
    return list(topics)


class ConversationStore:
    """Bounded per-conversation turn history keyed by conversation id."""

    def __init__(self, eviction_policy: EvictionPolicy | None = None) -> None:
        self.eviction_policy = eviction_policy or KeepLastTurns()
        self._records: list[_ConversationRecord] = []
        self._slots: dict[str, int] = {}
        self._lock = threading.Lock()

    def _get_record(self, conversation_id: str, create: bool = False) -> _ConversationRecord | None:
        with self._lock:
            slot = self._slots.get(conversation_id)
            if slot is not None:
                return self._records[slot]
            if not create:
                return None
            record = _ConversationRecord(conversation_id)
            self._slots[conversation_id] = len(self._records)
            self._records.append(record)
            logger.debug(f"Created conversation {conversation_id}")
            return record

    def append(self, conversation_id: str, turn: ConversationTurn) -> None:
        """Append a turn, then apply the eviction policy."""
        if not conversation_id:
            raise InvalidInputError("Conversation ID is required")

        record = self._get_record(conversation_id, create=True)
        with record.lock:
            record.turns.append(turn)
            self.eviction_policy.evict(record.turns)

    def history(self, conversation_id: str) -> list[ConversationTurn]:
        """Turns for a conversation, oldest first. Unknown ids yield []."""
        record = self._get_record(conversation_id)
        if record is None:
            return []
        with record.lock:
            return list(record.turns)

    def summarize(self, conversation_id: str) -> ConversationSummary:
        turns = self.history(conversation_id)
        if not turns:
            return ConversationSummary()
        return ConversationSummary(
            turn_count=len(turns),
            topics=extract_topics(turns),
            last_message=turns[-1].timestamp,
        )

    def __contains__(self, conversation_id: str) -> bool:
        with self._lock:
            return conversation_id in self._slots

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)
