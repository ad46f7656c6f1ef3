"""Answer generators: an LLM-backed strategy and a rule-based responder.

The rule-based responder ignores the retrieved context entirely and answers
from a fixed set of F1 keyword rules. It is the degraded mode used when no
generation backend is configured, and the fallback when one fails.
"""

import logging
import re
from dataclasses import dataclass
from typing import Protocol

from f1rag.constants import GENERATION_HISTORY_TURNS
from f1rag.errors import InvalidInputError
from f1rag.llm.base import LLMService
from f1rag.models import ConversationTurn
from f1rag.service.async_utils import run_async

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are an expert F1 (Formula 1) racing assistant. Answer questions about F1 "
    "racing, drivers, teams, circuits, regulations and history using the context "
    "provided. If the context does not contain the answer, say so and answer from "
    "general F1 knowledge. Keep responses concise but informative."
)

EMPTY_RESPONSE = "I apologize, but I could not generate a response."


class Generator(Protocol):
    """Turns a query and assembled context into prose."""

    def generate(
        self, query: str, context: str, history: list[ConversationTurn] | None = None
    ) -> str:
        ...


def _validate_query(query: str) -> None:
    if not isinstance(query, str) or not query.strip():
        raise InvalidInputError("Invalid user query")


@dataclass(frozen=True)
class _Rule:
    any_of: tuple[str, ...]
    response: str
    all_of: tuple[str, ...] = ()

    def matches(self, query: str) -> bool:
        return all(k in query for k in self.all_of) and any(k in query for k in self.any_of)


RULES = (
    _Rule(
        all_of=("2023",),
        any_of=("champion", "winner", "won"),
        response=(
            "Max Verstappen won the 2023 Formula 1 World Championship, securing his third "
            "consecutive title. He dominated the season with 19 race victories out of 22 races, "
            "setting a new record for the most wins in a single season."
        ),
    ),
    _Rule(
        any_of=("hamilton",),
        response=(
            "Lewis Hamilton is a seven-time Formula 1 World Champion and one of the most "
            "successful drivers in F1 history. He has won championships with both McLaren and "
            "Mercedes and holds records for most pole positions and most podium finishes."
        ),
    ),
    _Rule(
        any_of=("verstappen",),
        response=(
            "Max Verstappen is a three-time Formula 1 World Champion driving for Red Bull Racing. "
            "He is known for his aggressive driving style and won the 2021, 2022 and 2023 "
            "championships."
        ),
    ),
    _Rule(
        any_of=("leclerc",),
        response=(
            "Charles Leclerc is a Ferrari driver and one of the most talented drivers of his "
            "generation, with multiple race wins and pole positions since joining Ferrari in 2019."
        ),
    ),
    _Rule(
        any_of=("norris",),
        response=(
            "Lando Norris is a British driver for McLaren, known for his consistency. He has "
            "driven for McLaren since his debut in 2019."
        ),
    ),
    _Rule(
        any_of=("mercedes",),
        response=(
            "Mercedes-AMG Petronas F1 Team is one of the most successful teams in Formula 1 "
            "history. They dominated the hybrid era, winning 8 consecutive Constructors' titles "
            "from 2014 to 2021, and are known for engineering excellence and innovation."
        ),
    ),
    _Rule(
        any_of=("red bull", "redbull"),
        response=(
            "Red Bull Racing has won multiple championships and has been very successful in "
            "recent years with Max Verstappen, taking the Constructors' Championship in 2022 "
            "and 2023."
        ),
    ),
    _Rule(
        any_of=("ferrari",),
        response=(
            "Scuderia Ferrari is the oldest and most iconic team in Formula 1, with the most "
            "Constructors' Championships. It is the only team to have competed in every season "
            "since 1950."
        ),
    ),
    _Rule(
        any_of=("mclaren",),
        response=(
            "McLaren is one of the most successful teams in Formula 1 history and has been home "
            "to legendary drivers including Ayrton Senna, Alain Prost and Lewis Hamilton."
        ),
    ),
    _Rule(
        any_of=("monaco", "monte carlo"),
        response=(
            "The Monaco Grand Prix is held on the streets of Monte Carlo. Its tight corners make "
            "overtaking very difficult, so qualifying is extremely important."
        ),
    ),
    _Rule(
        any_of=("silverstone", "british grand prix"),
        response=(
            "The British Grand Prix at Silverstone hosted the first ever Formula 1 World "
            "Championship race in 1950 and is known for its high-speed corners."
        ),
    ),
    _Rule(
        any_of=("spa", "belgian"),
        response=(
            "The Belgian Grand Prix at Spa-Francorchamps is known for unpredictable weather, "
            "high-speed sections like Eau Rouge and its Ardennes forest setting."
        ),
    ),
    _Rule(
        any_of=("championship", "standings", "points"),
        response=(
            "The Formula 1 championship runs over 22-24 races per season, with points awarded "
            "to the top 10 finishers in each race for both the Drivers' and Constructors' titles."
        ),
    ),
    _Rule(
        any_of=("race", "grand prix"),
        response=(
            "Formula 1 races are called Grands Prix and typically last around 90 minutes. Each "
            "weekend includes practice sessions, qualifying and the main race."
        ),
    ),
    _Rule(
        any_of=("car", "vehicle"),
        response=(
            "Formula 1 cars feature hybrid power units and advanced aerodynamics. They can exceed "
            "350 km/h and generate massive downforce for cornering."
        ),
    ),
)

DEFAULT_RESPONSE = (
    "I'm your F1 assistant! I can help you with information about Formula 1 drivers, teams, "
    "circuits, championships and racing history. You can ask about drivers like Lewis Hamilton "
    "or Max Verstappen, teams like Mercedes or Ferrari, or circuits like Monaco or Silverstone."
)


class RuleBasedGenerator:
    """Deterministic keyword responder. The context is ignored."""

    def generate(
        self, query: str, context: str = "", history: list[ConversationTurn] | None = None
    ) -> str:
        _validate_query(query)
        lowered = query.lower()
        for rule in RULES:
            if rule.matches(lowered):
                return rule.response
        return DEFAULT_RESPONSE


def clean_response(response: str | None) -> str:
    """Normalize whitespace and make sure the answer ends with punctuation."""
    if not response:
        return EMPTY_RESPONSE

    cleaned = re.sub(r"\s+", " ", response).strip()
    if cleaned and not re.search(r"[.!?]$", cleaned):
        cleaned += "."
    return cleaned or EMPTY_RESPONSE


def build_messages(
    query: str, context: str, history: list[ConversationTurn] | None = None
) -> list[dict]:
    """Build the chat messages: system prompt, context, recent turns, question."""
    messages = [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": f"Context information:\n---\n{context}\n---"},
        {"role": "assistant", "content": "Understood. I'll use this context to answer."},
    ]
    for turn in (history or [])[-GENERATION_HISTORY_TURNS:]:
        messages.append({"role": "user", "content": turn.user})
        messages.append({"role": "assistant", "content": turn.bot})
    messages.append({"role": "user", "content": query})
    return messages


class LLMGenerator:
    """Generator backed by an LLM service, falling back on backend failure."""

    def __init__(self, llm_service: LLMService, fallback: Generator | None = None) -> None:
        self.llm_service = llm_service
        self.fallback = fallback or RuleBasedGenerator()

    def generate(
        self, query: str, context: str, history: list[ConversationTurn] | None = None
    ) -> str:
        _validate_query(query)
        messages = build_messages(query, context, history)
        try:
            response = run_async(self.llm_service.generate_response(messages))
        except Exception as e:
            logger.warning(f"⚠️ Generation backend failed, using rule-based responder: {e}")
            return self.fallback.generate(query, context, history)
        return clean_response(response)
