# storefront/models/chat_turn.py

"""Advisor transcript turn."""

from dataclasses import dataclass


@dataclass
class ChatTurn:
    """One message in the advisor transcript."""

    id: str
    role: str  # "user" or "assistant"
    text: str
    streaming: bool = False
