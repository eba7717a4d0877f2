"""
Chat transcript types for the Inquire co-pilot.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Iterator, Optional

DISPLAY_SOURCE_LIMIT = 2


class Sender(str, Enum):
    USER = "user"
    AGENT = "agent"


class AgentTag(str, Enum):
    """Closed set of response agents."""
    SCOUT = "scout"
    STRATEGIST = "strategist"
    DIPLOMAT = "diplomat"

    @classmethod
    def parse(cls, value: Any) -> Optional["AgentTag"]:
        """Known tag for `value`, or None."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return None


@dataclass(frozen=True)
class Source:
    title: str
    uri: str

    def to_dict(self) -> dict[str, str]:
        return {"title": self.title, "uri": self.uri}


@dataclass(frozen=True)
class ChatMessage:
    sender: Sender
    text: str
    agent_tag: Optional[AgentTag] = None
    sources: tuple[Source, ...] = ()
    timestamp: str = field(default_factory=lambda: datetime.now().isoformat())

    def display_sources(self, limit: int = DISPLAY_SOURCE_LIMIT) -> list[Source]:
        return list(self.sources[:limit])

    def to_dict(self) -> dict[str, Any]:
        return {
            "sender": self.sender.value,
            "text": self.text,
            "agent": self.agent_tag.value if self.agent_tag else None,
            "sources": [s.to_dict() for s in self.sources],
            "timestamp": self.timestamp,
        }


class Transcript:
    """Append-only list of chat messages owned by one session."""

    def __init__(self):
        self._messages: list[ChatMessage] = []

    def append(self, message: ChatMessage) -> ChatMessage:
        self._messages.append(message)
        return message

    @property
    def messages(self) -> tuple[ChatMessage, ...]:
        return tuple(self._messages)

    def __iter__(self) -> Iterator[ChatMessage]:
        return iter(tuple(self._messages))

    def __len__(self) -> int:
        return len(self._messages)

    def to_list(self) -> list[dict[str, Any]]:
        return [m.to_dict() for m in self._messages]
