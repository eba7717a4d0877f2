"""
Request routing for the Inquire co-pilot.

Each request is classified into one of three agents by keyword, handed to
the response generator with the organization context, and returned as an
annotated reply. A failing generator never escapes the router: the caller
gets the fixed fallback reply with no agent attached.

Keyword priority (first match wins, case-insensitive substring):
1. "news" or "search"  -> scout
2. "negotiate"         -> diplomat
3. anything else       -> strategist
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional, Protocol

from .schemas.chat import AgentTag, Source
from .schemas.studio_params import OrgContext

logger = logging.getLogger(__name__)

FALLBACK_REPLY = "System overload. Re-routing..."

ROUTING_RULES: tuple[tuple[tuple[str, ...], AgentTag], ...] = (
    (("news", "search"), AgentTag.SCOUT),
    (("negotiate",), AgentTag.DIPLOMAT),
)
DEFAULT_AGENT = AgentTag.STRATEGIST

AGENT_STATUS = {
    AgentTag.SCOUT: "Scouring global databases...",
    AgentTag.DIPLOMAT: "Analyzing cultural nuance...",
    AgentTag.STRATEGIST: "Simulating strategic outcomes...",
}


class RouterState(str, Enum):
    IDLE = "idle"
    CLASSIFYING = "classifying"
    AWAITING_RESPONSE = "awaiting_response"
    DELIVERED = "delivered"
    DEGRADED = "degraded"


@dataclass
class ResponseEnvelope:
    """What the response generator hands back."""
    content: str
    agent_tag: Optional[AgentTag] = None
    sources: list[Source] = field(default_factory=list)


class ResponseGenerator(Protocol):
    def generate(
        self,
        user_text: str,
        context_summary: str,
        agent_tag: Optional[AgentTag] = None,
    ) -> ResponseEnvelope:
        ...


@dataclass
class RouteResult:
    agent_tag: Optional[AgentTag]
    reply: str
    sources: list[Source] = field(default_factory=list)
    degraded: bool = False


StatusListener = Callable[[Optional[AgentTag], str], None]


def classify(text: str) -> AgentTag:
    """Agent for a request; never unclassified."""
    lowered = text.lower()
    for keywords, tag in ROUTING_RULES:
        if any(keyword in lowered for keyword in keywords):
            return tag
    return DEFAULT_AGENT


class RequestRouter:
    """
    Routes one request at a time to the response generator.

    `active_agent` and `status` describe the transient "processing" indicator;
    they are set once the request is classified and always cleared when the
    request finishes, whatever the outcome.
    """

    def __init__(
        self,
        responder: ResponseGenerator,
        on_status: Optional[StatusListener] = None,
    ):
        self.responder = responder
        self.on_status = on_status
        self.state = RouterState.IDLE
        self.active_agent: Optional[AgentTag] = None
        self.status = ""

    @property
    def is_busy(self) -> bool:
        return self.state != RouterState.IDLE

    def _set_status(self, agent: Optional[AgentTag], status: str):
        self.active_agent = agent
        self.status = status
        if self.on_status:
            self.on_status(agent, status)

    def route(self, text: str, context: OrgContext) -> RouteResult:
        """
        Classify `text` and fetch a reply for it.

        Args:
            text: Non-empty user request (callers reject blank input)
            context: Organization context used to condition the reply

        Returns:
            RouteResult; `degraded` is True and `agent_tag` None when the
            generator failed.
        """
        self.state = RouterState.CLASSIFYING
        try:
            tag = classify(text)
            self._set_status(tag, AGENT_STATUS[tag])

            self.state = RouterState.AWAITING_RESPONSE
            try:
                envelope = self.responder.generate(text, context.summary(), agent_tag=tag)
            except Exception:
                logger.warning("Response generation failed for %s request", tag.value, exc_info=True)
                self.state = RouterState.DEGRADED
                return RouteResult(agent_tag=None, reply=FALLBACK_REPLY, degraded=True)

            self.state = RouterState.DELIVERED
            return RouteResult(
                agent_tag=AgentTag.parse(envelope.agent_tag) or tag,
                reply=envelope.content,
                sources=list(envelope.sources or []),
            )
        finally:
            self._set_status(None, "")
            self.state = RouterState.IDLE


def route(text: str, context: OrgContext, responder: ResponseGenerator) -> RouteResult:
    """One-shot routing without keeping a router around."""
    return RequestRouter(responder).route(text, context)
