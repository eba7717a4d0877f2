"""
Inquire session - the co-pilot chat owned by one studio session.

A session holds the transcript and the router. It accepts one request at a
time: a submission that arrives while another is awaiting its reply is
rejected with RequestInFlightError. Closing the session releases the
responder; a reply that lands after close is dropped instead of being
appended to the discarded transcript.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Optional

from ..errors import EmptyRequestError, RequestInFlightError, SessionClosedError
from ..routing import RequestRouter, ResponseGenerator, StatusListener
from ..schemas.chat import AgentTag, ChatMessage, Sender, Transcript
from ..schemas.studio_params import OrgContext

logger = logging.getLogger(__name__)

GREETING = "Nexus Intelligence System Online. Active Agents: Scout, Strategist, Diplomat. Awaiting directives."


class InquireSession:
    def __init__(
        self,
        responder: ResponseGenerator,
        context: Optional[OrgContext] = None,
        on_status: Optional[StatusListener] = None,
    ):
        self.responder = responder
        self.context = context or OrgContext()
        self.transcript = Transcript()
        self.router = RequestRouter(responder, on_status=on_status)
        self._in_flight = threading.Lock()
        # Guards _closed and the reply append so close() and delivery cannot interleave
        self._state_lock = threading.Lock()
        self._closed = False

        self.transcript.append(ChatMessage(sender=Sender.AGENT, text=GREETING))

    @property
    def is_closed(self) -> bool:
        return self._closed

    @property
    def is_busy(self) -> bool:
        return self._in_flight.locked()

    @property
    def active_agent(self) -> Optional[AgentTag]:
        return self.router.active_agent

    @property
    def status(self) -> str:
        return self.router.status

    def submit(self, text: str) -> Optional[ChatMessage]:
        """
        Send a user request and append the agent's reply.

        Returns:
            The appended agent message, or None when the session was closed
            while the reply was pending.

        Raises:
            SessionClosedError: The session is closed
            EmptyRequestError: `text` is blank
            RequestInFlightError: Another request is awaiting its reply
        """
        if self._closed:
            raise SessionClosedError("Chat session is closed")
        if not text or not text.strip():
            raise EmptyRequestError("Request text is empty")
        if not self._in_flight.acquire(blocking=False):
            raise RequestInFlightError("A request is already awaiting a response")

        try:
            self.transcript.append(ChatMessage(sender=Sender.USER, text=text))
            result = self.router.route(text, self.context)

            with self._state_lock:
                if self._closed:
                    logger.info("Dropping reply for closed session (agent=%s)", result.agent_tag)
                    return None

                return self.transcript.append(
                    ChatMessage(
                        sender=Sender.AGENT,
                        text=result.reply,
                        agent_tag=result.agent_tag,
                        sources=tuple(result.sources),
                    )
                )
        finally:
            self._in_flight.release()

    def close(self):
        """End the session and release the responder's connections."""
        with self._state_lock:
            if self._closed:
                return
            self._closed = True
        close = getattr(self.responder, "close", None)
        if callable(close):
            try:
                close()
            except Exception:
                logger.warning("Failed to release responder on session close", exc_info=True)

    def get_state(self) -> dict[str, Any]:
        return {
            "closed": self._closed,
            "busy": self.is_busy,
            "active_agent": self.active_agent.value if self.active_agent else None,
            "status": self.status,
            "messages": self.transcript.to_list(),
        }
