"""
LLM-backed collaborators: the agent responder used by the request router and
the thought refiner used by the design studio.
"""

from __future__ import annotations

import re
from typing import Optional

from ..config import StudioConfig
from ..llm.manager import LLMManager, get_llm_manager
from ..prompts import (
    DEFAULT_REFINE_INSTRUCTION,
    REFINE_SYSTEM_PROMPT,
    create_agent_prompt,
    create_refine_prompt,
    system_prompt_for,
)
from ..routing import ResponseEnvelope
from ..schemas.chat import AgentTag, Source

_MARKDOWN_LINK = re.compile(r"\[([^\]]+)\]\((https?://[^\s)]+)\)")


def extract_sources(text: str) -> list[Source]:
    """Markdown links in `text`, in order of first appearance, one per URI."""
    seen: set[str] = set()
    sources: list[Source] = []
    for title, uri in _MARKDOWN_LINK.findall(text):
        if uri in seen:
            continue
        seen.add(uri)
        sources.append(Source(title=title.strip(), uri=uri))
    return sources


class _ManagedLLM:
    """Holds an LLM manager, building it on first use so idle sessions never contact providers."""

    def __init__(self, llm_manager: Optional[LLMManager] = None, settings: Optional[StudioConfig] = None):
        self._llm_manager = llm_manager
        self._settings = settings

    @property
    def llm_manager(self) -> LLMManager:
        if self._llm_manager is None:
            self._llm_manager = get_llm_manager(self._settings)
        return self._llm_manager

    def close(self):
        if self._llm_manager is not None:
            self._llm_manager.close()


class AgentResponder(_ManagedLLM):
    """Generates agent replies through the LLM manager."""

    def generate(
        self,
        user_text: str,
        context_summary: str,
        agent_tag: Optional[AgentTag] = None,
    ) -> ResponseEnvelope:
        tag = agent_tag.value if agent_tag else None
        response = self.llm_manager.complete(
            create_agent_prompt(user_text, context_summary),
            system_prompt=system_prompt_for(tag),
        )
        content = response.content.strip()
        return ResponseEnvelope(
            content=content,
            agent_tag=agent_tag,
            sources=extract_sources(content),
        )


class ThoughtRefiner(_ManagedLLM):
    """Rewrites a raw thought according to an instruction."""

    def refine(self, raw_text: str, instruction: str = DEFAULT_REFINE_INSTRUCTION) -> str:
        response = self.llm_manager.complete(
            create_refine_prompt(raw_text, instruction),
            system_prompt=REFINE_SYSTEM_PROMPT,
            temperature=0.2,
        )
        refined = response.content.strip().strip('"').strip()
        if not refined:
            raise ValueError("Refinement returned empty text")
        return refined
