"""
Agent modules for the Nexus studio.
"""

from .studio_agent import DesignStudioAgent, StudioStage
from .inquire_session import InquireSession, GREETING
from .responders import AgentResponder, ThoughtRefiner, extract_sources

__all__ = [
    "DesignStudioAgent",
    "StudioStage",
    "InquireSession",
    "GREETING",
    "AgentResponder",
    "ThoughtRefiner",
    "extract_sources",
]
