"""
Schema definitions for the Nexus studio.
"""

from .studio_params import StudioParameters, OrgContext, SkillLevel, SKILL_LEVEL_LABELS, CUSTOM
from .chat import AgentTag, ChatMessage, Sender, Source, Transcript

__all__ = [
    "StudioParameters",
    "OrgContext",
    "SkillLevel",
    "SKILL_LEVEL_LABELS",
    "CUSTOM",
    "AgentTag",
    "ChatMessage",
    "Sender",
    "Source",
    "Transcript",
]
