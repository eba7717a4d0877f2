"""
Prompt templates for the Nexus studio agents.
"""

from .agent_prompts import (
    AGENT_SYSTEM_PROMPTS,
    REFINE_SYSTEM_PROMPT,
    DEFAULT_REFINE_INSTRUCTION,
    system_prompt_for,
    create_agent_prompt,
    create_refine_prompt,
)

__all__ = [
    "AGENT_SYSTEM_PROMPTS",
    "REFINE_SYSTEM_PROMPT",
    "DEFAULT_REFINE_INSTRUCTION",
    "system_prompt_for",
    "create_agent_prompt",
    "create_refine_prompt",
]
