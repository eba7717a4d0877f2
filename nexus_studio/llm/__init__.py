"""
LLM provider modules for the Nexus studio.

Supported backends:
- Groq (cloud, free tier)
- OpenAI (cloud)
- Ollama (local, no API key)
"""

from .base import LLMProvider, LLMResponse, LLMConfig, Message, ProviderStatus
from .groq_provider import GroqProvider
from .openai_provider import OpenAIProvider
from .ollama_provider import OllamaProvider
from .manager import LLMManager, LLMManagerConfig, get_llm_manager

__all__ = [
    "LLMProvider",
    "LLMResponse",
    "LLMConfig",
    "Message",
    "ProviderStatus",
    "GroqProvider",
    "OpenAIProvider",
    "OllamaProvider",
    "LLMManager",
    "LLMManagerConfig",
    "get_llm_manager",
]
