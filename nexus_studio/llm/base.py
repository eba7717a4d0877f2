"""
Base classes for LLM providers.

The studio treats text generation as an external collaborator; every
backend (Groq, OpenAI, Ollama) sits behind the same small interface so the
manager can fail over between them.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Optional, List, Dict, Any
from enum import Enum


class ProviderStatus(str, Enum):
    """Status of an LLM provider."""
    AVAILABLE = "available"
    RATE_LIMITED = "rate_limited"
    ERROR = "error"
    NOT_CONFIGURED = "not_configured"


@dataclass
class LLMConfig:
    """Configuration for an LLM provider."""
    provider_name: str
    model: str
    api_key: Optional[str] = None
    base_url: Optional[str] = None
    temperature: float = 0.4
    max_tokens: int = 1200
    timeout: int = 30


@dataclass
class Message:
    """A single message in a conversation."""
    role: str  # "system", "user", "assistant"
    content: str


@dataclass
class LLMResponse:
    """Response from an LLM provider."""
    content: str
    model: str
    provider: str
    usage: Dict[str, int] = field(default_factory=dict)
    finish_reason: str = "stop"
    raw_response: Optional[Any] = None

    @property
    def tokens_used(self) -> int:
        return self.usage.get("total_tokens", 0)


class LLMProvider(ABC):
    """
    Abstract base class for LLM providers.

    Subclasses implement `is_available` and `chat`; `complete` and `close`
    have sensible defaults.
    """

    def __init__(self, config: LLMConfig):
        self.config = config
        self._status = ProviderStatus.NOT_CONFIGURED

    @property
    def name(self) -> str:
        return self.config.provider_name

    @property
    def model(self) -> str:
        return self.config.model

    @property
    def status(self) -> ProviderStatus:
        return self._status

    def mark(self, status: ProviderStatus) -> None:
        self._status = status

    @abstractmethod
    def is_available(self) -> bool:
        """Check if the provider is available and configured."""

    @abstractmethod
    def chat(
        self,
        messages: List[Message],
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        **kwargs
    ) -> LLMResponse:
        """
        Send a chat completion request.

        Args:
            messages: List of conversation messages
            temperature: Override default temperature
            max_tokens: Override default max tokens
            **kwargs: Provider-specific parameters

        Returns:
            LLMResponse with the model's response
        """

    def complete(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        **kwargs
    ) -> LLMResponse:
        """Single-prompt completion built on `chat`."""
        return self.chat(build_messages(prompt, system_prompt), **kwargs)

    def close(self) -> None:
        """Release network resources held by the provider."""

    def _mark_failure(self, error: Exception) -> None:
        if is_rate_limit_error(error):
            self._status = ProviderStatus.RATE_LIMITED
        else:
            self._status = ProviderStatus.ERROR


def build_messages(prompt: str, system_prompt: Optional[str] = None) -> List[Message]:
    messages = []
    if system_prompt:
        messages.append(Message(role="system", content=system_prompt))
    messages.append(Message(role="user", content=prompt))
    return messages


RATE_LIMIT_MARKERS = ("rate limit", "rate_limit", "ratelimit", "too many requests", "429", "quota")


def is_rate_limit_error(error: Exception) -> bool:
    if getattr(error, "status_code", None) == 429:
        return True
    text = str(error).lower()
    return any(marker in text for marker in RATE_LIMIT_MARKERS)


@dataclass
class ProviderInfo:
    """Metadata used when ranking providers."""
    name: str
    is_local: bool
    rate_limit_requests_per_day: int
    requires_api_key: bool


PROVIDER_INFO = {
    "groq": ProviderInfo(name="groq", is_local=False, rate_limit_requests_per_day=1000, requires_api_key=True),
    "openai": ProviderInfo(name="openai", is_local=False, rate_limit_requests_per_day=10000, requires_api_key=True),
    "ollama": ProviderInfo(name="ollama", is_local=True, rate_limit_requests_per_day=999999, requires_api_key=False),
}
