"""
LLM Manager - one entry point over several providers.

Handles provider selection by priority, retry with backoff, failover on
rate limits and per-provider usage tracking.
"""

import logging
import time
from typing import Callable, Optional, List, Dict, Any
from dataclasses import dataclass, field
from datetime import datetime, timedelta

from ..config import StudioConfig
from .base import (
    LLMProvider,
    LLMResponse,
    Message,
    ProviderStatus,
    PROVIDER_INFO,
    build_messages,
    is_rate_limit_error,
)
from .groq_provider import GroqProvider, create_groq_provider
from .ollama_provider import OllamaProvider, create_ollama_provider
from .openai_provider import OpenAIProvider, create_openai_provider

logger = logging.getLogger(__name__)


@dataclass
class ProviderUsage:
    """Usage counters for one provider."""
    requests_today: int = 0
    tokens_today: int = 0
    last_request: Optional[datetime] = None
    rate_limit_reset: Optional[datetime] = None
    errors: int = 0
    successes: int = 0
    last_error: Optional[str] = None


@dataclass
class LLMManagerConfig:
    """Configuration for the LLM Manager."""
    provider_priority: List[str] = field(default_factory=lambda: ["groq", "openai", "ollama"])
    auto_fallback: bool = True
    max_retries: int = 2
    default_models: Dict[str, str] = field(default_factory=lambda: {
        "groq": GroqProvider.DEFAULT_MODEL,
        "openai": OpenAIProvider.DEFAULT_MODEL,
        "ollama": OllamaProvider.DEFAULT_MODEL,
    })
    # Don't use the last 10% of a cloud provider's daily quota
    rate_limit_buffer: float = 0.1
    rate_limit_cooldown: timedelta = timedelta(hours=1)
    # Explicit credentials; providers fall back to their environment variables
    api_keys: Dict[str, Optional[str]] = field(default_factory=dict)
    ollama_host: Optional[str] = None


_FACTORIES: Dict[str, Callable[[str, LLMManagerConfig], Optional[LLMProvider]]] = {
    "groq": lambda model, config: create_groq_provider(model=model, api_key=config.api_keys.get("groq")),
    "openai": lambda model, config: create_openai_provider(model=model, api_key=config.api_keys.get("openai")),
    "ollama": lambda model, config: create_ollama_provider(model=model, host=config.ollama_host),
}


class LLMManager:
    """
    Manages LLM providers with automatic selection and failover.

    Usage:
        manager = LLMManager()
        response = manager.complete("Summarize the tariff outlook", system_prompt="...")

    Providers can be injected directly (tests, custom backends); otherwise
    every provider named in `provider_priority` that is configured in the
    environment is initialized.
    """

    def __init__(
        self,
        config: Optional[LLMManagerConfig] = None,
        providers: Optional[Dict[str, LLMProvider]] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.config = config or LLMManagerConfig()
        self._sleep = sleep
        self._providers: Dict[str, LLMProvider] = {}
        self._usage: Dict[str, ProviderUsage] = {}
        self._current_provider: Optional[str] = None

        if providers is None:
            self._initialize_providers()
        else:
            for name, provider in providers.items():
                self._register(name, provider)
        self._select_provider()

    def _register(self, name: str, provider: LLMProvider):
        self._providers[name] = provider
        self._usage[name] = ProviderUsage()

    def _initialize_providers(self):
        for name in self.config.provider_priority:
            factory = _FACTORIES.get(name)
            if factory is None:
                logger.warning("Unknown LLM provider '%s' in priority list", name)
                continue
            provider = factory(self.config.default_models.get(name, ""), self.config)
            if provider and provider.is_available():
                self._register(name, provider)
                logger.info("%s provider initialized (model %s)", name, provider.model)

        if not self._providers:
            logger.warning(
                "No LLM providers available. Set GROQ_API_KEY or OPENAI_API_KEY, "
                "or run Ollama locally (ollama serve)."
            )

    def _select_provider(self) -> Optional[str]:
        """Select the best available provider."""
        for name in self.config.provider_priority:
            provider = self._providers.get(name)
            if provider is None:
                continue
            usage = self._usage[name]

            if provider.status == ProviderStatus.RATE_LIMITED:
                if usage.rate_limit_reset and datetime.now() < usage.rate_limit_reset:
                    continue
                provider.mark(ProviderStatus.AVAILABLE)

            info = PROVIDER_INFO.get(name)
            if info and not info.is_local:
                limit = info.rate_limit_requests_per_day
                if usage.requests_today >= limit - int(limit * self.config.rate_limit_buffer):
                    continue

            self._current_provider = name
            return name

        self._current_provider = None
        return None

    @property
    def current_provider(self) -> Optional[LLMProvider]:
        if self._current_provider:
            return self._providers.get(self._current_provider)
        return None

    @property
    def available_providers(self) -> List[str]:
        return list(self._providers.keys())

    @property
    def is_available(self) -> bool:
        return self._select_provider() is not None

    def _record_success(self, name: str, response: LLMResponse):
        usage = self._usage[name]
        usage.requests_today += 1
        usage.tokens_today += response.tokens_used
        usage.last_request = datetime.now()
        usage.successes += 1

    def _record_error(self, name: str, error: Exception):
        usage = self._usage[name]
        usage.errors += 1
        usage.last_error = str(error)[:200]

    def _handle_rate_limit(self, name: str):
        self._usage[name].rate_limit_reset = datetime.now() + self.config.rate_limit_cooldown
        self._providers[name].mark(ProviderStatus.RATE_LIMITED)

    def chat(
        self,
        messages: List[Message],
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        provider: Optional[str] = None,
        **kwargs
    ) -> LLMResponse:
        """
        Send a chat completion request with retry and fallback.

        Args:
            messages: List of conversation messages
            temperature: Override default temperature
            max_tokens: Override default max tokens
            provider: Force a specific provider (optional)

        Returns:
            LLMResponse with the model's response

        Raises:
            RuntimeError: If no provider is available
            Exception: The last provider error once retries and fallbacks are exhausted
        """
        if provider:
            if provider not in self._providers:
                raise RuntimeError(f"Provider '{provider}' not available")
            target = provider
        else:
            target = self._select_provider()

        if not target:
            raise RuntimeError(
                "No LLM providers available. Set GROQ_API_KEY or OPENAI_API_KEY, "
                "or run Ollama locally (ollama serve)."
            )

        tried: List[str] = []
        last_error: Optional[Exception] = None
        while target:
            tried.append(target)
            try:
                return self._chat_with_retries(target, messages, temperature, max_tokens, **kwargs)
            except Exception as e:
                last_error = e
                if provider or not self.config.auto_fallback:
                    raise
                target = self._next_fallback(tried)
                if target:
                    logger.warning("[LLM] %s failed, falling back to %s", tried[-1], target)

        raise last_error

    def _chat_with_retries(
        self,
        name: str,
        messages: List[Message],
        temperature: Optional[float],
        max_tokens: Optional[int],
        **kwargs
    ) -> LLMResponse:
        llm = self._providers[name]
        attempt = 0
        while True:
            try:
                response = llm.chat(messages=messages, temperature=temperature, max_tokens=max_tokens, **kwargs)
            except Exception as e:
                self._record_error(name, e)
                if is_rate_limit_error(e):
                    self._handle_rate_limit(name)
                    raise
                if attempt >= self.config.max_retries:
                    raise
                wait = (2 ** attempt) * 1.0  # 1s, 2s
                attempt += 1
                logger.info("[LLM] Error on %s, retrying in %.0fs (%d/%d)", name, wait, attempt, self.config.max_retries)
                self._sleep(wait)
                continue
            self._record_success(name, response)
            return response

    def _next_fallback(self, tried: List[str]) -> Optional[str]:
        selected = self._select_provider()
        if selected and selected not in tried:
            return selected
        for name in self.config.provider_priority:
            if name in self._providers and name not in tried:
                if self._providers[name].status != ProviderStatus.RATE_LIMITED:
                    return name
        return None

    def complete(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        **kwargs
    ) -> LLMResponse:
        """Single-prompt completion through the selected provider."""
        return self.chat(build_messages(prompt, system_prompt), **kwargs)

    def get_status(self) -> Dict[str, Any]:
        """Status of all providers, for health endpoints."""
        status = {"current_provider": self._current_provider, "providers": {}}
        for name, llm in self._providers.items():
            usage = self._usage[name]
            info = PROVIDER_INFO.get(name)
            status["providers"][name] = {
                "status": llm.status.value,
                "model": llm.model,
                "is_local": info.is_local if info else False,
                "requests_today": usage.requests_today,
                "tokens_today": usage.tokens_today,
                "errors": usage.errors,
            }
        return status

    def reset_daily_usage(self):
        for usage in self._usage.values():
            usage.requests_today = 0
            usage.tokens_today = 0

    def close(self):
        """Close every provider's client connections."""
        for name, llm in self._providers.items():
            try:
                llm.close()
            except Exception:
                logger.warning("Failed to close LLM provider %s", name, exc_info=True)


def get_llm_manager(settings: Optional[StudioConfig] = None) -> LLMManager:
    """Configured LLM manager; the main entry point for text generation."""
    config = LLMManagerConfig()
    if settings is not None:
        if settings.provider_priority:
            config.provider_priority = list(settings.provider_priority)
        config.api_keys = {"groq": settings.groq_api_key, "openai": settings.openai_api_key}
        config.ollama_host = settings.ollama_host
    return LLMManager(config)
