"""
Groq LLM Provider.

Fast hosted inference with a free tier (about 1,000 requests/day).
Sign up at: https://console.groq.com
"""

import os
from typing import Optional, List

from groq import Groq

from .base import LLMProvider, LLMConfig, LLMResponse, Message, ProviderStatus


class GroqProvider(LLMProvider):
    """Groq provider using the official SDK."""

    DEFAULT_MODEL = "llama-3.3-70b-versatile"

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = DEFAULT_MODEL,
        **kwargs
    ):
        self.api_key = api_key or os.environ.get("GROQ_API_KEY")
        config = LLMConfig(
            provider_name="groq",
            model=model,
            api_key=self.api_key,
            base_url="https://api.groq.com/openai/v1",
            temperature=kwargs.get("temperature", 0.4),
            max_tokens=kwargs.get("max_tokens", 1200),
            timeout=kwargs.get("timeout", 30),
        )
        super().__init__(config)

        self._client: Optional[Groq] = None
        if self.api_key:
            self._client = Groq(api_key=self.api_key, timeout=self.config.timeout)
            self._status = ProviderStatus.AVAILABLE

    def is_available(self) -> bool:
        return self._client is not None and self._status != ProviderStatus.NOT_CONFIGURED

    def chat(
        self,
        messages: List[Message],
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        **kwargs
    ) -> LLMResponse:
        if not self.is_available():
            raise RuntimeError(
                "Groq not available. Set GROQ_API_KEY environment variable.\n"
                "Get your free API key at: https://console.groq.com"
            )

        try:
            response = self._client.chat.completions.create(
                model=self.config.model,
                messages=[{"role": m.role, "content": m.content} for m in messages],
                temperature=temperature if temperature is not None else self.config.temperature,
                max_tokens=max_tokens or self.config.max_tokens,
                **kwargs
            )
        except Exception as e:
            self._mark_failure(e)
            raise

        self._status = ProviderStatus.AVAILABLE
        usage = response.usage
        return LLMResponse(
            content=response.choices[0].message.content or "",
            model=response.model,
            provider="groq",
            usage={
                "prompt_tokens": usage.prompt_tokens if usage else 0,
                "completion_tokens": usage.completion_tokens if usage else 0,
                "total_tokens": usage.total_tokens if usage else 0,
            },
            finish_reason=response.choices[0].finish_reason or "stop",
            raw_response=response,
        )

    def close(self) -> None:
        if self._client is not None:
            self._client.close()


def create_groq_provider(model: str = GroqProvider.DEFAULT_MODEL, api_key: Optional[str] = None) -> Optional[GroqProvider]:
    """GroqProvider if an API key is configured, None otherwise."""
    api_key = api_key or os.environ.get("GROQ_API_KEY")
    if not api_key:
        return None
    return GroqProvider(api_key=api_key, model=model)
