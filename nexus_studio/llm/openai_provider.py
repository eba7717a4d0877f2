"""
OpenAI provider.

Works with the public OpenAI API and any compatible endpoint set through
OPENAI_BASE_URL.
"""

import logging
import os
from typing import Optional, List

from openai import OpenAI

from .base import LLMProvider, LLMConfig, LLMResponse, Message, ProviderStatus

logger = logging.getLogger(__name__)


class OpenAIProvider(LLMProvider):
    """OpenAI provider using the official SDK."""

    DEFAULT_MODEL = "gpt-4o-mini"

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = DEFAULT_MODEL,
        base_url: Optional[str] = None,
        **kwargs
    ):
        self.api_key = api_key or os.getenv("OPENAI_API_KEY")
        self.base_url = base_url or os.getenv("OPENAI_BASE_URL")

        config = LLMConfig(
            provider_name="openai",
            model=model,
            api_key=self.api_key,
            base_url=self.base_url,
            **kwargs
        )
        super().__init__(config)

        self._client: Optional[OpenAI] = None
        self._init_client()

    def _init_client(self):
        if not self.api_key:
            self._status = ProviderStatus.NOT_CONFIGURED
            return

        client_kwargs = {"api_key": self.api_key, "timeout": self.config.timeout}
        if self.base_url:
            client_kwargs["base_url"] = self.base_url

        try:
            self._client = OpenAI(**client_kwargs)
            self._status = ProviderStatus.AVAILABLE
        except Exception as e:
            logger.warning("Failed to initialize OpenAI client: %s", e)
            self._status = ProviderStatus.ERROR

    def is_available(self) -> bool:
        return self._client is not None and self.api_key is not None

    def chat(
        self,
        messages: List[Message],
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        **kwargs
    ) -> LLMResponse:
        if not self.is_available():
            raise RuntimeError("OpenAI provider is not available. Check OPENAI_API_KEY.")

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
            provider="openai",
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


def create_openai_provider(model: str = OpenAIProvider.DEFAULT_MODEL, api_key: Optional[str] = None) -> Optional[OpenAIProvider]:
    """OpenAIProvider if an API key is configured, None otherwise."""
    api_key = api_key or os.getenv("OPENAI_API_KEY")
    if not api_key:
        return None
    return OpenAIProvider(api_key=api_key, model=model)
