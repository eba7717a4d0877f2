"""
Ollama LLM Provider.

Runs open models locally: no API key, no rate limits, works offline.

Install: brew install ollama (or download from https://ollama.ai)
Pull a model: ollama pull mistral:7b
"""

import logging
import os
from typing import Optional, List

import requests

from .base import LLMProvider, LLMConfig, LLMResponse, Message, ProviderStatus

logger = logging.getLogger(__name__)


class OllamaProvider(LLMProvider):
    """Ollama provider talking to the local HTTP API."""

    DEFAULT_MODEL = "mistral:7b"
    DEFAULT_HOST = "http://localhost:11434"

    def __init__(
        self,
        model: str = DEFAULT_MODEL,
        host: Optional[str] = None,
        session: Optional[requests.Session] = None,
        **kwargs
    ):
        self.host = (host or os.environ.get("OLLAMA_HOST") or self.DEFAULT_HOST).rstrip("/")
        config = LLMConfig(
            provider_name="ollama",
            model=model,
            base_url=self.host,
            temperature=kwargs.get("temperature", 0.4),
            max_tokens=kwargs.get("max_tokens", 1200),
            timeout=kwargs.get("timeout", 120),  # Local inference can be slower
        )
        super().__init__(config)
        self._session = session or requests.Session()
        self._check_availability()

    def _check_availability(self):
        """Check if Ollama is running and the model is pulled."""
        try:
            response = self._session.get(f"{self.host}/api/tags", timeout=5)
        except requests.RequestException:
            self._status = ProviderStatus.NOT_CONFIGURED
            return

        if response.status_code != 200:
            self._status = ProviderStatus.ERROR
            return

        self._status = ProviderStatus.AVAILABLE
        model_names = [m.get("name", "") for m in response.json().get("models", [])]
        if not any(self.config.model in name for name in model_names):
            logger.warning(
                "Ollama model '%s' not found locally (available: %s). Pull it with: ollama pull %s",
                self.config.model, model_names, self.config.model,
            )

    def is_available(self) -> bool:
        return self._status == ProviderStatus.AVAILABLE

    def chat(
        self,
        messages: List[Message],
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        **kwargs
    ) -> LLMResponse:
        # ERROR from an earlier failed request does not block; an unreachable server does
        if self._status == ProviderStatus.NOT_CONFIGURED:
            raise RuntimeError(
                "Ollama not available. Start it with `ollama serve` "
                f"and pull a model: ollama pull {self.config.model}"
            )

        payload = {
            "model": self.config.model,
            "messages": [{"role": m.role, "content": m.content} for m in messages],
            "stream": False,
            "options": {
                "temperature": temperature if temperature is not None else self.config.temperature,
                "num_predict": max_tokens or self.config.max_tokens,
            },
        }

        try:
            response = self._session.post(
                f"{self.host}/api/chat",
                json=payload,
                timeout=self.config.timeout,
            )
            response.raise_for_status()
            data = response.json()
        except requests.exceptions.Timeout as e:
            raise RuntimeError(
                f"Ollama request timed out after {self.config.timeout}s. "
                "Try a smaller model like 'phi3:mini'."
            ) from e
        except requests.RequestException as e:
            self._status = ProviderStatus.ERROR
            raise RuntimeError(f"Ollama request failed: {e}") from e

        self._status = ProviderStatus.AVAILABLE
        prompt_tokens = data.get("prompt_eval_count", 0)
        completion_tokens = data.get("eval_count", 0)
        return LLMResponse(
            content=data["message"]["content"],
            model=data.get("model", self.config.model),
            provider="ollama",
            usage={
                "prompt_tokens": prompt_tokens,
                "completion_tokens": completion_tokens,
                "total_tokens": prompt_tokens + completion_tokens,
            },
            finish_reason=data.get("done_reason", "stop"),
            raw_response=data,
        )

    def close(self) -> None:
        self._session.close()


def create_ollama_provider(model: str = OllamaProvider.DEFAULT_MODEL, host: Optional[str] = None) -> Optional[OllamaProvider]:
    """OllamaProvider if a local server answers, None otherwise."""
    provider = OllamaProvider(model=model, host=host)
    if provider.is_available():
        return provider
    provider.close()
    return None
