"""
Runtime configuration for the Nexus studio.

Values come from the environment; an optional `.env` file at the project root
is loaded first and never overrides variables that are already set.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

PROJECT_ROOT = Path(__file__).resolve().parents[1]

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

_DEFAULT_PRIORITY = ["groq", "openai", "ollama"]


def _split_list(value: Optional[str]) -> list[str]:
    if not value:
        return []
    return [item.strip().lower() for item in value.split(",") if item.strip()]


@dataclass
class StudioConfig:
    """Settings shared by the CLI and the web app."""
    provider_priority: list[str] = field(default_factory=lambda: list(_DEFAULT_PRIORITY))
    catalog_dir: Optional[Path] = None
    log_level: str = "INFO"
    groq_api_key: Optional[str] = None
    openai_api_key: Optional[str] = None
    ollama_host: Optional[str] = None

    @classmethod
    def from_env(cls, env_file: Optional[Path] = None) -> "StudioConfig":
        load_dotenv(env_file or PROJECT_ROOT / ".env", override=False)

        catalog_dir = os.getenv("NEXUS_CATALOG_DIR")
        return cls(
            provider_priority=_split_list(os.getenv("NEXUS_PROVIDER_PRIORITY")) or list(_DEFAULT_PRIORITY),
            catalog_dir=Path(catalog_dir).expanduser() if catalog_dir else None,
            log_level=os.getenv("NEXUS_LOG_LEVEL", "INFO").upper(),
            groq_api_key=os.getenv("GROQ_API_KEY"),
            openai_api_key=os.getenv("OPENAI_API_KEY"),
            ollama_host=os.getenv("OLLAMA_HOST"),
        )


def configure_logging(level: str = "INFO") -> None:
    """Install the studio log format on the root logger."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
    )
