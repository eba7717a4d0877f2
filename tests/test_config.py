"""
Tests for environment-driven configuration.
"""

import pytest

from nexus_studio.config import StudioConfig

ENV_VARS = [
    "NEXUS_PROVIDER_PRIORITY",
    "NEXUS_CATALOG_DIR",
    "NEXUS_LOG_LEVEL",
    "GROQ_API_KEY",
    "OPENAI_API_KEY",
    "OLLAMA_HOST",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    # setenv first so values loaded from .env files are undone after each test
    for name in ENV_VARS:
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)


def test_defaults(tmp_path):
    config = StudioConfig.from_env(env_file=tmp_path / "missing.env")
    assert config.provider_priority == ["groq", "openai", "ollama"]
    assert config.catalog_dir is None
    assert config.log_level == "INFO"
    assert config.groq_api_key is None
    assert config.ollama_host is None


def test_environment_overrides(tmp_path, monkeypatch):
    monkeypatch.setenv("NEXUS_PROVIDER_PRIORITY", " Ollama, groq ,")
    monkeypatch.setenv("NEXUS_CATALOG_DIR", str(tmp_path))
    monkeypatch.setenv("NEXUS_LOG_LEVEL", "debug")
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")

    config = StudioConfig.from_env(env_file=tmp_path / "missing.env")

    assert config.provider_priority == ["ollama", "groq"]
    assert config.catalog_dir == tmp_path
    assert config.log_level == "DEBUG"
    assert config.openai_api_key == "sk-test"


def test_env_file_loaded_without_overriding(tmp_path, monkeypatch):
    env_file = tmp_path / ".env"
    env_file.write_text("GROQ_API_KEY=gsk-from-file\nOLLAMA_HOST=http://gpu-box:11434\nNEXUS_LOG_LEVEL=warning\n")
    monkeypatch.setenv("NEXUS_LOG_LEVEL", "error")

    config = StudioConfig.from_env(env_file=env_file)

    assert config.groq_api_key == "gsk-from-file"
    assert config.ollama_host == "http://gpu-box:11434"
    assert config.log_level == "ERROR"
