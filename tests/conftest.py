from __future__ import annotations

import pytest

from vibe.core.config import AppSettings

PROVIDER_KEY_VARS = (
    "OPENAI_API_KEY",
    "OPENROUTER_API_KEY",
    "ANTHROPIC_API_KEY",
    "VIBE_OPENAI_API_KEY",
    "VIBE_OPENROUTER_API_KEY",
    "VIBE_ANTHROPIC_API_KEY",
)


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    """No real keys, no `.env` files, no SSH markers."""

    for name in PROVIDER_KEY_VARS + ("SSH_CLIENT", "SSH_TTY", "SSH_CONNECTION", "VIBE_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setitem(AppSettings.model_config, "env_file", None)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def settings() -> AppSettings:
    return AppSettings(
        openai_api_key="sk-openai",
        openrouter_api_key="sk-openrouter",
        anthropic_api_key="sk-anthropic",
    )
