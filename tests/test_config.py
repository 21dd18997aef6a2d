from __future__ import annotations

import pytest

from vibe.core.config import AppSettings, get_user_config_dir


def test_provider_keys_read_from_bare_names(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-a")
    monkeypatch.setenv("OPENROUTER_API_KEY", "sk-b")
    monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-c")

    settings = AppSettings()

    assert (settings.openai_api_key, settings.openrouter_api_key, settings.anthropic_api_key) == (
        "sk-a",
        "sk-b",
        "sk-c",
    )


def test_prefixed_settings(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("VIBE_MERGE_MODEL", "gpt-4o")
    monkeypatch.setenv("VIBE_HTTP_TIMEOUT_SECONDS", "30")

    settings = AppSettings()

    assert settings.merge_model == "gpt-4o"
    assert settings.http_timeout_seconds == 30


def test_defaults():
    settings = AppSettings()

    assert settings.openai_api_key is None
    assert settings.anthropic_max_tokens == 2048
    assert settings.code_timeout_seconds == 180
    assert settings.max_file_bytes == 5 * 1024 * 1024


def test_explicit_env_file(tmp_path):
    env_file = tmp_path / "custom.env"
    env_file.write_text("ANTHROPIC_API_KEY=from-file\n", encoding="utf-8")

    assert AppSettings(_env_file=env_file).anthropic_api_key == "from-file"


def test_user_config_dir_honours_xdg(tmp_path, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr("sys.platform", "linux")
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))

    assert get_user_config_dir() == tmp_path / "vibe"
