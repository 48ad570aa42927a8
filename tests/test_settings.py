"""Configuration loading tests."""

from __future__ import annotations

from pathlib import Path

from config.settings import AppConfig, load_config

ENV_NAMES = (
    "GENAI_API_KEY",
    "ANIME_PROMPT_BACKEND",
    "ANIME_PROMPT_MODEL",
    "ANIME_PROMPT_TIMEOUT",
    "ANIME_PROMPT_HISTORY_LIMIT",
    "ANIME_PROMPT_STATE_DIR",
    "ANIME_PROMPT_LOG_DIR",
    "ANIME_PROMPT_LOG_LEVEL",
    "OPENAI_BASE_URL",
)


def clear_env(monkeypatch):
    for name in ENV_NAMES:
        monkeypatch.delenv(name, raising=False)


def test_defaults(monkeypatch, tmp_path):
    clear_env(monkeypatch)

    config = load_config(str(tmp_path / "missing.env"))

    assert config.backend == "gemini"
    assert config.model_for("gemini") == "gemini-2.0-flash"
    assert config.request_timeout_s == 30.0
    assert config.history_limit == 5
    assert config.env_api_key is None
    assert config.credential_path.name == "anime_prompt_key"


def test_env_file_and_variables(monkeypatch, tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text(
        "\n".join(
            [
                "# comment",
                "GENAI_API_KEY = from-file",
                f"ANIME_PROMPT_STATE_DIR={tmp_path}",
                "ANIME_PROMPT_BACKEND=GPT",
                "ANIME_PROMPT_TIMEOUT=12.5",
                "ANIME_PROMPT_HISTORY_LIMIT=3",
                "OPENAI_BASE_URL=https://example.invalid/v1",
            ]
        ),
        encoding="utf-8",
    )
    for name in ENV_NAMES:
        # registers an undo so values loaded from the file are dropped afterwards
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)

    config = load_config(str(env_file))

    assert config.env_api_key == "from-file"
    assert config.state_dir == Path(tmp_path)
    assert config.history_path == Path(tmp_path) / "anime_prompt_history.json"
    assert config.backend == "gpt"
    assert config.model_for("gpt") == "gpt-4o-mini"
    assert config.request_timeout_s == 12.5
    assert config.history_limit == 3
    assert config.metadata["openai_base_url"] == "https://example.invalid/v1"


def test_invalid_numbers_fall_back(monkeypatch, tmp_path):
    clear_env(monkeypatch)
    monkeypatch.setenv("ANIME_PROMPT_TIMEOUT", "soon")
    monkeypatch.setenv("ANIME_PROMPT_HISTORY_LIMIT", "-2")
    monkeypatch.setenv("GENAI_API_KEY", "   ")

    config = load_config(str(tmp_path / "missing.env"))

    assert config.request_timeout_s == 30.0
    assert config.history_limit == 5
    assert config.env_api_key is None


def test_explicit_model_wins():
    assert AppConfig(model="gemini-2.5-pro").model_for("claude") == "gemini-2.5-pro"
