"""Configuration helpers for the anime prompt generator."""

from __future__ import annotations

import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

API_KEY_ENV = "GENAI_API_KEY"
KEY_FILE_NAME = "anime_prompt_key"
HISTORY_FILE_NAME = "anime_prompt_history.json"

DEFAULT_MODELS = {
    "gemini": "gemini-2.0-flash",
    "gpt": "gpt-4o-mini",
    "claude": "claude-3-haiku-20240307",
}


@dataclass(slots=True)
class AppConfig:
    """Centralized application configuration."""

    state_dir: Path = field(default_factory=lambda: Path(tempfile.gettempdir()))
    backend: str = "gemini"
    model: Optional[str] = None
    request_timeout_s: float = 30.0
    history_limit: int = 5
    env_api_key: Optional[str] = None
    log_dir: Optional[Path] = None
    log_level: str = "WARNING"
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def credential_path(self) -> Path:
        return self.state_dir / KEY_FILE_NAME

    @property
    def history_path(self) -> Path:
        return self.state_dir / HISTORY_FILE_NAME

    def model_for(self, backend: str) -> str:
        """Return the configured model, or the default one for *backend*."""
        if self.model:
            return self.model
        return DEFAULT_MODELS.get(backend.lower(), DEFAULT_MODELS["gemini"])


def _load_env_file(path: Path) -> None:
    """Populate environment variables from a simple KEY=VALUE .env file."""
    if not path.exists():
        return

    for line in path.read_text(encoding="utf-8").splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#") or "=" not in stripped:
            continue
        key, value = stripped.split("=", 1)
        os.environ[key.strip()] = value.strip()


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        return default
    return value if value > 0 else default


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        return default
    return value if value > 0 else default


def load_config(config_path: Optional[str] = None) -> AppConfig:
    """Return an AppConfig instance with environment-aware settings."""
    env_path = Path(config_path) if config_path else Path(".env")
    _load_env_file(env_path)

    state_dir_env = os.getenv("ANIME_PROMPT_STATE_DIR")
    state_dir = Path(state_dir_env).expanduser() if state_dir_env else Path(tempfile.gettempdir())

    log_dir_env = os.getenv("ANIME_PROMPT_LOG_DIR")
    log_dir = Path(log_dir_env).expanduser() if log_dir_env else None

    # Blank values are treated as unset.
    env_api_key = (os.getenv(API_KEY_ENV) or "").strip() or None

    metadata: dict[str, Any] = {}
    openai_base_url = os.getenv("OPENAI_BASE_URL")
    if openai_base_url:
        metadata["openai_base_url"] = openai_base_url

    return AppConfig(
        state_dir=state_dir,
        backend=(os.getenv("ANIME_PROMPT_BACKEND") or "gemini").strip().lower(),
        model=os.getenv("ANIME_PROMPT_MODEL") or None,
        request_timeout_s=_env_float("ANIME_PROMPT_TIMEOUT", 30.0),
        history_limit=_env_int("ANIME_PROMPT_HISTORY_LIMIT", 5),
        env_api_key=env_api_key,
        log_dir=log_dir,
        log_level=(os.getenv("ANIME_PROMPT_LOG_LEVEL") or "WARNING").upper(),
        metadata=metadata,
    )
