"""Logging helpers."""

from __future__ import annotations

import logging
from pathlib import Path

from config.settings import AppConfig


def setup_logging(config: AppConfig) -> logging.Logger:
    """Configure and return a logger.

    Records go to stderr so the generated prompt on stdout stays clean. A log
    directory that cannot be created only disables the file handler.
    """
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    file_error: OSError | None = None
    if config.log_dir is not None:
        log_dir = Path(config.log_dir)
        try:
            log_dir.mkdir(parents=True, exist_ok=True)
            handlers.append(logging.FileHandler(log_dir / "application.log", encoding="utf-8"))
        except OSError as exc:
            file_error = exc

    logging.basicConfig(
        level=getattr(logging, config.log_level, logging.WARNING),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=handlers,
    )
    logger = logging.getLogger("anime_prompt")
    if file_error is not None:
        logger.warning("file logging disabled, cannot use %s: %s", config.log_dir, file_error)
    return logger
