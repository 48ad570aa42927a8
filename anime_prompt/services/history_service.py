"""Conversation history tracking."""

from __future__ import annotations

import json
import logging
import os
from collections import deque
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Iterable, List

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Exchange:
    """One keyword and the prompt generated for it."""

    input: str
    output: str


class HistoryLog:
    """Bounded FIFO of recent exchanges, oldest first."""

    def __init__(self, limit: int = 5, exchanges: Iterable[Exchange] = ()) -> None:
        if limit <= 0:
            raise ValueError("history limit must be positive")
        self.limit = limit
        self._entries: deque[Exchange] = deque(exchanges, maxlen=limit)

    def push(self, exchange: Exchange) -> None:
        """Append an exchange, evicting the oldest one past the limit."""
        self._entries.append(exchange)

    def as_context(self) -> List[Exchange]:
        """Return the retained exchanges, most recent last."""
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)


class GenerationHistoryService:
    """Simple JSON-backed history store."""

    def __init__(self, history_path: Path, limit: int = 5) -> None:
        self.history_path = history_path
        self.limit = limit

    def load(self) -> HistoryLog:
        """Read the log from disk; a missing or damaged file gives an empty log."""
        log = HistoryLog(self.limit)
        if not self.history_path.exists():
            return log

        try:
            data = json.loads(self.history_path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            logger.debug("history load failed, starting empty: %s", exc)
            return log

        if not isinstance(data, list):
            logger.debug("history file %s is not a list, ignoring it", self.history_path)
            return log

        for item in data:
            if not isinstance(item, dict):
                continue
            text_in = item.get("input")
            text_out = item.get("output")
            if isinstance(text_in, str) and isinstance(text_out, str):
                log.push(Exchange(input=text_in, output=text_out))
        return log

    def save(self, log: HistoryLog) -> None:
        """Write the log back to disk atomically (temp file, then replace)."""
        self.history_path.parent.mkdir(parents=True, exist_ok=True)
        payload = json.dumps([asdict(item) for item in log.as_context()], indent=2, ensure_ascii=False)
        tmp_file = self.history_path.with_name(f".{self.history_path.name}.tmp-{os.getpid()}")
        try:
            tmp_file.write_text(payload, encoding="utf-8")
            os.replace(tmp_file, self.history_path)
        finally:
            if tmp_file.exists():
                try:
                    tmp_file.unlink()
                except OSError as exc:
                    logger.debug("cleanup temp file failed: %s", exc)

    def record(self, log: HistoryLog, exchange: Exchange) -> None:
        """Append *exchange* to *log* and persist it."""
        log.push(exchange)
        self.save(log)
