"""API key caching and resolution."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Protocol

from anime_prompt.errors import CredentialPersistError, MissingCredentialError
from config.settings import API_KEY_ENV

logger = logging.getLogger(__name__)

SOURCE_CACHE = "cache"
SOURCE_CLI = "cli"
SOURCE_ENV = "env"


@dataclass(frozen=True, slots=True)
class Credential:
    """An API key together with where it was found."""

    value: str = field(repr=False)
    source: str


@dataclass(slots=True)
class CredentialResolution:
    """Outcome of a resolution; persist_error is set when caching failed."""

    credential: Credential
    persist_error: Optional[CredentialPersistError] = None


class CredentialStore(Protocol):
    """Read/write contract for the cached API key."""

    def read(self) -> Optional[str]: ...

    def write(self, value: str) -> None: ...

    def clear(self) -> None: ...


class FileCredentialStore:
    """Keep the raw key in a single file, normally in the temp directory."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def read(self) -> Optional[str]:
        """Return the cached key, or None when absent, blank or unreadable."""
        if not self.path.exists():
            return None
        try:
            contents = self.path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            logger.debug("credential cache %s unreadable: %s", self.path, exc)
            return None
        return contents.strip() or None

    def write(self, value: str) -> None:
        """Overwrite the cache; the file is readable by its owner only."""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd = os.open(self.path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
            with os.fdopen(fd, "w", encoding="utf-8") as fp:
                # O_CREAT mode is ignored for a file that already exists
                os.chmod(self.path, 0o600)
                fp.write(value)
        except OSError as exc:
            raise CredentialPersistError(
                f"could not cache API key in {self.path}: {exc}"
            ) from exc

    def clear(self) -> None:
        try:
            self.path.unlink()
        except FileNotFoundError:
            return
        except OSError as exc:
            raise CredentialPersistError(
                f"could not remove cached API key {self.path}: {exc}"
            ) from exc


class MemoryCredentialStore:
    """In-memory store, mainly for tests."""

    def __init__(self, value: Optional[str] = None, *, fail_writes: bool = False) -> None:
        self.value = value
        self.fail_writes = fail_writes
        self.writes = 0

    def read(self) -> Optional[str]:
        if self.value is None:
            return None
        return self.value.strip() or None

    def write(self, value: str) -> None:
        self.writes += 1
        if self.fail_writes:
            raise CredentialPersistError("credential store is read-only")
        self.value = value

    def clear(self) -> None:
        self.value = None


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    return value.strip() or None


def resolve_credential(
    store: CredentialStore,
    cli_supplied: Optional[str] = None,
    env_value: Optional[str] = None,
) -> CredentialResolution:
    """Resolve the API key: cache first, then the CLI flag, then the environment.

    A cached value always wins, even over a freshly supplied ``--key``. Keys
    taken from the CLI or environment are written back to the store once; a
    failed write is reported on the result instead of raised.
    """
    cached = store.read()
    if cached:
        logger.debug("using cached API key")
        return CredentialResolution(Credential(cached, SOURCE_CACHE))

    cli_key = _clean(cli_supplied)
    env_key = _clean(env_value)
    if cli_key:
        credential = Credential(cli_key, SOURCE_CLI)
    elif env_key:
        credential = Credential(env_key, SOURCE_ENV)
    else:
        raise MissingCredentialError(API_KEY_ENV)

    persist_error: Optional[CredentialPersistError] = None
    try:
        store.write(credential.value)
    except CredentialPersistError as exc:
        logger.warning("API key not cached: %s", exc)
        persist_error = exc
    else:
        logger.debug("cached API key from %s", credential.source)
    return CredentialResolution(credential, persist_error)
