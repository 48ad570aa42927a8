"""Command line entry point for the anime prompt generator."""

from __future__ import annotations

import logging
import sys
from typing import Optional, Sequence

from anime_prompt.cli.arguments import USAGE, parse_args
from anime_prompt.errors import (
    ArgumentError,
    CredentialError,
    CredentialPersistError,
    GenerationError,
)
from anime_prompt.optimization.prompt_generator import PromptGenerator
from anime_prompt.services.credential_store import (
    CredentialStore,
    FileCredentialStore,
    resolve_credential,
)
from anime_prompt.services.history_service import Exchange, GenerationHistoryService
from anime_prompt.utils.logging import setup_logging
from config.settings import AppConfig, load_config

logger = logging.getLogger("anime_prompt")

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2
EXIT_INTERRUPTED = 130


def _error(message: str) -> None:
    print(f"Error: {message}", file=sys.stderr)


def main(
    argv: Optional[Sequence[str]] = None,
    *,
    config: Optional[AppConfig] = None,
    generator: Optional[PromptGenerator] = None,
    store: Optional[CredentialStore] = None,
    history: Optional[GenerationHistoryService] = None,
) -> int:
    """Resolve arguments and credential, generate, print, and record history."""
    args = list(sys.argv[1:] if argv is None else argv)
    config = config or load_config()
    setup_logging(config)

    try:
        parsed = parse_args(args)
    except ArgumentError as exc:
        _error(str(exc))
        print(USAGE, file=sys.stderr)
        return EXIT_USAGE
    if parsed.show_help:
        print(USAGE)
        return EXIT_OK

    store = store if store is not None else FileCredentialStore(config.credential_path)
    if parsed.forget_key:
        try:
            store.clear()
        except CredentialPersistError as exc:
            logger.warning("cached API key kept: %s", exc)
            print(f"Warning: {exc}", file=sys.stderr)
        else:
            logger.info("cached API key removed")

    try:
        resolution = resolve_credential(store, parsed.key, config.env_api_key)
    except CredentialError as exc:
        _error(str(exc))
        return EXIT_FAILURE
    if resolution.persist_error is not None:
        print(f"Warning: {resolution.persist_error}", file=sys.stderr)

    history = history or GenerationHistoryService(config.history_path, config.history_limit)
    log = history.load()
    generator = generator or PromptGenerator(config)

    print(f'Generating prompt for: "{parsed.prompt}"')
    try:
        result = generator.generate(log.as_context(), parsed.prompt, resolution.credential)
    except GenerationError as exc:
        _error(str(exc))
        return EXIT_FAILURE
    except KeyboardInterrupt:
        _error("interrupted")
        return EXIT_INTERRUPTED

    print("\n=== GENERATED PROMPT ===")
    print(result.prompt)
    print("\n=== NEGATIVE PROMPT ===")
    print(result.negative_prompt)

    try:
        history.record(log, Exchange(input=parsed.prompt, output=result.prompt))
    except OSError as exc:
        logger.warning("history not saved: %s", exc)
    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
