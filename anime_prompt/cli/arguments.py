"""Command line argument resolution."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Optional, Sequence

from anime_prompt.errors import MissingValueError, NoPromptError

KEY_FLAGS = ("--key", "-k")
PROMPT_FLAGS = ("--prompt", "-p")
FORGET_KEY_FLAG = "--forget-key"
HELP_FLAGS = ("--help", "-h")

USAGE = (
    "Usage: anime-prompt [--key|-k KEY] [--prompt|-p PROMPT] [--forget-key] \"keyword\"\n"
    "\n"
    "  -k, --key KEY        API key; cached in the temp directory for later runs\n"
    "  -p, --prompt PROMPT  keyword phrase (overrides a positional keyword)\n"
    "      --forget-key     drop the cached API key before resolving a new one\n"
    "  -h, --help           show this message\n"
)


class _State(enum.Enum):
    EXPECT_TOKEN = "token"
    EXPECT_KEY = "key"
    EXPECT_PROMPT = "prompt"


@dataclass(slots=True)
class ParsedArgs:
    """Resolved command line options."""

    key: Optional[str] = None
    prompt: Optional[str] = None
    forget_key: bool = False
    show_help: bool = False


def parse_args(args: Sequence[str]) -> ParsedArgs:
    """Parse *args* (without the program name) into :class:`ParsedArgs`.

    ``--prompt`` always wins over a bare keyword, whatever their order; among
    bare tokens only the first one counts.
    """
    parsed = ParsedArgs()
    flagged_prompt: Optional[str] = None
    positional: Optional[str] = None
    state = _State.EXPECT_TOKEN
    pending_flag = ""

    for token in args:
        if state is _State.EXPECT_KEY:
            parsed.key = token
            state = _State.EXPECT_TOKEN
        elif state is _State.EXPECT_PROMPT:
            flagged_prompt = token
            state = _State.EXPECT_TOKEN
        elif token in KEY_FLAGS:
            pending_flag = token
            state = _State.EXPECT_KEY
        elif token in PROMPT_FLAGS:
            pending_flag = token
            state = _State.EXPECT_PROMPT
        elif token == FORGET_KEY_FLAG:
            parsed.forget_key = True
        elif token in HELP_FLAGS:
            parsed.show_help = True
        elif positional is None:
            positional = token

    if state is not _State.EXPECT_TOKEN:
        raise MissingValueError(pending_flag)

    if parsed.show_help:
        return parsed

    prompt = flagged_prompt if flagged_prompt is not None else positional
    if prompt is None or not prompt.strip():
        raise NoPromptError()
    parsed.prompt = prompt.strip()
    return parsed
