"""Argument resolution tests."""

from __future__ import annotations

import pytest

from anime_prompt.cli.arguments import parse_args
from anime_prompt.errors import MissingValueError, NoPromptError


def test_positional_keyword_becomes_prompt():
    parsed = parse_args(["anime knight defending a gate"])

    assert parsed.prompt == "anime knight defending a gate"
    assert parsed.key is None


@pytest.mark.parametrize(
    "args",
    [
        ["--prompt", "cat girl", "ignored"],
        ["ignored", "-p", "cat girl"],
        ["-p", "cat girl"],
    ],
)
def test_prompt_flag_wins_over_positional(args):
    assert parse_args(args).prompt == "cat girl"


def test_first_positional_token_is_kept():
    parsed = parse_args(["first", "second"])

    assert parsed.prompt == "first"


def test_key_flags_are_parsed():
    assert parse_args(["--key", "abc", "mecha"]).key == "abc"
    assert parse_args(["mecha", "-k", "xyz"]).key == "xyz"


def test_flag_value_is_taken_verbatim():
    parsed = parse_args(["-p", "--key"])

    assert parsed.prompt == "--key"
    assert parsed.key is None


def test_prompt_is_stripped():
    assert parse_args(["  sakura at dusk  "]).prompt == "sakura at dusk"


@pytest.mark.parametrize("flag", ["--key", "-k", "--prompt", "-p"])
def test_trailing_flag_without_value(flag):
    with pytest.raises(MissingValueError) as excinfo:
        parse_args(["keyword", flag])

    assert excinfo.value.flag == flag
    assert flag in str(excinfo.value)


@pytest.mark.parametrize("args", [[], ["--key", "abc"], ["   "], ["--forget-key"]])
def test_missing_prompt(args):
    with pytest.raises(NoPromptError):
        parse_args(args)


def test_forget_key_flag():
    parsed = parse_args(["--forget-key", "-k", "new", "dragon"])

    assert parsed.forget_key is True
    assert parsed.key == "new"
    assert parsed.prompt == "dragon"


def test_help_does_not_require_prompt():
    parsed = parse_args(["--help"])

    assert parsed.show_help is True
    assert parsed.prompt is None
