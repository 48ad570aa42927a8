"""History log tests."""

from __future__ import annotations

import json

import pytest

from anime_prompt.services.history_service import Exchange, GenerationHistoryService, HistoryLog


def test_push_past_limit_keeps_most_recent_in_order():
    log = HistoryLog(limit=3)
    for index in range(5):
        log.push(Exchange(input=f"k{index}", output=f"p{index}"))

    assert [item.input for item in log.as_context()] == ["k2", "k3", "k4"]
    assert len(log) == 3


def test_as_context_returns_copy():
    log = HistoryLog(limit=2)
    log.push(Exchange(input="a", output="b"))

    context = log.as_context()
    context.clear()

    assert len(log) == 1


def test_limit_must_be_positive():
    with pytest.raises(ValueError):
        HistoryLog(limit=0)


def test_service_round_trip_respects_limit(tmp_path):
    path = tmp_path / "history.json"
    service = GenerationHistoryService(path, limit=2)

    log = service.load()
    service.record(log, Exchange(input="knight", output="(anime knight:1.2)"))
    service.record(log, Exchange(input="witch", output="(anime witch:1.1)"))
    service.record(log, Exchange(input="dragon", output="(dragon:1.3)"))

    stored = json.loads(path.read_text(encoding="utf-8"))
    assert stored == [
        {"input": "witch", "output": "(anime witch:1.1)"},
        {"input": "dragon", "output": "(dragon:1.3)"},
    ]
    assert service.load().as_context() == log.as_context()
    assert not list(tmp_path.glob(".*tmp*"))


def test_load_trims_oversized_file(tmp_path):
    path = tmp_path / "history.json"
    path.write_text(
        json.dumps([{"input": str(i), "output": str(i)} for i in range(10)]),
        encoding="utf-8",
    )

    log = GenerationHistoryService(path, limit=5).load()

    assert [item.input for item in log.as_context()] == ["5", "6", "7", "8", "9"]


@pytest.mark.parametrize(
    "content",
    ["not json", '{"input": "a"}', '[{"input": 1, "output": "x"}, "junk"]'],
)
def test_damaged_history_starts_empty(tmp_path, content):
    path = tmp_path / "history.json"
    path.write_text(content, encoding="utf-8")

    log = GenerationHistoryService(path).load()

    assert log.as_context() == []
