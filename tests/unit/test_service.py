from __future__ import annotations

import random

import pytest
from prometheus_client import REGISTRY

from backend.app.tracker import (
    Action,
    MemoryStateStore,
    RequestPayload,
    StateWriteError,
    TrackerConfig,
    TrackerService,
    decode_state,
    parse_tracker_config,
)
from backend.app.tracker.defaults import DEFAULT_STRATEGIES

NOW = 1_700_000_000


class _BrokenStore(MemoryStateStore):
    def save(self, text: str) -> None:
        raise StateWriteError("disk full")


def _service(store: MemoryStateStore, config: TrackerConfig | None = None) -> TrackerService:
    config = config or parse_tracker_config(None)
    return TrackerService(store, lambda: config, clock=lambda: NOW, rng=random.Random(1))


def test_first_run_then_log_mood_persists_and_reloads() -> None:
    store = MemoryStateStore()
    service = _service(store)

    first = service.handle(Action.NONE, RequestPayload())
    assert first.state.current_mood == "Neutral"
    assert first.state.mood_statistics == {"Neutral": 1}
    assert first.state.coping_strategies == DEFAULT_STRATEGIES
    assert first.applied is False

    result = service.handle_query("action=logMood&moodInput=Happy")

    assert result.applied is True
    assert result.state.current_mood == "Happy"
    assert result.state.mood_history == ("Neutral",)
    assert result.state.mood_statistics == {"Neutral": 1, "Happy": 1}
    assert decode_state(store.text) == result.state
    assert service.snapshot().state == result.state


def test_every_request_is_persisted() -> None:
    store = MemoryStateStore()
    service = _service(store)

    service.handle_query("")
    service.handle_query("action=suggestStrategy")

    assert store.saves == 2
    assert decode_state(store.text).coping_strategies[-1] == DEFAULT_STRATEGIES[0]


def test_snapshot_does_not_write() -> None:
    store = MemoryStateStore()
    result = _service(store).snapshot()

    assert store.saves == 0
    assert result.action is Action.NONE
    assert result.now == NOW


def test_history_is_trimmed_before_persisting(small_config: TrackerConfig) -> None:
    store = MemoryStateStore()
    service = _service(store, small_config)

    for mood in ("Happy", "Sad", "Happy", "Sad", "Happy"):
        service.handle_query(f"action=logMood&moodInput={mood}")

    state = decode_state(store.text)
    assert len(state.mood_history) == small_config.max_history_items
    assert state.mood_history == ("Sad", "Happy", "Sad")
    assert state.mood_statistics == {"Neutral": 1, "Happy": 3, "Sad": 2}


def test_emptied_queue_is_reseeded_on_next_load(small_config: TrackerConfig) -> None:
    store = MemoryStateStore(
        "CURRENT_MOOD: Sad\nLAST_STRATEGY: A\nLAST_STRATEGY_TIME: 5\n"
        "MOOD_HISTORY:\nTHOUGHT_JOURNAL:\nCOPING_STRATEGIES:\n"
    )

    result = _service(store, small_config).handle_query("action=useStrategy")

    assert result.state.coping_strategies == ("A", "B", "C")
    assert result.state.last_strategy_used == "A"
    assert result.state.last_strategy_time == NOW


def test_write_failure_is_surfaced() -> None:
    store = _BrokenStore()
    before = REGISTRY.get_sample_value("tracker_state_write_errors_total")

    with pytest.raises(StateWriteError):
        _service(store).handle_query("action=logMood&moodInput=Sad")

    assert REGISTRY.get_sample_value("tracker_state_write_errors_total") == before + 1
    assert store.text is None


def test_multiline_thought_cannot_inject_sections() -> None:
    store = MemoryStateStore()
    service = _service(store)

    result = service.handle_query(
        "action=addThought&thoughtInput=rough+day%0D%0ACOPING_STRATEGIES:%0Aevil"
    )

    assert result.state.thought_journal[-1].text == "rough day COPING_STRATEGIES: evil"
    assert result.state.coping_strategies == DEFAULT_STRATEGIES
    assert decode_state(store.text) == result.state


def test_whitespace_only_custom_strategy_is_kept() -> None:
    store = MemoryStateStore()
    service = _service(store)

    result = service.handle_query("action=addCustomStrategy&newStrategy=+++")

    assert result.state.coping_strategies[-1] == "   "
    assert decode_state(store.text) == result.state
    assert service.snapshot().state.coping_strategies == result.state.coping_strategies
