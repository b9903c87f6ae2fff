from __future__ import annotations

import random
import time
from dataclasses import replace
from datetime import datetime

from .models import JournalEntry, TrackerConfig, TrackerState
from .request import Action, RequestPayload

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M"


def format_timestamp(now: int) -> str:
    return datetime.fromtimestamp(now).strftime(TIMESTAMP_FORMAT)


def seed_strategies(state: TrackerState, config: TrackerConfig) -> TrackerState:
    """Fill an empty strategy queue from the default pool."""

    if state.coping_strategies:
        return state
    return replace(state, coping_strategies=config.default_strategies)


def trim_state(state: TrackerState, config: TrackerConfig) -> TrackerState:
    """Drop the oldest history and journal entries beyond the retention cap."""

    limit = config.max_history_items
    if len(state.mood_history) <= limit and len(state.thought_journal) <= limit:
        return state
    return replace(
        state,
        mood_history=state.mood_history[-limit:],
        thought_journal=state.thought_journal[-limit:],
    )


def _log_mood(state: TrackerState, mood: str) -> TrackerState:
    statistics = dict(state.mood_statistics)
    statistics[mood] = statistics.get(mood, 0) + 1
    history = state.mood_history
    if mood != state.current_mood:
        history = (*history, state.current_mood)
    return replace(
        state,
        current_mood=mood,
        mood_history=history,
        mood_statistics=statistics,
    )


def apply_action(
    state: TrackerState,
    config: TrackerConfig,
    action: Action,
    payload: RequestPayload,
    *,
    now: int | None = None,
    rng: random.Random | None = None,
) -> TrackerState:
    """Return the state after applying a single action.

    Unmet preconditions (empty input, empty queue, empty pool) leave the state
    untouched. The clock and random source are injectable for tests.
    """

    if action is Action.LOG_MOOD and payload.mood:
        return _log_mood(state, payload.mood)

    if action is Action.ADD_THOUGHT and payload.thought:
        timestamp = ""
        if config.enable_timestamps:
            timestamp = format_timestamp(int(time.time()) if now is None else now)
        entry = JournalEntry(payload.thought, timestamp)
        return replace(state, thought_journal=(*state.thought_journal, entry))

    if action is Action.SUGGEST_STRATEGY and state.coping_strategies:
        front, *rest = state.coping_strategies
        return replace(state, coping_strategies=(*rest, front))

    if action is Action.USE_STRATEGY and state.coping_strategies:
        return replace(
            state,
            last_strategy_used=state.coping_strategies[0],
            last_strategy_time=int(time.time()) if now is None else now,
        )

    if action is Action.ADD_RANDOM_STRATEGY and config.default_strategies:
        pick = (rng or random).choice(config.default_strategies)
        return replace(state, coping_strategies=(*state.coping_strategies, pick))

    if action is Action.ADD_CUSTOM_STRATEGY and payload.strategy_text:
        return replace(
            state,
            coping_strategies=(*state.coping_strategies, payload.strategy_text),
        )

    return state
