"""Line-oriented text codec for the persisted tracker state.

Layout::

    CURRENT_MOOD: <mood>
    LAST_STRATEGY: <text>
    LAST_STRATEGY_TIME: <epoch seconds>
    MOOD_STAT: <mood>-<count>        (zero or more, sorted by mood)
    MOOD_HISTORY:
    <mood>                           (zero or more, oldest first)
    THOUGHT_JOURNAL:
    <thought>|<timestamp>            (zero or more, oldest first)
    COPING_STRATEGIES:
    <strategy>                       (zero or more, queue front first)

Existing files written in this layout must keep loading, so key labels and
separators are fixed.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Iterator

from .models import JournalEntry, TrackerConfig, TrackerState, first_run_state

logger = logging.getLogger(__name__)

CURRENT_MOOD_KEY = "CURRENT_MOOD"
LAST_STRATEGY_KEY = "LAST_STRATEGY"
LAST_STRATEGY_TIME_KEY = "LAST_STRATEGY_TIME"
MOOD_STAT_KEY = "MOOD_STAT"

MOOD_HISTORY_SENTINEL = "MOOD_HISTORY:"
THOUGHT_JOURNAL_SENTINEL = "THOUGHT_JOURNAL:"
COPING_STRATEGIES_SENTINEL = "COPING_STRATEGIES:"

STAT_SEPARATOR = "-"
JOURNAL_SEPARATOR = "|"


def _split_lines(text: str) -> list[str]:
    lines = [line.removesuffix("\r") for line in text.split("\n")]
    if lines and lines[-1] == "":
        lines.pop()
    return lines


def _key_value(line: str) -> tuple[str, str] | None:
    key, sep, value = line.partition(":")
    if not sep:
        return None
    return key, value.removeprefix(" ")


def _section(lines: Iterator[str], sentinel: str | None) -> list[str]:
    """Collect non-empty lines until ``sentinel`` (or end of input)."""

    collected: list[str] = []
    for line in lines:
        if line == sentinel:
            break
        if line:
            collected.append(line)
    return collected


def _parse_stat(value: str) -> tuple[str, int] | None:
    mood, sep, raw_count = value.rpartition(STAT_SEPARATOR)
    if not sep:
        return None
    try:
        count = int(raw_count)
    except ValueError:
        return None
    if count < 0:
        return None
    return mood, count


def _parse_journal_line(line: str) -> JournalEntry:
    text, _, timestamp = line.partition(JOURNAL_SEPARATOR)
    return JournalEntry(text, timestamp)


def decode_state(text: str | None, *, now: int | None = None) -> TrackerState:
    """Decode persisted text into a :class:`TrackerState`.

    ``None`` means there is no stored state yet and yields the first-run
    state. Malformed lines are skipped; decoding never raises.
    """

    if text is None:
        return first_run_state(int(time.time()) if now is None else now)

    lines = iter(_split_lines(text))

    current_mood = ""
    last_strategy = ""
    last_strategy_time = 0
    statistics: dict[str, int] = {}

    for line in lines:
        if line == MOOD_HISTORY_SENTINEL:
            break
        parsed = _key_value(line)
        if parsed is None:
            if line.strip():
                logger.warning("Skipping unrecognized state line %r", line)
            continue
        key, value = parsed
        if key == CURRENT_MOOD_KEY:
            current_mood = value
        elif key == LAST_STRATEGY_KEY:
            last_strategy = value
        elif key == LAST_STRATEGY_TIME_KEY:
            try:
                last_strategy_time = int(value.strip())
            except ValueError:
                logger.warning("Skipping malformed strategy time %r", value)
        elif key == MOOD_STAT_KEY:
            stat = _parse_stat(value)
            if stat is None:
                logger.warning("Skipping malformed mood statistic %r", value)
                continue
            mood, count = stat
            statistics[mood] = count
        else:
            logger.warning("Skipping unrecognized state line %r", line)

    mood_history = _section(lines, THOUGHT_JOURNAL_SENTINEL)
    journal = [_parse_journal_line(line) for line in _section(lines, COPING_STRATEGIES_SENTINEL)]
    strategies = _section(lines, None)

    return TrackerState(
        current_mood=current_mood,
        mood_history=tuple(mood_history),
        thought_journal=tuple(journal),
        coping_strategies=tuple(strategies),
        last_strategy_used=last_strategy,
        last_strategy_time=last_strategy_time,
        mood_statistics=statistics,
    )


def _tail(items: tuple, limit: int) -> tuple:
    return items[-limit:] if len(items) > limit else items


def encode_state(state: TrackerState, config: TrackerConfig) -> str:
    """Serialize ``state``; history and journal keep only the newest entries."""

    lines = [
        f"{CURRENT_MOOD_KEY}: {state.current_mood}",
        f"{LAST_STRATEGY_KEY}: {state.last_strategy_used}",
        f"{LAST_STRATEGY_TIME_KEY}: {state.last_strategy_time}",
    ]
    lines.extend(
        f"{MOOD_STAT_KEY}: {mood}{STAT_SEPARATOR}{count}"
        for mood, count in state.sorted_statistics()
    )

    lines.append(MOOD_HISTORY_SENTINEL)
    lines.extend(_tail(state.mood_history, config.max_history_items))

    lines.append(THOUGHT_JOURNAL_SENTINEL)
    lines.extend(
        f"{entry.text}{JOURNAL_SEPARATOR}{entry.timestamp}"
        for entry in _tail(state.thought_journal, config.max_history_items)
    )

    lines.append(COPING_STRATEGIES_SENTINEL)
    lines.extend(state.coping_strategies)

    return "\n".join(lines) + "\n"
