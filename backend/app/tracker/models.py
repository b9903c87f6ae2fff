from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import NamedTuple

NEUTRAL_MOOD = "Neutral"
NO_STRATEGY_YET = "None yet"


class TrackerError(Exception):
    """Base class for tracker failures surfaced to callers."""


class StateWriteError(TrackerError):
    """Persisting the tracker state failed; the previous file stays authoritative."""


class UnknownMoodError(TrackerError, KeyError):
    """A mood label has no configured glyph."""

    def __init__(self, mood: str) -> None:
        super().__init__(mood)
        self.mood = mood

    def __str__(self) -> str:
        return f"no glyph configured for mood {self.mood!r}"


def _frozen_mapping(value: Mapping[str, object]) -> Mapping:
    return MappingProxyType(dict(value))


@dataclass(frozen=True)
class TrackerConfig:
    """Per-run tracker configuration. Never mutated after loading."""

    available_moods: tuple[str, ...]
    mood_glyphs: Mapping[str, str]
    default_strategies: tuple[str, ...]
    max_history_items: int = 50
    enable_timestamps: bool = True

    def __post_init__(self) -> None:
        if self.max_history_items < 1:
            raise ValueError("max_history_items must be positive")
        object.__setattr__(self, "available_moods", tuple(self.available_moods))
        object.__setattr__(self, "default_strategies", tuple(self.default_strategies))
        object.__setattr__(self, "mood_glyphs", _frozen_mapping(self.mood_glyphs))

    def glyph_for(self, mood: str) -> str:
        try:
            return self.mood_glyphs[mood]
        except KeyError:
            raise UnknownMoodError(mood) from None


class JournalEntry(NamedTuple):
    text: str
    timestamp: str = ""


@dataclass(frozen=True)
class TrackerState:
    """Snapshot of everything persisted between invocations.

    Instances are immutable: transforms return a new state via
    :func:`dataclasses.replace`. ``coping_strategies`` is a queue whose front
    is index 0.
    """

    current_mood: str = ""
    mood_history: tuple[str, ...] = ()
    thought_journal: tuple[JournalEntry, ...] = ()
    coping_strategies: tuple[str, ...] = ()
    last_strategy_used: str = ""
    last_strategy_time: int = 0
    mood_statistics: Mapping[str, int] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "mood_history", tuple(self.mood_history))
        object.__setattr__(
            self,
            "thought_journal",
            tuple(JournalEntry(*entry) for entry in self.thought_journal),
        )
        object.__setattr__(self, "coping_strategies", tuple(self.coping_strategies))
        stats = {mood: count for mood, count in sorted(self.mood_statistics.items())}
        if any(count < 0 for count in stats.values()):
            raise ValueError("mood statistics cannot be negative")
        object.__setattr__(self, "mood_statistics", _frozen_mapping(stats))

    def sorted_statistics(self) -> list[tuple[str, int]]:
        return sorted(self.mood_statistics.items())

    @property
    def next_strategy(self) -> str | None:
        return self.coping_strategies[0] if self.coping_strategies else None


def first_run_state(now: int) -> TrackerState:
    """State used when no persisted file exists yet."""

    return TrackerState(
        current_mood=NEUTRAL_MOOD,
        last_strategy_used=NO_STRATEGY_YET,
        last_strategy_time=now,
        mood_statistics={NEUTRAL_MOOD: 1},
    )
