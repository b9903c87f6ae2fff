from __future__ import annotations

from pydantic import BaseModel, Field

from ..tracker import TrackerConfig, TrackerState


class JournalEntryModel(BaseModel):
    text: str
    timestamp: str = ""


class MoodStatistic(BaseModel):
    mood: str
    count: int = Field(..., ge=0)


class StateResponse(BaseModel):
    current_mood: str
    mood_history: list[str]
    thought_journal: list[JournalEntryModel]
    coping_strategies: list[str]
    next_strategy: str | None
    last_strategy_used: str
    last_strategy_time: int
    mood_statistics: list[MoodStatistic]

    @classmethod
    def from_state(cls, state: TrackerState) -> StateResponse:
        return cls(
            current_mood=state.current_mood,
            mood_history=list(state.mood_history),
            thought_journal=[
                JournalEntryModel(text=entry.text, timestamp=entry.timestamp)
                for entry in state.thought_journal
            ],
            coping_strategies=list(state.coping_strategies),
            next_strategy=state.next_strategy,
            last_strategy_used=state.last_strategy_used,
            last_strategy_time=state.last_strategy_time,
            mood_statistics=[
                MoodStatistic(mood=mood, count=count)
                for mood, count in state.sorted_statistics()
            ],
        )


class ConfigResponse(BaseModel):
    available_moods: list[str]
    mood_glyphs: dict[str, str]
    default_strategies: list[str]
    max_history_items: int = Field(..., ge=1)
    enable_timestamps: bool

    @classmethod
    def from_config(cls, config: TrackerConfig) -> ConfigResponse:
        return cls(
            available_moods=list(config.available_moods),
            mood_glyphs=dict(config.mood_glyphs),
            default_strategies=list(config.default_strategies),
            max_history_items=config.max_history_items,
            enable_timestamps=config.enable_timestamps,
        )
