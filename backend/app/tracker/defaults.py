from __future__ import annotations

import logging
from pathlib import Path

from .models import TrackerConfig

logger = logging.getLogger(__name__)

DEFAULT_MOOD_GLYPHS: dict[str, str] = {
    "Happy": "\U0001F60A",
    "Sad": "\U0001F622",
    "Anxious": "\U0001F630",
    "Angry": "\U0001F620",
    "Tired": "\U0001F634",
    "Stressed": "\U0001F62B",
    "Neutral": "\U0001F610",
    "Excited": "\U0001F603",
    "Calm": "\U0001F60C",
}

DEFAULT_STRATEGIES: tuple[str, ...] = (
    "Deep breathing for 5 minutes",
    "Take a short walk outside",
    "Write down three things you're grateful for",
    "Listen to calming music",
    "Practice mindfulness meditation",
    "Drink a glass of water",
    "Stretch your body",
    "Read a book for 15 minutes",
    "Call a friend or family member",
)

DEFAULT_MAX_HISTORY = 50


def parse_tracker_config(text: str | None) -> TrackerConfig:
    """Build the tracker configuration from built-in defaults and optional overrides.

    Only ``MAX_HISTORY: <int>`` and ``TIMESTAMPS: <0|1>`` lines are recognized;
    anything else is ignored.
    """

    max_history = DEFAULT_MAX_HISTORY
    enable_timestamps = True

    for raw_line in (text or "").splitlines():
        key, sep, value = raw_line.partition(":")
        if not sep:
            continue
        key = key.strip()
        value = value.strip()
        if key == "MAX_HISTORY":
            try:
                parsed = int(value)
            except ValueError:
                logger.warning("Ignoring invalid MAX_HISTORY value %r", value)
                continue
            if parsed < 1:
                logger.warning("Ignoring non-positive MAX_HISTORY value %d", parsed)
                continue
            max_history = parsed
        elif key == "TIMESTAMPS":
            enable_timestamps = value == "1"

    return TrackerConfig(
        available_moods=tuple(DEFAULT_MOOD_GLYPHS),
        mood_glyphs=DEFAULT_MOOD_GLYPHS,
        default_strategies=DEFAULT_STRATEGIES,
        max_history_items=max_history,
        enable_timestamps=enable_timestamps,
    )


def load_tracker_config(path: Path) -> TrackerConfig:
    """Read the optional config file; a missing file means defaults."""

    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return parse_tracker_config(None)
    except OSError as exc:
        logger.warning("Unable to read tracker config %s: %s", path, exc)
        return parse_tracker_config(None)
    return parse_tracker_config(text)
