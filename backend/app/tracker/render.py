from __future__ import annotations

from html import escape

from .models import TrackerConfig, TrackerState, UnknownMoodError
from .request import Action

FALLBACK_GLYPH = "❔"
HISTORY_VISIBLE = 10
JOURNAL_VISIBLE = 5
STRATEGIES_VISIBLE = 5

_STYLE = """
* { box-sizing: border-box; margin: 0; padding: 0; font-family: 'Segoe UI', Tahoma, sans-serif; }
body { background: linear-gradient(135deg, #1a2a6c, #b21f1f, #fdbb2d); padding: 20px; color: #333; min-height: 100vh; }
.header { text-align: center; margin-bottom: 30px; color: white; }
.container { display: grid; grid-template-columns: repeat(auto-fit, minmax(350px, 1fr)); gap: 25px; max-width: 1400px; margin: 0 auto; }
.panel { background: rgba(255, 255, 255, 0.95); border-radius: 15px; overflow: hidden; }
.panel-header { padding: 20px; color: white; font-weight: bold; font-size: 1.3em; }
.panel-header.mood { background: linear-gradient(to right, #ff7e5f, #feb47b); }
.panel-header.thoughts { background: linear-gradient(to right, #00cdac, #02aab0); }
.panel-header.strategies { background: linear-gradient(to right, #7474bf, #348ac7); }
.panel-header.stats { background: linear-gradient(to right, #8e2de2, #4a00e0); }
.panel-content { padding: 25px; }
.current-value { margin: 15px 0; padding: 18px; background: #f8f9fa; border-radius: 10px; border-left: 5px solid #3498db; }
.visualization { border: 1px solid #e0e0e0; border-radius: 10px; padding: 15px; margin: 15px 0; max-height: 300px; overflow-y: auto; }
.mood-item, .thought-item, .strategy-item { padding: 12px; border-radius: 8px; margin-bottom: 10px; display: flex; justify-content: space-between; }
.empty-message { color: #7f8c8d; text-align: center; padding: 30px; font-style: italic; }
select, input[type='text'], textarea { width: 100%; padding: 14px; margin-bottom: 15px; border: 1px solid #ddd; border-radius: 8px; }
button { padding: 14px 20px; border: none; border-radius: 8px; color: white; background: #3498db; cursor: pointer; margin: 0 10px 10px 0; }
.timestamp { font-size: 0.85em; color: #7f8c8d; }
.stats-grid { display: grid; grid-template-columns: repeat(auto-fit, minmax(120px, 1fr)); gap: 15px; margin: 15px 0; }
.stat-item { background: #f8f9fa; padding: 15px; border-radius: 8px; text-align: center; }
.stat-value { font-size: 1.8em; font-weight: bold; }
.progress-bar { height: 10px; background: #ecf0f1; border-radius: 5px; overflow: hidden; margin-top: 5px; }
.progress-fill { height: 100%; background: linear-gradient(to right, #3498db, #2ecc71); }
"""


def format_time_ago(past: int, now: int) -> str:
    seconds = now - past
    if seconds < 60:
        return "just now"
    if seconds < 3600:
        return f"{seconds // 60} minutes ago"
    if seconds < 86400:
        return f"{seconds // 3600} hours ago"
    return f"{seconds // 86400} days ago"


def _mood_label(mood: str, config: TrackerConfig) -> str:
    try:
        glyph = config.glyph_for(mood)
    except UnknownMoodError:
        glyph = FALLBACK_GLYPH
    return f"{escape(mood)} {glyph}"


def most_common_mood(state: TrackerState) -> tuple[str, int] | None:
    """Highest count wins; ties go to the alphabetically first mood."""

    best: tuple[str, int] | None = None
    for mood, count in state.sorted_statistics():
        if count > 0 and (best is None or count > best[1]):
            best = (mood, count)
    return best


def _action_button(action: Action, label: str) -> str:
    return f"<button type='submit' name='action' value='{action.value}'>{escape(label)}</button>"


def _mood_panel(state: TrackerState, config: TrackerConfig) -> list[str]:
    parts = [
        "<div class='panel'>",
        "<div class='panel-header mood'>Mood Tracker</div>",
        "<div class='panel-content'>",
        f"<div class='current-value'><strong>Current mood:</strong> "
        f"{_mood_label(state.current_mood, config)}</div>",
        "<div class='visualization'>",
    ]
    if not state.mood_history:
        parts.append(
            "<div class='empty-message'>No mood history yet. Start tracking your moods!</div>"
        )
    for mood in reversed(state.mood_history[-HISTORY_VISIBLE:]):
        parts.append(
            f"<div class='mood-item'><span>{_mood_label(mood, config)}</span>"
            "<span class='timestamp'>Recorded</span></div>"
        )
    parts.append("</div>")
    parts.append("<form method='GET'><select name='moodInput'>")
    parts.append("<option value=''>Select a mood</option>")
    for mood in config.available_moods:
        parts.append(f"<option value='{escape(mood)}'>{_mood_label(mood, config)}</option>")
    parts.append("</select>")
    parts.append(_action_button(Action.LOG_MOOD, "Log Mood"))
    parts.append("</form></div></div>")
    return parts


def _journal_panel(state: TrackerState) -> list[str]:
    parts = [
        "<div class='panel'>",
        "<div class='panel-header thoughts'>Thought Journal</div>",
        "<div class='panel-content'>",
        "<div class='visualization'>",
    ]
    if not state.thought_journal:
        parts.append(
            "<div class='empty-message'>Your thoughts will appear here. "
            "Journaling helps process emotions.</div>"
        )
    for entry in reversed(state.thought_journal[-JOURNAL_VISIBLE:]):
        parts.append(
            f"<div class='thought-item'><div>{escape(entry.text)}</div>"
            f"<div class='timestamp'>{escape(entry.timestamp)}</div></div>"
        )
    parts.append("</div>")
    parts.append(
        "<form method='GET'><textarea name='thoughtInput' "
        "placeholder='What&apos;s on your mind?'></textarea>"
    )
    parts.append(_action_button(Action.ADD_THOUGHT, "Journal Thought"))
    parts.append("</form></div></div>")
    return parts


def _strategy_panel(state: TrackerState, now: int) -> list[str]:
    parts = [
        "<div class='panel'>",
        "<div class='panel-header strategies'>Coping Strategies</div>",
        "<div class='panel-content'>",
        f"<div class='current-value'><strong>Last strategy used:</strong> "
        f"{escape(state.last_strategy_used)}",
    ]
    if state.last_strategy_time > 0:
        parts.append(
            f"<div class='timestamp'>{format_time_ago(state.last_strategy_time, now)}</div>"
        )
    parts.append("</div><div class='visualization'>")
    if not state.coping_strategies:
        parts.append("<div class='empty-message'>No strategies available. Add some below!</div>")
    for strategy in state.coping_strategies[:STRATEGIES_VISIBLE]:
        parts.append(f"<div class='strategy-item'>{escape(strategy)}</div>")
    parts.append("</div><form method='GET'>")
    parts.append(_action_button(Action.SUGGEST_STRATEGY, "Suggest a Strategy"))
    parts.append(_action_button(Action.USE_STRATEGY, "Use This Strategy"))
    parts.append(_action_button(Action.ADD_RANDOM_STRATEGY, "Add New Strategy"))
    parts.append("</form><form method='GET'>")
    parts.append(
        "<input type='text' name='newStrategy' placeholder='Enter a new coping strategy'>"
    )
    parts.append(_action_button(Action.ADD_CUSTOM_STRATEGY, "Add Custom"))
    parts.append("</form></div></div>")
    return parts


def _statistics_panel(state: TrackerState, config: TrackerConfig) -> list[str]:
    parts = [
        "<div class='panel'>",
        "<div class='panel-header stats'>Mood Statistics</div>",
        "<div class='panel-content'>",
    ]
    if not state.mood_statistics:
        parts.append(
            "<div class='empty-message'>No statistics yet. Start tracking your mood!</div>"
        )
        parts.append("</div></div>")
        return parts

    total = sum(state.mood_statistics.values())
    parts.append("<div class='stats-grid'>")
    for mood, count in state.sorted_statistics():
        percentage = count * 100 // total if total > 0 else 0
        parts.append(
            "<div class='stat-item'>"
            f"<div class='stat-value'>{count}</div>"
            f"<div class='stat-label'>{_mood_label(mood, config)}</div>"
            "<div class='progress-bar'>"
            f"<div class='progress-fill' style='width: {percentage}%'></div></div>"
            "</div>"
        )
    parts.append("</div>")

    common = most_common_mood(state)
    if common is not None:
        mood, count = common
        parts.append(
            f"<div class='current-value'><strong>Most common mood:</strong> "
            f"{_mood_label(mood, config)}"
            f"<div class='timestamp'>{count} recorded instances</div></div>"
        )
    parts.append("</div></div>")
    return parts


def render_page(state: TrackerState, config: TrackerConfig, now: int) -> str:
    """Render the full tracker page. Moods without a glyph get a placeholder."""

    parts = [
        "<!DOCTYPE html>",
        "<html lang='en'>",
        "<head>",
        "<meta charset='UTF-8'>",
        "<meta name='viewport' content='width=device-width, initial-scale=1.0'>",
        "<title>Mental Health Tracker</title>",
        f"<style>{_STYLE}</style>",
        "</head>",
        "<body>",
        "<div class='header'><h1>Mental Health Tracker</h1>",
        "<p>Mood tracking, thought journaling, and coping strategies</p></div>",
        "<div class='container'>",
    ]
    parts.extend(_mood_panel(state, config))
    parts.extend(_journal_panel(state))
    parts.extend(_strategy_panel(state, now))
    parts.extend(_statistics_panel(state, config))
    parts.extend(["</div>", "</body>", "</html>"])
    return "\n".join(parts) + "\n"
