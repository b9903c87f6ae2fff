from __future__ import annotations

import io
from collections.abc import Iterator
from pathlib import Path

import pytest

from backend import cgi_main
from backend.app.core import config
from backend.app.tracker import decode_state


@pytest.fixture()
def cgi_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Iterator[Path]:
    state_file = tmp_path / "mental_health_state.txt"
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("STATE_FILE", str(state_file))
    monkeypatch.setenv("TRACKER_CONFIG_FILE", str(tmp_path / "mental_health_config.txt"))
    monkeypatch.setenv("LOG_FILE", str(tmp_path / "tracker.log"))
    config.get_settings.cache_clear()
    yield state_file
    config.get_settings.cache_clear()


def test_cgi_run_writes_page_and_state(cgi_env: Path) -> None:
    stream = io.StringIO()

    code = cgi_main.run_cgi({"QUERY_STRING": "moodInput=Calm&action=logMood"}, stream)

    output = stream.getvalue()
    assert code == 0
    assert output.startswith("Content-type: text/html\r\n\r\n<!DOCTYPE html>")
    state = decode_state(cgi_env.read_text(encoding="utf-8"))
    assert state.current_mood == "Calm"
    assert state.mood_history == ("Neutral",)


def test_cgi_run_without_query(cgi_env: Path) -> None:
    stream = io.StringIO()

    assert cgi_main.run_cgi({}, stream) == 0
    assert decode_state(cgi_env.read_text(encoding="utf-8")).current_mood == "Neutral"


def test_cgi_reports_write_failure(cgi_env: Path) -> None:
    cgi_env.mkdir()
    stream = io.StringIO()

    code = cgi_main.run_cgi({"QUERY_STRING": "action=useStrategy"}, stream)

    assert code == 1
    assert stream.getvalue().startswith("Status: 500")
