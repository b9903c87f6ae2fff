from __future__ import annotations

from collections.abc import Generator
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from backend.app.core import config
from backend.app.tracker import TrackerConfig, parse_tracker_config


@pytest.fixture(scope="session")
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture()
def tracker_config() -> TrackerConfig:
    return parse_tracker_config(None)


@pytest.fixture()
def small_config() -> TrackerConfig:
    return TrackerConfig(
        available_moods=("Happy", "Sad", "Neutral"),
        mood_glyphs={"Happy": ":)", "Sad": ":(", "Neutral": ":|"},
        default_strategies=("A", "B", "C"),
        max_history_items=3,
        enable_timestamps=False,
    )


@pytest.fixture()
def test_client(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
) -> Generator[TestClient, None, None]:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("VERSION", "0.1.0-test")
    monkeypatch.setenv("STATE_FILE", str(tmp_path / "state" / "mental_health_state.txt"))
    monkeypatch.setenv("TRACKER_CONFIG_FILE", str(tmp_path / "mental_health_config.txt"))
    monkeypatch.setenv("LOG_FILE", str(tmp_path / "logs" / "tracker.log"))
    config.get_settings.cache_clear()

    from backend.app.main import app

    try:
        with TestClient(app) as client:
            yield client
    finally:
        config.get_settings.cache_clear()
