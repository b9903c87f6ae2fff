from __future__ import annotations

from pathlib import Path

import pytest

from backend.app.core import config
from backend.app.core.config import get_settings


@pytest.fixture(autouse=True)
def reset_settings_cache() -> None:
    config.get_settings.cache_clear()
    yield
    config.get_settings.cache_clear()


def test_settings_read_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("VERSION", "9.9.9")
    monkeypatch.setenv("STATE_FILE", str(tmp_path / "data" / "state.txt"))
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.chdir(tmp_path)

    settings = get_settings()

    assert settings.version == "9.9.9"
    assert settings.state_file == tmp_path / "data" / "state.txt"
    assert settings.state_file.parent.exists()
    assert settings.log_level == "DEBUG"
    assert settings.log_file.parent.exists()


def test_settings_defaults(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    for name in ("STATE_FILE", "TRACKER_CONFIG_FILE", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)

    settings = get_settings()

    assert settings.state_file == Path("mental_health_state.txt")
    assert settings.tracker_config_file == Path("mental_health_config.txt")
    assert settings.log_level == "INFO"


def test_unknown_log_level_falls_back(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("LOG_LEVEL", "chatty")
    monkeypatch.chdir(tmp_path)

    assert get_settings().log_level == "INFO"


def test_settings_fallback_to_version_file(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    version_file = tmp_path / "VERSION"
    version_file.write_text("1.2.3", encoding="utf-8")
    monkeypatch.delenv("VERSION", raising=False)
    monkeypatch.chdir(tmp_path)

    settings = get_settings()

    assert settings.version == "1.2.3"
