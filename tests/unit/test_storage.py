from __future__ import annotations

from pathlib import Path

import pytest

from backend.app.tracker import FileStateStore, MemoryStateStore, StateStore, StateWriteError


def test_file_store_missing_file_returns_none(tmp_path: Path) -> None:
    store = FileStateStore(tmp_path / "state.txt")
    assert store.load() is None


def test_file_store_save_and_load(tmp_path: Path) -> None:
    path = tmp_path / "state.txt"
    store = FileStateStore(path)

    store.save("CURRENT_MOOD: Calm\n")

    assert store.load() == "CURRENT_MOOD: Calm\n"
    assert path.read_bytes() == b"CURRENT_MOOD: Calm\n"
    assert [p.name for p in tmp_path.iterdir()] == ["state.txt"]


def test_file_store_overwrites_previous(tmp_path: Path) -> None:
    store = FileStateStore(tmp_path / "state.txt")
    store.save("first\n")
    store.save("second\n")
    assert store.load() == "second\n"


def test_file_store_write_failure(tmp_path: Path) -> None:
    store = FileStateStore(tmp_path / "missing-dir" / "state.txt")
    with pytest.raises(StateWriteError):
        store.save("CURRENT_MOOD: Calm\n")


def test_file_store_failed_write_keeps_previous(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    path = tmp_path / "state.txt"
    path.write_text("old\n", encoding="utf-8")
    store = FileStateStore(path)

    def _fail(self: Path, target: Path) -> Path:
        raise PermissionError("read-only")

    monkeypatch.setattr(Path, "replace", _fail)

    with pytest.raises(StateWriteError):
        store.save("new\n")

    assert path.read_text(encoding="utf-8") == "old\n"
    assert [p.name for p in tmp_path.iterdir()] == ["state.txt"]


def test_stores_satisfy_protocol(tmp_path: Path) -> None:
    assert isinstance(FileStateStore(tmp_path / "s.txt"), StateStore)
    assert isinstance(MemoryStateStore(), StateStore)


def test_memory_store_counts_saves() -> None:
    store = MemoryStateStore()
    assert store.load() is None
    store.save("x")
    store.save("y")
    assert store.load() == "y"
    assert store.saves == 2
