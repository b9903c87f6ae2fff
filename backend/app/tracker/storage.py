from __future__ import annotations

import contextlib
import logging
import os
import tempfile
from pathlib import Path
from typing import Protocol, runtime_checkable

from .models import StateWriteError

logger = logging.getLogger(__name__)


@runtime_checkable
class StateStore(Protocol):
    """Where the encoded tracker state lives between invocations.

    There is no locking: two requests writing at once means the last writer
    wins.
    """

    def load(self) -> str | None:
        """Return the stored text, or ``None`` when nothing was stored yet."""

    def save(self, text: str) -> None:
        """Persist ``text``; raises :class:`StateWriteError` on failure."""


class FileStateStore:
    """Flat-file store with atomic replace on write."""

    def __init__(self, path: Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> str | None:
        try:
            return self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.info("No state file at %s, starting fresh", self._path)
            return None
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Unable to read state file %s: %s", self._path, exc)
            return None

    def save(self, text: str) -> None:
        tmp_path: Path | None = None
        try:
            fd, tmp_name = tempfile.mkstemp(
                dir=str(self._path.parent),
                prefix=f".{self._path.name}.",
                suffix=".tmp",
            )
            tmp_path = Path(tmp_name)
            with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as handle:
                handle.write(text)
                handle.flush()
                os.fsync(handle.fileno())
            tmp_path.replace(self._path)
        except OSError as exc:
            if tmp_path is not None:
                with contextlib.suppress(OSError):
                    tmp_path.unlink(missing_ok=True)
            raise StateWriteError(f"unable to write state file {self._path}: {exc}") from exc


class MemoryStateStore:
    """In-process store, used by tests and one-off runs."""

    def __init__(self, text: str | None = None) -> None:
        self.text = text
        self.saves = 0

    def load(self) -> str | None:
        return self.text

    def save(self, text: str) -> None:
        self.text = text
        self.saves += 1
