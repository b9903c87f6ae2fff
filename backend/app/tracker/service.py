from __future__ import annotations

import logging
import random
import time
from collections.abc import Callable
from dataclasses import dataclass

from ..metrics import TRACKER_ACTIONS, TRACKER_STATE_WRITE_ERRORS
from .codec import decode_state, encode_state
from .models import StateWriteError, TrackerConfig, TrackerState
from .processor import apply_action, seed_strategies, trim_state
from .request import Action, RequestPayload, decode_request
from .storage import StateStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TrackerResult:
    """Read-only outcome of one invocation, handed to the renderer."""

    state: TrackerState
    config: TrackerConfig
    action: Action
    applied: bool
    now: int


class TrackerService:
    """Runs one load → apply → trim → persist cycle per request."""

    def __init__(
        self,
        store: StateStore,
        config_loader: Callable[[], TrackerConfig],
        *,
        clock: Callable[[], float] = time.time,
        rng: random.Random | None = None,
    ) -> None:
        self._store = store
        self._config_loader = config_loader
        self._clock = clock
        self._rng = rng

    def _load(self, now: int) -> tuple[TrackerConfig, TrackerState]:
        config = self._config_loader()
        state = decode_state(self._store.load(), now=now)
        return config, seed_strategies(state, config)

    def snapshot(self) -> TrackerResult:
        """Current state without applying an action or writing anything."""

        now = int(self._clock())
        config, state = self._load(now)
        return TrackerResult(trim_state(state, config), config, Action.NONE, False, now)

    def handle_query(self, query: str | None) -> TrackerResult:
        action, payload = decode_request(query)
        return self.handle(action, payload)

    def handle(self, action: Action, payload: RequestPayload) -> TrackerResult:
        now = int(self._clock())
        config, state = self._load(now)

        updated = apply_action(state, config, action, payload, now=now, rng=self._rng)
        applied = updated is not state
        updated = trim_state(updated, config)

        try:
            self._store.save(encode_state(updated, config))
        except StateWriteError:
            TRACKER_STATE_WRITE_ERRORS.inc()
            logger.error("Failed to persist tracker state", extra={"action": action.value})
            raise

        TRACKER_ACTIONS.labels(action=action.name.lower(), applied=str(applied).lower()).inc()
        if action is not Action.NONE:
            logger.info(
                "Tracker action %s %s",
                action.value,
                "applied" if applied else "skipped",
                extra={"action": action.value},
            )
        return TrackerResult(updated, config, action, applied, now)
