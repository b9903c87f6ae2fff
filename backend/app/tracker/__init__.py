from .codec import decode_state, encode_state
from .defaults import load_tracker_config, parse_tracker_config
from .models import (
    JournalEntry,
    StateWriteError,
    TrackerConfig,
    TrackerError,
    TrackerState,
    UnknownMoodError,
)
from .processor import apply_action, seed_strategies, trim_state
from .request import Action, RequestPayload, decode_request, url_decode
from .service import TrackerResult, TrackerService
from .storage import FileStateStore, MemoryStateStore, StateStore

__all__ = [
    "Action",
    "FileStateStore",
    "JournalEntry",
    "MemoryStateStore",
    "RequestPayload",
    "StateStore",
    "StateWriteError",
    "TrackerConfig",
    "TrackerError",
    "TrackerResult",
    "TrackerService",
    "TrackerState",
    "UnknownMoodError",
    "apply_action",
    "decode_request",
    "decode_state",
    "encode_state",
    "load_tracker_config",
    "parse_tracker_config",
    "seed_strategies",
    "trim_state",
    "url_decode",
]
