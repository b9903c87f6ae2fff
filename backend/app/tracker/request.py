from __future__ import annotations

import re
import string
from dataclasses import dataclass
from enum import Enum

_HEX_DIGITS = frozenset(string.hexdigits)
_LINE_BREAKS = re.compile(r"[\r\n]+")


class Action(str, Enum):
    NONE = ""
    LOG_MOOD = "logMood"
    ADD_THOUGHT = "addThought"
    SUGGEST_STRATEGY = "suggestStrategy"
    USE_STRATEGY = "useStrategy"
    ADD_RANDOM_STRATEGY = "addStrategy"
    ADD_CUSTOM_STRATEGY = "addCustomStrategy"

    @classmethod
    def parse(cls, value: str | None) -> Action:
        if not value:
            return cls.NONE
        try:
            return cls(value)
        except ValueError:
            return cls.NONE


@dataclass(frozen=True)
class RequestPayload:
    mood: str = ""
    thought: str = ""
    strategy_text: str = ""


def url_decode(value: str) -> str:
    """Decode ``+`` and ``%XX`` escapes, keeping malformed escapes as literal text."""

    raw = value.replace("+", " ").encode("utf-8")
    decoded = bytearray()
    index = 0
    while index < len(raw):
        byte = raw[index]
        if byte == ord("%"):
            hex_pair = raw[index + 1 : index + 3].decode("ascii", errors="replace")
            if len(hex_pair) == 2 and set(hex_pair) <= _HEX_DIGITS:
                decoded.append(int(hex_pair, 16))
                index += 3
                continue
        decoded.append(byte)
        index += 1
    return decoded.decode("utf-8", errors="replace")


def single_line(text: str) -> str:
    """Collapse each run of CR/LF characters into one space.

    The state file stores one value per line, so free text must not span lines.
    """

    return _LINE_BREAKS.sub(" ", text)


def _first_value(query: str, key: str) -> str | None:
    for pair in query.split("&"):
        name, sep, value = pair.partition("=")
        if sep and name == key:
            return value
    return None


def decode_request(query: str | None) -> tuple[Action, RequestPayload]:
    """Parse a raw query string into the requested action and its payload.

    Only the first occurrence of each recognized key is used.
    """

    query = query or ""
    action = Action.parse(url_decode(_first_value(query, "action") or ""))
    payload = RequestPayload(
        mood=single_line(url_decode(_first_value(query, "moodInput") or "")),
        thought=single_line(url_decode(_first_value(query, "thoughtInput") or "")),
        strategy_text=single_line(url_decode(_first_value(query, "newStrategy") or "")),
    )
    return action, payload
