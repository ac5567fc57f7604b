"""Hotkey-to-tag table built once from configuration."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Mapping

logger = logging.getLogger(__name__)


class HotKey(Enum):
    """Keys that can be bound to a tag."""

    NUM_0 = "0"
    NUM_1 = "1"
    NUM_2 = "2"
    NUM_3 = "3"
    NUM_4 = "4"
    NUM_5 = "5"
    NUM_6 = "6"
    NUM_7 = "7"
    NUM_8 = "8"
    NUM_9 = "9"
    A = "a"
    B = "b"
    C = "c"
    D = "d"
    E = "e"
    F = "f"
    G = "g"
    H = "h"
    I = "i"
    J = "j"
    K = "k"
    L = "l"
    M = "m"
    N = "n"
    O = "o"
    P = "p"
    Q = "q"
    R = "r"
    S = "s"
    T = "t"
    U = "u"
    V = "v"
    W = "w"
    X = "x"
    Y = "y"
    Z = "z"


def parse_key_name(name: str) -> HotKey | None:
    """Parse a config key name such as '1' or 'F' (case-insensitive)."""
    try:
        return HotKey(name.strip().lower())
    except ValueError:
        return None


class HotkeyMap:
    """Maps recognized keys to the tag each one toggles."""

    def __init__(self, bindings: Mapping[HotKey, str] | None = None):
        self._bindings: dict[HotKey, str] = dict(bindings or {})

    @classmethod
    def from_config(cls, hotkey_tags: Mapping[str, str]) -> HotkeyMap:
        """Build from the config table, e.g. {"1": "favorite", "d": "delete"}.

        Unknown key names and empty tags are skipped.
        """
        bindings: dict[HotKey, str] = {}
        for key_name, tag in hotkey_tags.items():
            key = parse_key_name(str(key_name))
            if key is None:
                logger.warning(f"Ignoring hotkey for unknown key '{key_name}'")
                continue
            tag = str(tag).strip()
            if not tag:
                logger.warning(f"Ignoring hotkey '{key_name}' with no tag")
                continue
            bindings[key] = tag
        return cls(bindings)

    def tag_for(self, key: HotKey) -> str | None:
        return self._bindings.get(key)

    def items(self) -> list[tuple[HotKey, str]]:
        return sorted(self._bindings.items(), key=lambda item: item[0].value)

    def __len__(self) -> int:
        return len(self._bindings)

    def __contains__(self, key: HotKey) -> bool:
        return key in self._bindings
