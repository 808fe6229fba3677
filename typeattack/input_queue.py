from __future__ import annotations

from collections import deque
from typing import Deque, List

import pygame

from .session import ESCAPE
from .typing_engine import BACKSPACE

KEY_NAMES = {
    pygame.K_BACKSPACE: BACKSPACE,
    pygame.K_ESCAPE: ESCAPE,
}


def key_name(event: pygame.event.Event) -> str:
    """Name of a KEYDOWN the session understands: "Backspace", "Escape" or the typed character."""
    named = KEY_NAMES.get(event.key)
    if named is not None:
        return named
    return getattr(event, "unicode", "") or ""


class InputQueue:
    def __init__(self) -> None:
        self._q: Deque[str] = deque()

    def push(self, name: str) -> None:
        if name:
            self._q.append(name)

    def pop_all(self) -> list[str]:
        out: List[str] = list(self._q)
        self._q.clear()
        return out

    def clear(self) -> None:
        self._q.clear()

    def __len__(self) -> int:
        return len(self._q)


__all__ = ["InputQueue", "key_name", "KEY_NAMES"]
