"""Keystroke buffer to falling-word matching.

The buffer binds to at most one live word (the active word) by prefix.
Each printable key extends the buffer and re-resolves the binding:

1. the active word still starts with the buffer -> extend it (maybe complete it)
2. the active word no longer matches -> drop it, reset its highlight
3. nothing bound -> first live word in spawn order that starts with the buffer
4. still nothing and the buffer is non-empty -> mistake, buffer cleared

Backspace shortens the buffer and always drops the binding; the next key re-matches.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional

from .models import SessionState, Word
from .words import WordManager

BACKSPACE = "Backspace"


class MatchKind(Enum):
    IGNORED = auto()
    BACKSPACE = auto()
    PARTIAL = auto()
    COMPLETED = auto()
    MISTAKE = auto()


@dataclass(frozen=True)
class MatchResult:
    kind: MatchKind
    word: Optional[Word] = None
    text: str = ""


class TypingEngine:
    def __init__(self, words: WordManager, state: Optional[SessionState] = None) -> None:
        self.words = words
        self.state = state if state is not None else SessionState()

    @property
    def current_input(self) -> str:
        return self.state.current_input

    @current_input.setter
    def current_input(self, value: str) -> None:
        self.state.current_input = value

    @property
    def active(self) -> Optional[int]:
        return self.state.active_word

    @active.setter
    def active(self, handle: Optional[int]) -> None:
        self.state.active_word = handle

    @property
    def active_word(self) -> Optional[Word]:
        word = self.words.get(self.active)
        if word is None:
            self.active = None
        return word

    def reset(self) -> None:
        word = self.active_word
        if word is not None:
            word.typed_length = 0
        self.current_input = ""
        self.active = None

    def release(self, word: Word) -> bool:
        """Drop the binding (and the buffer) if `word` is the active word. Used on misses."""
        if self.active is not None and word.id == self.active:
            self.current_input = ""
            self.active = None
            return True
        return False

    def press(self, key: str) -> MatchResult:
        if key == BACKSPACE:
            return self.backspace()
        if len(key) != 1 or not key.isprintable():
            return MatchResult(MatchKind.IGNORED)
        return self.type_char(key)

    def backspace(self) -> MatchResult:
        self.current_input = self.current_input[:-1]
        word = self.active_word
        if word is not None:
            word.typed_length = 0
        self.active = None
        return MatchResult(MatchKind.BACKSPACE, text=self.current_input)

    def type_char(self, ch: str) -> MatchResult:
        self.current_input += ch.lower()
        return self.resolve()

    def resolve(self) -> MatchResult:
        text = self.current_input
        matched: Optional[Word] = None

        word = self.active_word
        if word is not None:
            if word.text.startswith(text):
                matched = word
            else:
                word.typed_length = 0
                self.active = None

        if matched is None:
            matched = next((w for w in self.words if w.text.startswith(text)), None)

        if matched is not None:
            self.active = matched.id
            matched.typed_length = len(text)
            if text == matched.text:
                self.words.remove(matched)
                self.current_input = ""
                self.active = None
                return MatchResult(MatchKind.COMPLETED, matched, text)
            return MatchResult(MatchKind.PARTIAL, matched, text)

        if text:
            self.current_input = ""
            return MatchResult(MatchKind.MISTAKE, text=text)
        return MatchResult(MatchKind.IGNORED)


__all__ = ["BACKSPACE", "MatchKind", "MatchResult", "TypingEngine"]
