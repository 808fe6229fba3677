from __future__ import annotations

import colorsys
import itertools
import random
from collections import deque
from typing import Callable, Deque, Iterator, List, Optional, Sequence

from .difficulty import compute_length_range, compute_word_speed
from .enums import WordType
from .models import Color, Tuning, Word

WORD_BANK: List[str] = [
    "code", "type", "game", "play", "word", "fast", "jump", "run", "star",
    "moon", "fire", "wind", "rain", "snow", "tree", "rock", "keyboard",
    "typing", "letter", "winner", "player", "attack", "defend", "rocket",
    "planet", "galaxy", "comet", "meteor", "cosmic", "stellar", "javascript",
    "programming", "developer", "computer", "challenge", "adventure",
    "universe", "asteroid", "nebula", "supernova", "quantum",
    "orbit", "laser", "pixel", "alien", "solar", "lunar", "shield", "photon",
    "vector", "gravity", "eclipse", "horizon", "voyager", "spectrum",
    "satellite", "starlight", "wormhole", "blackhole", "telescope",
    "cat", "sky", "ion", "sun", "arc", "zap",
]

FREEZE_COLOR: Color = (34, 211, 238)   # cyan
NUKE_COLOR: Color = (251, 191, 36)     # amber

# rough glyph width of the bold word font, relative to font size
GLYPH_WIDTH_FACTOR = 0.62
SPAWN_EDGE_PAD = 20
SPAWN_MIN_X = 10


def estimate_text_width(text: str, font_size: int) -> float:
    return len(text) * font_size * GLYPH_WIDTH_FACTOR


def random_word_color(rng: random.Random) -> Color:
    hue = ((rng.random() * 280 + 160) % 360) / 360.0
    r, g, b = colorsys.hls_to_rgb(hue, 0.72, 1.0)
    return (int(r * 255), int(g * 255), int(b * 255))


class WordManager:
    """Live set of falling words, kept in spawn order."""

    def __init__(
        self,
        tuning: Tuning,
        *,
        rng: Optional[random.Random] = None,
        bank: Sequence[str] = WORD_BANK,
        measure: Optional[Callable[[str], float]] = None,
    ) -> None:
        if not bank:
            raise ValueError("word bank is empty")
        self.tuning = tuning
        self.rng = rng or random.Random()
        self.bank = [w.lower() for w in bank if w]
        self.measure = measure or (lambda text: estimate_text_width(text, tuning.font_size))
        self.words: List[Word] = []
        self.recent: Deque[str] = deque(maxlen=max(0, tuning.recent_limit))
        self._ids = itertools.count(1)

    def __iter__(self) -> Iterator[Word]:
        return iter(self.words)

    def __len__(self) -> int:
        return len(self.words)

    def get(self, handle: Optional[int]) -> Optional[Word]:
        if handle is None:
            return None
        return next((w for w in self.words if w.id == handle), None)

    # ---- Spawning ----

    def pick_text(self, level: int, boss_mode: bool) -> str:
        min_len, max_len = compute_length_range(level, boss_mode, self.tuning)
        pool = [w for w in self.bank if min_len <= len(w) <= max_len] or self.bank
        fresh = [w for w in pool if w not in self.recent]
        picked = self.rng.choice(fresh or pool)
        self.recent.append(picked)
        return picked

    def roll_type(self) -> WordType:
        r = self.rng.random()
        normal_band = 1.0 - self.tuning.freeze_chance - self.tuning.nuke_chance
        if r < normal_band:
            return WordType.NORMAL
        if r < normal_band + self.tuning.freeze_chance:
            return WordType.FREEZE
        return WordType.NUKE

    def spawn(self, level: int, boss_mode: bool) -> Word:
        text = self.pick_text(level, boss_mode)
        speed = compute_word_speed(level, boss_mode, self.tuning)

        text_w = self.measure(text)
        x_max = max(SPAWN_EDGE_PAD, self.tuning.canvas_width - text_w - SPAWN_EDGE_PAD)
        x = self.rng.random() * x_max + SPAWN_MIN_X

        kind = self.roll_type()
        if kind is WordType.FREEZE:
            color = FREEZE_COLOR
        elif kind is WordType.NUKE:
            color = NUKE_COLOR
        else:
            color = random_word_color(self.rng)

        word = Word(next(self._ids), text, x, self.tuning.spawn_y, speed, kind, color)
        self.words.append(word)
        return word

    # ---- Per-frame motion ----

    def advance(self, frozen: bool, frames: float = 1.0) -> List[Word]:
        """Move every word down unless frozen. Returns the words that fell off (misses), already removed."""
        bottom = self.tuning.canvas_height + self.tuning.miss_margin
        missed: List[Word] = []
        kept: List[Word] = []
        for word in self.words:
            if not frozen:
                word.y += word.speed * frames
            if word.y > bottom:
                missed.append(word)
            else:
                kept.append(word)
        self.words = kept
        return missed

    def remove(self, word: Word) -> bool:
        try:
            self.words.remove(word)
            return True
        except ValueError:
            return False

    def clear(self) -> List[Word]:
        out, self.words = self.words, []
        return out

    def reset(self) -> None:
        self.words = []
        self.recent.clear()


__all__ = ["WORD_BANK", "WordManager", "estimate_text_width", "random_word_color", "FREEZE_COLOR", "NUKE_COLOR"]
