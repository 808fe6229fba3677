from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Dict, Optional, Tuple

from .enums import WordType

Color = Tuple[int, int, int]


class Phase(Enum):
    IDLE = auto()
    PLAYING = auto()
    PAUSED = auto()
    GAME_OVER = auto()


class Scene(Enum):
    MENU = auto()
    INSTRUCTIONS = auto()
    GAME = auto()
    OVER = auto()


# (from_level, min_len, max_len); the last band whose from_level <= level wins
LENGTH_BANDS: Tuple[Tuple[int, int, int], ...] = (
    (1, 3, 5),
    (5, 4, 6),
    (8, 5, 7),
    (10, 6, 8),
    (15, 7, 9),
    (20, 8, 99),
)


@dataclass(frozen=True)
class Tuning:
    """Gameplay constants for one session. Times are in milliseconds, speeds in px/frame."""
    canvas_width: int = 800
    canvas_height: int = 600
    font_size: int = 24
    min_speed: float = 0.5
    max_speed: float = 3.5
    spawn_rate_ms: float = 2000.0
    spawn_y: float = -30.0
    miss_margin: float = 10.0
    recent_limit: int = 20
    min_spawn_ms: float = 650.0
    spawn_decay_ms: float = 140.0
    speed_ramp: float = 0.18
    boss_spawn_ms: float = 450.0
    boss_speed_boost: float = 0.6
    boss_max_speed_bonus: float = 1.2
    boss_duration_ms: float = 14000.0
    boss_every_levels: int = 10
    boss_min_length: int = 7
    length_bands: Tuple[Tuple[int, int, int], ...] = LENGTH_BANDS
    points_per_char: int = 10
    power_up_bonus: int = 75
    nuke_points_per_word: int = 10
    level_threshold: int = 200
    wrong_key_penalty: int = 5
    mistake_life_threshold: int = 5
    freeze_chance: float = 0.05
    nuke_chance: float = 0.05
    freeze_ms: float = 3500.0
    level_up_modal_ms: float = 1800.0
    modal_pause_ms: float = 900.0
    error_flash_ms: float = 220.0
    fail_sound_gap_ms: float = 150.0
    shake_ms: float = 400.0
    lives: int = 3

    @classmethod
    def from_cfg(cls, cfg: Dict[str, Any]) -> "Tuning":
        d, w, df = cfg["display"], cfg["word"], cfg["difficulty"]
        s, p, t = cfg["scoring"], cfg["powerups"], cfg["timing"]
        return cls(
            canvas_width=int(d["width"]),
            canvas_height=int(d["height"]),
            font_size=int(w["font_size"]),
            min_speed=float(w["min_speed"]),
            max_speed=float(w["max_speed"]),
            spawn_rate_ms=float(w["spawn_rate_ms"]),
            spawn_y=float(w.get("spawn_y", -30.0)),
            miss_margin=float(w.get("miss_margin", 10.0)),
            recent_limit=int(w.get("recent_limit", 20)),
            min_spawn_ms=float(df["min_spawn_ms"]),
            spawn_decay_ms=float(df["spawn_decay_ms"]),
            speed_ramp=float(df["speed_ramp"]),
            boss_spawn_ms=float(df["boss_spawn_ms"]),
            boss_speed_boost=float(df["boss_speed_boost"]),
            boss_max_speed_bonus=float(df.get("boss_max_speed_bonus", 1.2)),
            boss_duration_ms=float(df["boss_duration_ms"]),
            boss_every_levels=int(df.get("boss_every_levels", 10)),
            boss_min_length=int(df.get("boss_min_length", 7)),
            points_per_char=int(s["points_per_char"]),
            power_up_bonus=int(s["power_up_bonus"]),
            nuke_points_per_word=int(s["nuke_points_per_word"]),
            level_threshold=int(s["level_threshold"]),
            wrong_key_penalty=int(s["wrong_key_penalty"]),
            mistake_life_threshold=int(s["mistake_life_threshold"]),
            freeze_chance=float(p["freeze_chance"]),
            nuke_chance=float(p["nuke_chance"]),
            freeze_ms=float(p["freeze_ms"]),
            level_up_modal_ms=float(t["level_up_modal_ms"]),
            modal_pause_ms=float(t["modal_pause_ms"]),
            error_flash_ms=float(t["error_flash_ms"]),
            fail_sound_gap_ms=float(t["fail_sound_gap_ms"]),
            shake_ms=float(t["shake_ms"]),
            lives=int(cfg["lives"]),
        )


@dataclass
class Word:
    """A falling word. `id` is the handle the typing buffer binds to."""
    id: int
    text: str
    x: float
    y: float
    speed: float
    type: WordType = WordType.NORMAL
    color: Color = (255, 255, 255)
    typed_length: int = 0

    @property
    def is_power_up(self) -> bool:
        return self.type is not WordType.NORMAL


@dataclass
class Particle:
    x: float
    y: float
    vx: float
    vy: float
    size: float
    color: Color
    life: float = 1.0

    def update(self, gravity: float, decay: float) -> bool:
        """Advance one frame, returns False once the particle has burnt out"""
        self.x += self.vx
        self.y += self.vy
        self.vy += gravity
        self.life -= decay
        return self.life > 0


@dataclass
class SessionState:
    score: int = 0
    lives: int = 3
    level: int = 1
    high_score: int = 0
    is_playing: bool = False
    is_paused: bool = False
    is_muted: bool = False
    current_input: str = ""
    active_word: Optional[int] = None    # handle into WordManager, never owns the word
    is_frozen: bool = False
    boss_mode: bool = False
    modal_pause: bool = False
    mistakes: int = 0
    last_boss_level: int = 0
    words_destroyed: int = 0
    last_fail_sound_at: float = float("-inf")


@dataclass(frozen=True)
class HudState:
    score: int
    level: int
    lives: int
    high_score: int
    current_input: str = ""
    input_bound: bool = False
    boss_mode: bool = False
    frozen: bool = False


@dataclass(frozen=True)
class GameStats:
    score: int
    level: int
    high_score: int
    is_new_record: bool
    mistakes: int = 0
    words_destroyed: int = 0


@dataclass(frozen=True)
class LevelUp:
    level: int
    boss: bool
    badge_text: str = "LEVEL UP"
    subtitle: str = "Incoming wave faster and tougher"


__all__ = [
    "Color", "Phase", "Scene", "LENGTH_BANDS", "Tuning", "Word", "Particle",
    "SessionState", "HudState", "GameStats", "LevelUp",
]
