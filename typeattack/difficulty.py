"""Difficulty curve: level and boss mode map to spawn interval, fall speed and word length."""
from __future__ import annotations

from typing import Tuple

from .models import Tuning


def _check_level(level: int) -> None:
    if level < 1:
        raise ValueError(f"level must be >= 1, got {level}")


def compute_spawn_interval(level: int, boss_mode: bool, tuning: Tuning) -> float:
    """Milliseconds between two spawns."""
    _check_level(level)
    interval = max(tuning.min_spawn_ms, tuning.spawn_rate_ms - level * tuning.spawn_decay_ms)
    if boss_mode:
        interval = min(interval, tuning.boss_spawn_ms)
    return float(interval)


def compute_word_speed(level: int, boss_mode: bool, tuning: Tuning) -> float:
    """Fall speed in px/frame, capped by max_speed (raised while a boss wave is on)."""
    _check_level(level)
    speed = tuning.min_speed + level * tuning.speed_ramp
    cap = tuning.max_speed
    if boss_mode:
        speed += tuning.boss_speed_boost
        cap += tuning.boss_max_speed_bonus
    return float(min(cap, speed))


def compute_length_range(level: int, boss_mode: bool, tuning: Tuning) -> Tuple[int, int]:
    _check_level(level)
    min_len, max_len = tuning.length_bands[0][1], tuning.length_bands[0][2]
    for from_level, lo, hi in tuning.length_bands:
        if level >= from_level:
            min_len, max_len = lo, hi
    if boss_mode:
        min_len = max(min_len, tuning.boss_min_length)
        max_len = 99
    return min_len, max_len


__all__ = ["compute_spawn_interval", "compute_word_speed", "compute_length_range"]
