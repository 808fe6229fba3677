from __future__ import annotations
from typing import Callable, Dict, Tuple
import math

from .constants import (
    ERROR_FLASH_SEC,
    NUKE_FLASH_SEC,
    PULSE_BASE_DURATION,
    PULSE_BASE_MAX_SCALE,
    PULSE_KIND_DURATION,
    PULSE_KIND_SCALE,
    SHAKE_AMPLITUDE_FACT,
    SHAKE_DURATION,
    SHAKE_FREQ_HZ,
)


class EffectsManager:
    def __init__(self, now_fn: Callable[[], float]):
        self.now = now_fn

        # easing
        self._easing_map: Dict[str, Callable[[float], float]] = {
            "out_cubic": self._ease_out_cubic,
            "in_cubic":  self._ease_in_cubic,
        }

        # shake
        self.shake_start = 0.0
        self.shake_until = 0.0
        self.shake_duration = SHAKE_DURATION

        # flashes: kind -> (start, until)
        self._flashes: Dict[str, Tuple[float, float]] = {
            "nuke":  (0.0, 0.0),
            "error": (0.0, 0.0),
        }

        # pulses
        self._pulses: Dict[str, Tuple[float, float]] = {
            'score': (0.0, 0.0),
            'level': (0.0, 0.0),
            'lives': (0.0, 0.0),
        }

    # ---------- easing ----------
    @staticmethod
    def _clamp01(t: float) -> float:
        return 0.0 if t <= 0.0 else 1.0 if t >= 1.0 else t

    def _ease_out_cubic(self, t: float) -> float:
        t = self._clamp01(t)
        return 1.0 - (1.0 - t) ** 3

    def _ease_in_cubic(self, t: float) -> float:
        t = self._clamp01(t)
        return t ** 3

    def ease(self, name: str, t: float) -> float:
        fn = self._easing_map[name]
        return fn(t)

    def clear_transients(self):
        self.shake_start = self.shake_until = 0.0
        self._flashes = {k: (0.0, 0.0) for k in self._flashes}
        self._pulses = {k: (0.0, 0.0) for k in self._pulses}

    # ---------- triggers ----------
    def trigger_shake(self, duration: float = SHAKE_DURATION):
        now = self.now()
        self.shake_duration = max(0.01, duration)
        self.shake_start = now
        self.shake_until = now + self.shake_duration

    def trigger_flash(self, kind: str, duration: float | None = None):
        if kind not in self._flashes:
            return
        dur = duration if duration is not None else (NUKE_FLASH_SEC if kind == "nuke" else ERROR_FLASH_SEC)
        now = self.now()
        self._flashes[kind] = (now, now + max(1e-3, float(dur)))

    def trigger_pulse(self, kind: str, duration: float | None = None):
        if kind not in self._pulses:
            return
        dur = float(duration if duration is not None else PULSE_KIND_DURATION.get(kind, PULSE_BASE_DURATION))
        now = self.now()
        self._pulses[kind] = (now, now + max(1e-3, dur))

    # ---------- queries ----------
    def flash_alpha(self, kind: str) -> float:
        """1.0 right after the trigger, fading linearly to 0.0."""
        start, until = self._flashes.get(kind, (0.0, 0.0))
        now = self.now()
        if start <= 0.0 or now >= until:
            return 0.0
        return 1.0 - (now - start) / max(1e-6, until - start)

    def is_flash_active(self, kind: str) -> bool:
        return self.flash_alpha(kind) > 0.0

    def pulse_scale(self, kind: str) -> float:
        start, until = self._pulses.get(kind, (0.0, 0.0))
        if start <= 0.0:
            return 1.0
        now = self.now()
        if now >= until:
            return 1.0
        t = (now - start) / max(1e-6, until - start)
        max_scale = float(PULSE_BASE_MAX_SCALE) * float(PULSE_KIND_SCALE.get(kind, 1.0))
        return 1.0 + (max_scale - 1.0) * math.sin(math.pi * self._clamp01(t))

    def shake_offset(self, screen_w: int) -> tuple[float, float]:
        now = self.now()
        if now >= self.shake_until:
            return (0.0, 0.0)
        sh_t = self._clamp01((now - self.shake_start) / self.shake_duration)
        env = 1.0 - sh_t
        amp = screen_w * SHAKE_AMPLITUDE_FACT * env
        phase = 2.0 * math.pi * SHAKE_FREQ_HZ * (now - self.shake_start)
        dx = amp * math.sin(phase)
        dy = 0.5 * amp * math.cos(phase * 0.9)
        return (dx, dy)


__all__ = ["EffectsManager"]
