from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np
import pygame

from .enums import SoundKind

logger = logging.getLogger(__name__)

SFX_DIR = Path(__file__).resolve().parent / "assets" / "sfx"
SAMPLE_RATE = 44100
AMBIENCE_FADE_IN_MS = 4000
AMBIENCE_FADE_OUT_MS = 800
AMBIENCE_LOOP_SEC = 4.0

# (start_sec, dur_sec, f0, f1, gain, wave); frequency glides exponentially f0 -> f1
Voice = Tuple[float, float, float, float, float, str]

PATCHES: Dict[SoundKind, List[Voice]] = {
    SoundKind.TYPE:      [(0.0, 0.07, 1100, 700, 0.18, "sine")],
    SoundKind.ERROR:     [(0.0, 0.09, 200, 200, 0.15, "saw"), (0.06, 0.09, 175, 175, 0.15, "saw")],
    SoundKind.FAIL:      [(0.0, 0.35, 280, 60, 0.25, "saw")],
    SoundKind.EXPLODE:   [(0.0, 0.5, 1000, 50, 0.45, "noise"), (0.0, 0.3, 100, 25, 0.5, "sine")],
    SoundKind.POWERUP:   [(i * 0.065, 0.15, f, f, 0.18, "sine") for i, f in enumerate((300, 450, 600, 900, 1200))],
    SoundKind.GAME_OVER: [(i * 0.28, 0.5, f, f, 0.28, "sine") for i, f in enumerate((523, 415, 349, 262))],
}

SFX_FILES = {kind: f"sfx_{kind.value}.wav" for kind in SoundKind}


def _to_int16(wave: np.ndarray) -> np.ndarray:
    return (np.clip(wave, -1.0, 1.0) * 32767).astype(np.int16)


def render_voices(voices: Sequence[Voice], rate: int = SAMPLE_RATE, *, seed: int = 7) -> np.ndarray:
    """Mix voices into signed 16-bit mono samples with an exponential decay envelope."""
    rng = np.random.default_rng(seed)
    total = max(v[0] + v[1] for v in voices)
    buf = np.zeros(int(total * rate) + 1)
    for start, dur, f0, f1, gain, wave in voices:
        if gain <= 0:
            continue
        n = int(dur * rate)
        off = int(start * rate)
        t = np.arange(n) / max(1, n)
        phase = np.cumsum(2 * np.pi * f0 * (f1 / f0) ** t / rate)
        if wave == "saw":
            s = (phase / np.pi) % 2.0 - 1.0
        elif wave == "noise":
            s = rng.uniform(-1.0, 1.0, n)
        else:
            s = np.sin(phase)
        buf[off:off + n] += s * gain * (0.001 / gain) ** t
    return _to_int16(buf)


def render_ambience(rate: int = SAMPLE_RATE, seconds: float = AMBIENCE_LOOP_SEC) -> np.ndarray:
    """Low drone that loops cleanly: every partial completes whole cycles in `seconds`."""
    t = np.arange(int(rate * seconds)) / rate
    partials = ((36.0, 0.5), (54.0, 0.18), (72.25, 0.08), (432.0, 0.02))
    breath = 0.75 + 0.25 * np.sin(2 * np.pi * t / seconds)
    wave = sum(g * np.sin(2 * np.pi * round(f * seconds) / seconds * t) for f, g in partials)
    return _to_int16(wave * breath * 0.6)


class AudioController:
    def __init__(self, *, sfx_volume: float = 0.8, ambience_volume: float = 0.35, muted: bool = False) -> None:
        self.sfx_volume = max(0.0, min(1.0, float(sfx_volume)))
        self.ambience_volume = max(0.0, min(1.0, float(ambience_volume)))
        self.muted = bool(muted)
        self.sfx: Dict[SoundKind, pygame.mixer.Sound] = {}
        self.ambience: Optional[pygame.mixer.Sound] = None
        self._ambience_channel: Optional[pygame.mixer.Channel] = None
        self.ok = False
        try:
            if not pygame.mixer.get_init():
                pygame.mixer.init(SAMPLE_RATE, -16, 1)
            pygame.mixer.set_num_channels(16)
            self.ok = True
        except Exception as exc:
            logger.warning("audio disabled: %s", exc)
            return
        self._preload()

    def _to_sound(self, mono: np.ndarray) -> Optional[pygame.mixer.Sound]:
        freq, fmt, channels = pygame.mixer.get_init()
        if fmt != -16:
            return None
        # match the mixer's channel count
        arr = mono if channels == 1 else np.repeat(mono[:, None], channels, axis=1)
        return pygame.sndarray.make_sound(np.ascontiguousarray(arr))

    def _preload(self) -> None:
        rate = pygame.mixer.get_init()[0]
        for kind, voices in PATCHES.items():
            try:
                path = SFX_DIR / SFX_FILES[kind]
                snd = pygame.mixer.Sound(str(path)) if path.exists() else self._to_sound(render_voices(voices, rate))
                if snd is not None:
                    snd.set_volume(self.sfx_volume)
                    self.sfx[kind] = snd
            except Exception as exc:
                logger.warning("could not prepare sound %s: %s", kind.value, exc)
        try:
            self.ambience = self._to_sound(render_ambience(rate))
            if self.ambience is not None:
                self.ambience.set_volume(self.ambience_volume)
        except Exception as exc:
            logger.warning("could not prepare ambience: %s", exc)

    def play(self, kind: SoundKind) -> None:
        if self.muted or not self.ok:
            return
        snd = self.sfx.get(kind)
        try:
            if snd is not None:
                snd.play()
        except Exception as exc:
            logger.debug("play %s failed: %s", kind.value, exc)

    def start_ambience(self) -> None:
        if self.muted or not self.ok or self.ambience is None:
            return
        if self._ambience_channel is not None and self._ambience_channel.get_busy():
            return
        try:
            self._ambience_channel = self.ambience.play(loops=-1, fade_ms=AMBIENCE_FADE_IN_MS)
        except Exception as exc:
            logger.debug("ambience start failed: %s", exc)

    def stop_ambience(self) -> None:
        ch, self._ambience_channel = self._ambience_channel, None
        if ch is None:
            return
        try:
            ch.fadeout(AMBIENCE_FADE_OUT_MS)
        except Exception as exc:
            logger.debug("ambience stop failed: %s", exc)

    def set_muted(self, muted: bool) -> None:
        self.muted = bool(muted)
        if self.muted:
            self.stop_ambience()

    def toggle_mute(self) -> bool:
        self.set_muted(not self.muted)
        return self.muted


__all__ = ["AudioController", "PATCHES", "render_voices", "render_ambience"]
