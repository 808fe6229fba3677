from __future__ import annotations

import math
import random
from typing import Iterator, List, Optional

from .models import Color, Particle

# Burst shape
ANGLE_JITTER = 0.5                 # rad, added on top of the even spread
SPEED_MIN, SPEED_SPREAD = 1.5, 4.0
SIZE_MIN, SIZE_SPREAD = 2.0, 5.0

# Per-frame integration
GRAVITY = 0.08
LIFE_DECAY = 0.025

# Burst sizes used by the game
BURST_DESTROY = 22
BURST_NUKE = 10
BURST_LEVEL_UP = 32
BURST_DAMAGE = 20

LEVEL_UP_COLOR: Color = (168, 85, 247)
DAMAGE_COLOR: Color = (239, 68, 68)


class ParticleEngine:
    def __init__(self, *, rng: Optional[random.Random] = None) -> None:
        self.rng = rng or random.Random()
        self.particles: List[Particle] = []

    def __iter__(self) -> Iterator[Particle]:
        return iter(self.particles)

    def __len__(self) -> int:
        return len(self.particles)

    def emit(self, x: float, y: float, color: Color, count: int = 12) -> List[Particle]:
        born: List[Particle] = []
        for i in range(max(0, count)):
            angle = (math.pi * 2 * i) / count + self.rng.random() * ANGLE_JITTER
            speed = self.rng.random() * SPEED_SPREAD + SPEED_MIN
            born.append(Particle(
                x, y,
                vx=math.cos(angle) * speed,
                vy=math.sin(angle) * speed,
                size=self.rng.random() * SIZE_SPREAD + SIZE_MIN,
                color=color,
            ))
        self.particles.extend(born)
        return born

    def step(self) -> List[Particle]:
        self.particles = [p for p in self.particles if p.update(GRAVITY, LIFE_DECAY)]
        return self.particles

    def clear(self) -> None:
        self.particles = []


__all__ = [
    "ParticleEngine", "GRAVITY", "LIFE_DECAY",
    "BURST_DESTROY", "BURST_NUKE", "BURST_LEVEL_UP", "BURST_DAMAGE",
    "LEVEL_UP_COLOR", "DAMAGE_COLOR",
]
