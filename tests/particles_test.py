import math
import random

import pytest

from typeattack.models import Particle
from typeattack.particles import GRAVITY, LIFE_DECAY, ParticleEngine


def test_emit_spawns_count_at_origin():
    eng = ParticleEngine(rng=random.Random(5))
    born = eng.emit(100, 50, (1, 2, 3), count=12)

    assert len(born) == 12 == len(eng)
    for p in born:
        assert (p.x, p.y) == (100, 50)
        assert p.life == 1.0
        assert p.color == (1, 2, 3)
        assert 2.0 <= p.size <= 7.0
        assert 1.5 <= math.hypot(p.vx, p.vy) <= 5.5 + 1e-9


def test_emit_zero_is_noop():
    eng = ParticleEngine(rng=random.Random(5))
    assert eng.emit(0, 0, (0, 0, 0), count=0) == []
    assert len(eng) == 0


def test_particle_update_integrates_gravity():
    p = Particle(0, 0, vx=1.0, vy=-2.0, size=3, color=(0, 0, 0))
    assert p.update(GRAVITY, LIFE_DECAY)
    assert (p.x, p.y) == (1.0, -2.0)
    assert p.vy == pytest.approx(-2.0 + GRAVITY)
    assert p.life == pytest.approx(1.0 - LIFE_DECAY)


def test_particles_burn_out_after_about_forty_frames():
    eng = ParticleEngine(rng=random.Random(5))
    eng.emit(0, 0, (9, 9, 9), count=8)
    frames = 0
    while len(eng):
        eng.step()
        frames += 1
    # float drift may cost one extra frame
    assert math.ceil(1.0 / LIFE_DECAY) <= frames <= math.ceil(1.0 / LIFE_DECAY) + 1


def test_clear():
    eng = ParticleEngine()
    eng.emit(0, 0, (9, 9, 9), count=3)
    eng.clear()
    assert list(eng) == []
