import pytest

from typeattack.difficulty import compute_length_range, compute_spawn_interval, compute_word_speed
from typeattack.models import Tuning

T = Tuning()


def test_spawn_interval_decays_to_floor():
    assert compute_spawn_interval(1, False, T) == 1860
    assert compute_spawn_interval(5, False, T) == 1300
    # 2000 - 10 * 140 = 600, below the 650 floor
    assert compute_spawn_interval(10, False, T) == 650
    assert compute_spawn_interval(50, False, T) == 650


def test_spawn_interval_boss_is_never_slower_than_boss_rate():
    assert compute_spawn_interval(1, True, T) == 450
    assert compute_spawn_interval(30, True, T) == 450
    fast = Tuning(min_spawn_ms=300, spawn_rate_ms=400)
    assert compute_spawn_interval(1, True, fast) == 300


def test_word_speed_ramps_and_caps():
    assert compute_word_speed(1, False, T) == pytest.approx(0.68)
    assert compute_word_speed(10, False, T) == pytest.approx(2.3)
    assert compute_word_speed(20, False, T) == pytest.approx(3.5)


def test_word_speed_boss_boost_and_raised_cap():
    assert compute_word_speed(1, True, T) == pytest.approx(1.28)
    assert compute_word_speed(40, True, T) == pytest.approx(4.7)
    assert compute_word_speed(40, True, T) > compute_word_speed(40, False, T)


def test_length_bands():
    assert compute_length_range(1, False, T) == (3, 5)
    assert compute_length_range(4, False, T) == (3, 5)
    assert compute_length_range(5, False, T) == (4, 6)
    assert compute_length_range(8, False, T) == (5, 7)
    assert compute_length_range(12, False, T) == (6, 8)
    assert compute_length_range(15, False, T) == (7, 9)
    assert compute_length_range(25, False, T) == (8, 99)


def test_length_boss_forces_long_words():
    assert compute_length_range(10, True, T) == (7, 99)
    assert compute_length_range(20, True, T) == (8, 99)


@pytest.mark.parametrize("fn", [compute_spawn_interval, compute_word_speed, compute_length_range])
def test_level_below_one_is_rejected(fn):
    with pytest.raises(ValueError):
        fn(0, False, T)
