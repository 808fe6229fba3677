import random

import pytest

from typeattack.enums import WordType
from typeattack.models import Tuning
from typeattack.words import FREEZE_COLOR, NUKE_COLOR, WordManager, estimate_text_width, random_word_color


class ScriptedRandom(random.Random):
    """random() returns the scripted values in order, everything else is seeded."""

    def __init__(self, values):
        super().__init__(0)
        self.values = list(values)

    def random(self):
        return self.values.pop(0) if self.values else 0.5

    def getrandbits(self, k):
        # keeps choice() off the scripted values
        return super().getrandbits(k)


def manager(tuning=None, rng=None, bank=None):
    return WordManager(
        tuning or Tuning(),
        rng=rng or random.Random(1),
        bank=bank or ["cat", "dog", "emu", "planet", "rocket", "telescope"],
        measure=lambda text: len(text) * 10.0,
    )


def test_empty_bank_is_rejected():
    with pytest.raises(ValueError):
        WordManager(Tuning(), bank=[])


def test_pick_text_respects_length_band():
    m = manager()
    for _ in range(20):
        assert 3 <= len(m.pick_text(1, False)) <= 5


def test_pick_text_falls_back_to_whole_bank_when_band_is_empty():
    m = manager(bank=["telescope"])
    assert m.pick_text(1, False) == "telescope"


def test_pick_text_avoids_recent_words():
    m = manager(bank=["cat", "dog", "emu"])
    first_three = {m.pick_text(1, False) for _ in range(3)}
    assert first_three == {"cat", "dog", "emu"}


def test_pick_text_reuses_when_everything_is_recent():
    m = manager(bank=["cat"])
    assert [m.pick_text(1, False) for _ in range(3)] == ["cat", "cat", "cat"]


def test_roll_type_bands():
    t = Tuning(freeze_chance=0.05, nuke_chance=0.05)
    m = manager(t, rng=ScriptedRandom([0.0, 0.899, 0.9, 0.949, 0.95, 0.999]))
    kinds = [m.roll_type() for _ in range(6)]
    assert kinds == [
        WordType.NORMAL, WordType.NORMAL,
        WordType.FREEZE, WordType.FREEZE,
        WordType.NUKE, WordType.NUKE,
    ]


def test_spawn_stays_on_canvas():
    t = Tuning(canvas_width=800)
    m = manager(t, rng=random.Random(7))
    for _ in range(200):
        w = m.spawn(1, False)
        assert w.x >= 10
        assert w.x + len(w.text) * 10.0 <= 800 - 10 + 1e-6
        assert w.y == t.spawn_y
        assert w.typed_length == 0


def test_spawn_assigns_unique_ids_in_order():
    m = manager()
    words = [m.spawn(1, False) for _ in range(5)]
    assert [w.id for w in words] == sorted({w.id for w in words})
    assert list(m) == words


def test_spawn_power_up_colors():
    m = manager(rng=ScriptedRandom([0.5, 0.92]))
    w = m.spawn(1, False)
    assert w.type is WordType.FREEZE
    assert w.color == FREEZE_COLOR
    m = manager(rng=ScriptedRandom([0.5, 0.97]))
    w = m.spawn(1, False)
    assert w.type is WordType.NUKE
    assert w.color == NUKE_COLOR


def test_advance_moves_and_reports_misses(put_word):
    t = Tuning(canvas_height=600, miss_margin=10)
    m = manager(t)
    slow = put_word(m, "cat", y=100, speed=2.0)
    edge = put_word(m, "dog", y=609, speed=1.0)
    gone = put_word(m, "emu", y=605, speed=6.0)

    missed = m.advance(frozen=False)

    assert slow.y == 102
    assert edge.y == 610
    assert missed == [gone]
    assert list(m) == [slow, edge]


def test_advance_frozen_does_not_move(put_word):
    m = manager()
    w = put_word(m, "cat", y=100, speed=3.0)
    assert m.advance(frozen=True) == []
    assert w.y == 100


def test_get_resolves_handles(put_word):
    m = manager()
    w = put_word(m, "cat")
    assert m.get(w.id) is w
    assert m.get(None) is None
    m.remove(w)
    assert m.get(w.id) is None
    assert m.remove(w) is False


def test_clear_returns_victims(put_word):
    m = manager()
    a, b = put_word(m, "cat"), put_word(m, "dog")
    assert m.clear() == [a, b]
    assert len(m) == 0


def test_text_width_and_colors():
    assert estimate_text_width("abcd", 20) == pytest.approx(4 * 20 * 0.62)
    rng = random.Random(3)
    for _ in range(20):
        r, g, b = random_word_color(rng)
        assert all(0 <= c <= 255 for c in (r, g, b))
