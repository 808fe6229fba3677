import dataclasses
import os
import random
import tempfile

# keep config.json writes out of the package directory
os.environ.setdefault("TYPEATTACK_CONFIG", os.path.join(tempfile.mkdtemp(prefix="typeattack-"), "config.json"))

import pytest

from typeattack.enums import WordType
from typeattack.models import Tuning, Word
from typeattack.session import GameSession, MemoryHighScoreStore


class FakeClock:
    def __init__(self, t: float = 1000.0):
        self.t = t

    def __call__(self) -> float:
        return self.t

    def advance(self, seconds: float) -> float:
        self.t += seconds
        return self.t


class RecordingUi:
    def __init__(self):
        self.calls = []
        self.hud = None
        self.screen = None
        self.stats = []

    def update_hud(self, hud):
        self.hud = hud

    def show_screen(self, scene):
        self.screen = scene
        self.calls.append(("screen", scene))

    def show_level_up_modal(self, level_up):
        self.calls.append(("modal", level_up.level, level_up.badge_text, level_up.boss))

    def hide_level_up_modal(self):
        self.calls.append(("hide_modal",))

    def show_game_over(self, stats):
        self.stats.append(stats)

    def flash_input(self, kind):
        self.calls.append(("flash_input", kind))

    def shake(self):
        self.calls.append(("shake",))

    def flash_nuke(self):
        self.calls.append(("flash_nuke",))

    def count(self, name):
        return sum(1 for c in self.calls if c[0] == name)


class RecordingAudio:
    def __init__(self):
        self.played = []
        self.muted = False
        self.ambience = False

    def play(self, kind):
        self.played.append(kind)

    def start_ambience(self):
        self.ambience = True

    def stop_ambience(self):
        self.ambience = False

    def set_muted(self, muted):
        self.muted = bool(muted)

    def toggle_mute(self):
        self.muted = not self.muted
        return self.muted


# a bank with no shared first letters so the tests control what matches
TEST_BANK = ["cat", "dog", "emu", "fox", "gnu", "hen", "jay", "koi", "owl", "yak"]


def make_word(manager, text, *, x=100.0, y=100.0, speed=1.0, kind=WordType.NORMAL, color=(255, 255, 255)):
    word = Word(next(manager._ids), text, x, y, speed, kind, color)
    manager.words.append(word)
    return word


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def ui():
    return RecordingUi()


@pytest.fixture
def audio():
    return RecordingAudio()


@pytest.fixture
def tuning():
    return Tuning(level_threshold=150)


@pytest.fixture
def make_session(clock, ui, audio, tuning):
    def _make(**overrides):
        t = dataclasses.replace(tuning, **overrides)
        return GameSession(
            t,
            audio=audio,
            ui=ui,
            store=MemoryHighScoreStore(),
            now_fn=clock,
            rng=random.Random(42),
            bank=TEST_BANK,
            measure=lambda text: len(text) * 10.0,
        )
    return _make


@pytest.fixture
def put_word():
    return make_word
