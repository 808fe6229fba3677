from __future__ import annotations

import logging
from typing import Callable, List, Optional

from .models import LevelUp, SessionState, Tuning
from .timers import PausableCountdown, resume_all, stop_all

logger = logging.getLogger(__name__)

BOSS_BADGE = "BOSS WAVE"
BOSS_SUBTITLE = "Elite words inbound. Survive the storm."


class Progression:
    """Score, level, lives and the timed windows (boss, freeze, level-up modal).

    Holds no collaborators: every method mutates the session state and reports
    what happened, the session turns that into sound, particles and UI calls.
    """

    def __init__(self, state: SessionState, tuning: Tuning, now_fn: Callable[[], float]) -> None:
        self.state = state
        self.tuning = tuning
        self.boss = PausableCountdown(now_fn)
        self.freeze = PausableCountdown(now_fn)
        self.modal_pause = PausableCountdown(now_fn)
        self.level_up_modal = PausableCountdown(now_fn)

    @property
    def timers(self) -> List[PausableCountdown]:
        return [self.boss, self.freeze, self.modal_pause, self.level_up_modal]

    # ---- Score / level ----

    def level_for(self, score: int) -> int:
        return score // self.tuning.level_threshold + 1

    def word_points(self, text: str, power_up: bool) -> int:
        return len(text) * self.tuning.points_per_char + (self.tuning.power_up_bonus if power_up else 0)

    def add_score(self, points: int) -> Optional[LevelUp]:
        s = self.state
        s.score = max(0, s.score + int(points))
        new_level = self.level_for(s.score)
        if new_level <= s.level:
            return None

        s.level = new_level
        logger.info("level up -> %d (score %d)", s.level, s.score)
        self._open_modal()
        if s.level % self.tuning.boss_every_levels == 0 and s.last_boss_level != s.level:
            self.start_boss(s.level)
            return LevelUp(s.level, boss=True, badge_text=BOSS_BADGE, subtitle=BOSS_SUBTITLE)
        return LevelUp(s.level, boss=False)

    def start_boss(self, level: int) -> None:
        self.state.boss_mode = True
        self.state.last_boss_level = level
        self.boss.arm(self.tuning.boss_duration_ms / 1000.0)
        logger.info("boss wave at level %d for %.1fs", level, self.boss.duration)

    def _open_modal(self) -> None:
        self.state.modal_pause = True
        self.modal_pause.arm(self.tuning.modal_pause_ms / 1000.0)
        self.level_up_modal.arm(self.tuning.level_up_modal_ms / 1000.0)

    # ---- Power-ups ----

    def arm_freeze(self) -> None:
        self.state.is_frozen = True
        self.freeze.arm(self.tuning.freeze_ms / 1000.0)
        logger.info("freeze armed for %.1fs", self.freeze.duration)

    def nuke_points(self, destroyed: int) -> int:
        return destroyed * self.tuning.nuke_points_per_word

    # ---- Penalties / lives ----

    def register_mistake(self) -> bool:
        """Apply the wrong-key penalty. Returns True when this mistake costs a life."""
        s = self.state
        s.mistakes += 1
        s.score = max(0, s.score - self.tuning.wrong_key_penalty)
        return s.mistakes % self.tuning.mistake_life_threshold == 0

    def lose_life(self) -> bool:
        """Returns True when the last life is gone."""
        self.state.lives = max(0, self.state.lives - 1)
        return self.state.lives <= 0

    # ---- Timed windows ----

    def expire(self, now: Optional[float] = None) -> List[str]:
        """Close every window whose countdown ran out. Returns the names of what closed."""
        s = self.state
        closed: List[str] = []
        if s.boss_mode and self.boss.expired(now):
            s.boss_mode = False
            self.boss.reset()
            closed.append("boss")
        if s.is_frozen and self.freeze.expired(now):
            s.is_frozen = False
            self.freeze.reset()
            closed.append("freeze")
        if s.modal_pause and self.modal_pause.expired(now):
            s.modal_pause = False
            self.modal_pause.reset()
            closed.append("modal_pause")
        if self.level_up_modal.expired(now):
            self.level_up_modal.reset()
            closed.append("level_up_modal")
        for name in closed:
            logger.debug("window closed: %s", name)
        return closed

    def pause(self) -> None:
        stop_all(self.timers)

    def resume(self) -> None:
        resume_all(self.timers)

    def reset(self) -> None:
        for t in self.timers:
            t.reset()


__all__ = ["Progression", "BOSS_BADGE", "BOSS_SUBTITLE"]
