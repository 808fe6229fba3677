"""One play session: state machine, per-frame tick and the effects of typing.

Phases: IDLE -> PLAYING <-> PAUSED, PLAYING -> GAME_OVER, any -> IDLE via reset().
The host calls `tick()` once per rendered frame and `handle_key()` for every key
press, both from the same thread. Nothing here touches pygame; audio, UI and
high-score storage are injected collaborators.
"""
from __future__ import annotations

import logging
import random
import time
from typing import Any, Callable, Optional, Protocol, Sequence

from . import particles as P
from .difficulty import compute_spawn_interval
from .enums import InputFlash, SoundKind, WordType
from .models import GameStats, HudState, LevelUp, Phase, Scene, SessionState, Tuning, Word
from .particles import ParticleEngine
from .progression import Progression
from .typing_engine import MatchKind, MatchResult, TypingEngine
from .words import WORD_BANK, WordManager, estimate_text_width

logger = logging.getLogger(__name__)

ESCAPE = "Escape"
DAMAGE_Y_OFFSET = 30


class AudioSink(Protocol):
    def play(self, kind: SoundKind) -> None: ...
    def start_ambience(self) -> None: ...
    def stop_ambience(self) -> None: ...
    def set_muted(self, muted: bool) -> None: ...
    def toggle_mute(self) -> bool: ...


class HighScoreStore(Protocol):
    def get_high_score(self) -> int: ...
    def set_high_score(self, value: int) -> None: ...


class UiSink(Protocol):
    def update_hud(self, hud: HudState) -> None: ...
    def show_screen(self, scene: Scene) -> None: ...
    def show_level_up_modal(self, level_up: LevelUp) -> None: ...
    def hide_level_up_modal(self) -> None: ...
    def show_game_over(self, stats: GameStats) -> None: ...
    def flash_input(self, kind: InputFlash) -> None: ...
    def shake(self) -> None: ...
    def flash_nuke(self) -> None: ...


class NullUi:
    def update_hud(self, hud: HudState) -> None: pass
    def show_screen(self, scene: Scene) -> None: pass
    def show_level_up_modal(self, level_up: LevelUp) -> None: pass
    def hide_level_up_modal(self) -> None: pass
    def show_game_over(self, stats: GameStats) -> None: pass
    def flash_input(self, kind: InputFlash) -> None: pass
    def shake(self) -> None: pass
    def flash_nuke(self) -> None: pass


class NullAudio:
    def __init__(self) -> None:
        self.muted = False

    def play(self, kind: SoundKind) -> None: pass
    def start_ambience(self) -> None: pass
    def stop_ambience(self) -> None: pass

    def set_muted(self, muted: bool) -> None:
        self.muted = bool(muted)

    def toggle_mute(self) -> bool:
        self.set_muted(not self.muted)
        return self.muted


class MemoryHighScoreStore:
    def __init__(self, value: int = 0) -> None:
        self.value = int(value)
        self.writes = 0

    def get_high_score(self) -> int:
        return self.value

    def set_high_score(self, value: int) -> None:
        self.value = int(value)
        self.writes += 1


class GameSession:
    def __init__(
        self,
        tuning: Optional[Tuning] = None,
        *,
        audio: Optional[AudioSink] = None,
        ui: Optional[UiSink] = None,
        store: Optional[HighScoreStore] = None,
        now_fn: Callable[[], float] = time.time,
        rng: Optional[random.Random] = None,
        bank: Sequence[str] = WORD_BANK,
        measure: Optional[Callable[[str], float]] = None,
    ) -> None:
        self.tuning = tuning or Tuning()
        self.audio: AudioSink = audio or NullAudio()
        self.ui: UiSink = ui or NullUi()
        self.store: HighScoreStore = store or MemoryHighScoreStore()
        self.now = now_fn
        self.rng = rng or random.Random()
        self.bank = list(bank)
        self.measure = measure or (lambda text: estimate_text_width(text, self.tuning.font_size))

        self.phase = Phase.IDLE
        self.session_id = 0
        self.muted = False
        self.high_score = int(self._safe(self.store.get_high_score, default=0) or 0)
        self.last_stats: Optional[GameStats] = None
        self._build()

    # ---- Construction / collaborator safety ----

    def _build(self) -> None:
        self.state = SessionState(lives=self.tuning.lives, high_score=self.high_score, is_muted=self.muted)
        self.words = WordManager(self.tuning, rng=self.rng, bank=self.bank, measure=self.measure)
        self.typing = TypingEngine(self.words, self.state)
        self.particles = ParticleEngine(rng=self.rng)
        self.progress = Progression(self.state, self.tuning, self.now)
        self.last_spawn: Optional[float] = None
        self.frame = 0

    def _safe(self, fn: Callable[..., Any], *args: Any, default: Any = None) -> Any:
        try:
            return fn(*args)
        except Exception as exc:
            logger.warning("collaborator %s failed: %s", getattr(fn, "__qualname__", fn), exc)
            return default

    def _sound(self, kind: SoundKind) -> None:
        self._safe(self.audio.play, kind)

    def hud(self) -> HudState:
        s = self.state
        return HudState(
            score=s.score,
            level=s.level,
            lives=s.lives,
            high_score=self.high_score,
            current_input=s.current_input,
            input_bound=s.active_word is not None,
            boss_mode=s.boss_mode,
            frozen=s.is_frozen,
        )

    def _publish_hud(self) -> None:
        self.ui.update_hud(self.hud())

    @property
    def is_playing(self) -> bool:
        return self.phase is Phase.PLAYING

    # ---- State machine ----

    def start(self) -> bool:
        if self.phase in (Phase.PLAYING, Phase.PAUSED):
            return False
        self.reset()
        self.phase = Phase.PLAYING
        self.state.is_playing = True
        logger.info("session %d started", self.session_id)
        self.ui.show_screen(Scene.GAME)
        self._publish_hud()
        if not self.muted:
            self._safe(self.audio.start_ambience)
        return True

    def reset(self) -> None:
        """Drop the current session. Timers, words and particles of the old one are discarded with it."""
        self.progress.reset()
        self.session_id += 1
        self.phase = Phase.IDLE
        self._build()
        self.ui.hide_level_up_modal()
        self._safe(self.audio.stop_ambience)
        logger.debug("session reset -> id %d", self.session_id)

    def pause(self) -> bool:
        if self.phase is not Phase.PLAYING:
            return False
        self.phase = Phase.PAUSED
        self.state.is_paused = True
        self.progress.pause()
        self._safe(self.audio.stop_ambience)
        logger.info("paused at frame %d", self.frame)
        return True

    def resume(self) -> bool:
        if self.phase is not Phase.PAUSED:
            return False
        self.phase = Phase.PLAYING
        self.state.is_paused = False
        self.progress.resume()
        self.last_spawn = self.now()
        if not self.muted:
            self._safe(self.audio.start_ambience)
        logger.info("resumed")
        return True

    def toggle_pause(self) -> bool:
        if self.phase is Phase.PLAYING:
            return self.pause()
        return self.resume()

    def dismiss_level_up_modal(self) -> bool:
        """Close the level-up panel early. The spawn pause it opened keeps running."""
        if self.phase is not Phase.PLAYING or not self.progress.level_up_modal.armed:
            return False
        self.progress.level_up_modal.reset()
        self.ui.hide_level_up_modal()
        return True

    def quit(self) -> None:
        self.reset()
        self.ui.show_screen(Scene.MENU)

    def toggle_mute(self) -> bool:
        self.muted = bool(self._safe(self.audio.toggle_mute, default=not self.muted))
        self.state.is_muted = self.muted
        if self.muted:
            self._safe(self.audio.stop_ambience)
        elif self.phase is Phase.PLAYING:
            self._safe(self.audio.start_ambience)
        return self.muted

    # ---- Frame ----

    def tick(self, now: Optional[float] = None) -> bool:
        """Run one frame. Returns False when the session is not playing (nothing happened)."""
        if self.phase is not Phase.PLAYING:
            return False
        now = self.now() if now is None else now
        self.frame += 1

        self._expire_windows(now)
        self._maybe_spawn(now)

        halted = self.state.is_frozen or self.state.modal_pause
        for word in self.words.advance(frozen=halted):
            self.typing.release(word)
            self.lose_life()
            if self.phase is not Phase.PLAYING:
                break

        self.particles.step()
        return True

    def _expire_windows(self, now: float) -> None:
        closed = self.progress.expire(now)
        if not closed:
            return
        if "level_up_modal" in closed:
            self.ui.hide_level_up_modal()
        if "boss" in closed:
            logger.info("boss wave over")
        if "freeze" in closed:
            logger.info("freeze over")
        self._publish_hud()

    def _maybe_spawn(self, now: float) -> Optional[Word]:
        s = self.state
        if s.is_frozen or s.modal_pause:
            return None
        interval_ms = compute_spawn_interval(s.level, s.boss_mode, self.tuning)
        if self.last_spawn is not None and (now - self.last_spawn) * 1000.0 <= interval_ms:
            return None
        self.last_spawn = now
        return self.words.spawn(s.level, s.boss_mode)

    # ---- Input ----

    def handle_key(self, key: str) -> Optional[MatchResult]:
        if key == ESCAPE:
            self.toggle_pause()
            return None
        if self.phase is not Phase.PLAYING:
            return None

        result = self.typing.press(key)
        if result.kind is MatchKind.COMPLETED and result.word is not None:
            self.destroy_word(result.word)
        elif result.kind is MatchKind.PARTIAL:
            self._sound(SoundKind.TYPE)
        elif result.kind is MatchKind.MISTAKE:
            self._sound(SoundKind.ERROR)
            self.ui.flash_input(InputFlash.ERROR)
            self.apply_penalty()
        if result.kind is not MatchKind.IGNORED:
            self._publish_hud()
        return result

    def apply_penalty(self) -> None:
        costs_life = self.progress.register_mistake()
        now = self.now()
        if (now - self.state.last_fail_sound_at) * 1000.0 > self.tuning.fail_sound_gap_ms:
            self._sound(SoundKind.FAIL)
            self.state.last_fail_sound_at = now
        self._publish_hud()
        if costs_life:
            self.lose_life()

    # ---- Word effects ----

    def destroy_word(self, word: Word) -> int:
        """Explode a completed word and score it. Returns the points awarded for the word itself."""
        self._sound(SoundKind.EXPLODE)
        cx = word.x + self.measure(word.text) / 2
        self.particles.emit(cx, word.y, word.color, P.BURST_DESTROY)
        self.words.remove(word)
        self.typing.release(word)
        self.state.words_destroyed += 1

        if word.type is WordType.NUKE:
            self.trigger_nuke()
        elif word.type is WordType.FREEZE:
            self.trigger_freeze()

        points = self.progress.word_points(word.text, word.is_power_up)
        self.add_score(points)
        return points

    def trigger_nuke(self) -> int:
        self._sound(SoundKind.POWERUP)
        self.ui.flash_nuke()
        victims = self.words.clear()
        for w in victims:
            self.particles.emit(w.x, w.y, w.color, P.BURST_NUKE)
        self.state.current_input = ""
        self.state.active_word = None
        self.state.words_destroyed += len(victims)
        logger.info("nuke cleared %d words", len(victims))
        bonus = self.progress.nuke_points(len(victims))
        if bonus:
            self.add_score(bonus)
        return len(victims)

    def trigger_freeze(self) -> None:
        self._sound(SoundKind.POWERUP)
        self.progress.arm_freeze()
        self._publish_hud()

    # ---- Progression ----

    def add_score(self, points: int) -> Optional[LevelUp]:
        level_up = self.progress.add_score(points)
        self._publish_hud()
        if level_up is None:
            return None
        t = self.tuning
        self.particles.emit(t.canvas_width / 2, t.canvas_height / 2, P.LEVEL_UP_COLOR, P.BURST_LEVEL_UP)
        self.ui.show_level_up_modal(level_up)
        return level_up

    def lose_life(self) -> None:
        if self.phase is not Phase.PLAYING:
            return
        dead = self.progress.lose_life()
        self._publish_hud()
        if dead:
            self.game_over()
            return
        self._sound(SoundKind.FAIL)
        self.ui.shake()
        t = self.tuning
        self.particles.emit(t.canvas_width / 2, t.canvas_height - DAMAGE_Y_OFFSET, P.DAMAGE_COLOR, P.BURST_DAMAGE)

    def game_over(self) -> Optional[GameStats]:
        if self.phase not in (Phase.PLAYING, Phase.PAUSED):
            return None
        s = self.state
        self.phase = Phase.GAME_OVER
        s.is_playing = False
        s.is_paused = False
        self.progress.pause()
        self._safe(self.audio.stop_ambience)
        self._sound(SoundKind.GAME_OVER)

        is_new_record = s.score > self.high_score
        if is_new_record:
            self.high_score = s.score
            s.high_score = s.score
            self._safe(self.store.set_high_score, s.score)

        stats = GameStats(
            score=s.score,
            level=s.level,
            high_score=self.high_score,
            is_new_record=is_new_record,
            mistakes=s.mistakes,
            words_destroyed=s.words_destroyed,
        )
        self.last_stats = stats
        logger.info("game over: score=%d level=%d new_record=%s", s.score, s.level, is_new_record)
        self.ui.show_game_over(stats)
        self.ui.show_screen(Scene.OVER)
        return stats


__all__ = ["GameSession", "NullUi", "NullAudio", "MemoryHighScoreStore", "AudioSink", "UiSink", "HighScoreStore", "ESCAPE"]
