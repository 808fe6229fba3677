from __future__ import annotations

import logging
import os
import random
import sys
import time
from typing import Optional, Tuple

import pygame

from .audio import AudioController
from .config import CFG
from .constants import *
from .enums import InputFlash
from .fx import EffectsManager
from .input_queue import InputQueue, key_name
from .managers import BannerContent, BannerManager
from .models import GameStats, HudState, LevelUp, Scene, Tuning
from .session import GameSession
from .storage import ConfigHighScoreStore
from .ui_components import ParticlePainter, TimeBar, WordPainter

logger = logging.getLogger(__name__)


class Game:
    """pygame host: owns the window, routes keys into the session and draws every scene.

    Also the session's UI sink; the session calls back into `update_hud`,
    `show_screen` and friends while it runs.
    """

    # ---- Core lifecycle wiring ----

    def __init__(self, screen: pygame.Surface):
        self.screen = screen
        self.scene: Scene = Scene.MENU
        self.w, self.h = self.screen.get_size()
        self.clock = pygame.time.Clock()
        self.fb = pygame.Surface((self.w, self.h), pygame.SRCALPHA)

        # --- Font cache ---
        self._font_cache: dict[tuple[str, int, bool, bool], pygame.font.Font] = {}
        self._sysfont_fallback = "consolas,menlo,dejavusansmono,monospace"
        self.font = self._font(FONT_SIZE_SMALL)
        self.mid = self._font(FONT_SIZE_MID)
        self.big = self._font(FONT_SIZE_BIG, bold=True)
        self.word_font = self._font(WORD_FONT_SIZE, bold=True)
        self.badge_font = self._font(BADGE_FONT_SIZE, bold=True)
        self.hud_label_font = self._font(HUD_LABEL_FONT_SIZE)
        self.hud_value_font = self._font(HUD_VALUE_FONT_SIZE, bold=True)

        # --- Effects & UI parts ---
        self.fx = EffectsManager(self.now)
        self.banner = BannerManager(MODAL_IN_SEC, MODAL_OUT_SEC)
        self.words_painter = WordPainter(self)
        self.particles_painter = ParticlePainter(self)
        self.time_bar = TimeBar(self)
        self.stars = self._make_starfield()

        # --- HUD snapshot pushed by the session ---
        self.hud: Optional[HudState] = None
        self.stats: Optional[GameStats] = None

        # --- Session ---
        audio_cfg = CFG.get("audio", {})
        self.audio = AudioController(
            sfx_volume=audio_cfg.get("sfx_volume", 0.8),
            ambience_volume=audio_cfg.get("ambience_volume", 0.35),
            muted=audio_cfg.get("muted", False),
        )
        self.session = GameSession(
            Tuning.from_cfg(CFG),
            audio=self.audio,
            ui=self,
            store=ConfigHighScoreStore(),
            now_fn=self.now,
            measure=self.measure,
        )
        self.session.muted = self.session.state.is_muted = self.audio.muted
        self.hud = self.session.hud()

    def start_game(self) -> None:
        self.stats = None
        self.fx.clear_transients()
        self.banner.clear()
        self.session.start()

    def back_to_menu(self) -> None:
        self.stats = None
        self.fx.clear_transients()
        self.session.quit()

    # ---- Timing utilities ----

    def now(self) -> float:
        return time.time()

    def measure(self, text: str) -> float:
        return float(self.word_font.size(text)[0])

    # ---- Fonts ----

    def _load_font_file(self, size: int, *, bold: bool = False, italic: bool = False) -> pygame.font.Font:
        path = FONT_PATH
        try:
            if path and os.path.exists(path):
                f = pygame.font.Font(path, size)
                f.set_bold(bold)
                f.set_italic(italic)
                return f
            return pygame.font.SysFont(self._sysfont_fallback, size, bold=bold, italic=italic)
        except Exception:
            return pygame.font.SysFont(self._sysfont_fallback, size, bold=bold, italic=italic)

    def _font(self, px: int, *, bold: bool = False, italic: bool = False) -> pygame.font.Font:
        size = max(8, int(round(px)))
        key = (FONT_PATH, size, bool(bold), bool(italic))
        f = self._font_cache.get(key)
        if f is None:
            f = self._load_font_file(size, bold=bold, italic=italic)
            self._font_cache[key] = f
        return f

    def _make_starfield(self) -> list[Tuple[int, int, int]]:
        rnd = random.Random(1337)
        return [(rnd.randrange(self.w), rnd.randrange(self.h), rnd.choice((1, 1, 1, 2))) for _ in range(STARFIELD_COUNT)]

    # ---- UI sink (called by the session) ----

    def update_hud(self, hud: HudState) -> None:
        prev = self.hud
        if prev is not None:
            if hud.score != prev.score:
                self.fx.trigger_pulse("score")
            if hud.level > prev.level:
                self.fx.trigger_pulse("level")
            if hud.lives < prev.lives:
                self.fx.trigger_pulse("lives")
        self.hud = hud

    def show_screen(self, scene: Scene) -> None:
        logger.debug("scene %s -> %s", self.scene.name, scene.name)
        self.scene = scene

    def show_level_up_modal(self, level_up: LevelUp) -> None:
        content = BannerContent(level_up.level, level_up.badge_text, level_up.subtitle, level_up.boss)
        self.banner.start(self.now(), content)

    def hide_level_up_modal(self) -> None:
        self.banner.hide(self.now())

    def show_game_over(self, stats: GameStats) -> None:
        self.stats = stats

    def flash_input(self, kind: InputFlash) -> None:
        if kind is InputFlash.ERROR:
            self.fx.trigger_flash("error", self.session.tuning.error_flash_ms / 1000.0)

    def shake(self) -> None:
        self.fx.trigger_shake(self.session.tuning.shake_ms / 1000.0)

    def flash_nuke(self) -> None:
        self.fx.trigger_flash("nuke")

    # ---- Input ----

    def handle_event(self, event: pygame.event.Event, iq: InputQueue):
        if event.type != pygame.KEYDOWN:
            return

        if self.scene is Scene.MENU:
            if event.key == pygame.K_ESCAPE:
                pygame.quit(); sys.exit(0)
            if event.key in (pygame.K_RETURN, pygame.K_KP_ENTER, pygame.K_SPACE):
                iq.clear()
                self.start_game(); return
            if event.key == pygame.K_i:
                self.scene = Scene.INSTRUCTIONS; return
            if event.key == pygame.K_m:
                self.session.toggle_mute(); return

        elif self.scene is Scene.INSTRUCTIONS:
            if event.key in (pygame.K_ESCAPE, pygame.K_RETURN, pygame.K_i):
                self.scene = Scene.MENU; return

        elif self.scene is Scene.GAME:
            # letters are words while playing; the menu keys only work on the pause overlay
            if self.session.state.is_paused:
                if event.key == pygame.K_q:
                    iq.clear()
                    self.back_to_menu(); return
                if event.key == pygame.K_m:
                    self.session.toggle_mute(); return
            elif event.key in (pygame.K_RETURN, pygame.K_KP_ENTER):
                self.session.dismiss_level_up_modal(); return
            iq.push(key_name(event))

        elif self.scene is Scene.OVER:
            if event.key in (pygame.K_SPACE, pygame.K_RETURN, pygame.K_KP_ENTER):
                iq.clear()
                self.start_game(); return
            if event.key == pygame.K_ESCAPE:
                self.back_to_menu(); return

    def update(self, iq: InputQueue) -> None:
        if self.scene is not Scene.GAME:
            _ = iq.pop_all()
            return
        for name in iq.pop_all():
            self.session.handle_key(name)
        self.session.tick()

    # ---- Rendering ----

    def _draw_round_rect(
        self,
        surf: pygame.Surface,
        rect: pygame.Rect,
        fill,
        border=None,
        border_w=1,
        radius=12,
    ) -> None:
        rr = pygame.Surface((rect.width, rect.height), pygame.SRCALPHA)
        pygame.draw.rect(rr, fill, rr.get_rect(), border_radius=radius)
        if border is not None and border_w > 0:
            pygame.draw.rect(rr, border, rr.get_rect(), width=border_w, border_radius=radius)
        surf.blit(rr, rect.topleft)

    def _shadow_text(self, surf: pygame.Surface) -> pygame.Surface:
        sh = pygame.Surface(surf.get_size(), pygame.SRCALPHA)
        sh.blit(surf, (0, 0))
        tint = pygame.Surface(surf.get_size(), pygame.SRCALPHA)
        tint.fill((0, 0, 0, 255))
        sh.blit(tint, (0, 0), special_flags=pygame.BLEND_RGBA_MULT)
        return sh

    def draw_text(self, text: str, *, pos: Optional[tuple[float, float]] = None,
                  font: Optional[pygame.font.Font] = None, color=INK, shadow=True,
                  scale: float = 1.0, alpha: Optional[int] = None,
                  shadow_offset=TEXT_SHADOW_OFFSET) -> pygame.Surface:
        font = font or self.font
        base = font.render(text, True, color)

        if scale != 1.0:
            bw, bh = base.get_size()
            base = pygame.transform.smoothscale(base, (max(1, int(bw*scale)), max(1, int(bh*scale))))

        out = base
        if shadow:
            dx, dy = shadow_offset
            sh = self._shadow_text(base)
            surf = pygame.Surface((base.get_width()+max(0, int(dx)), base.get_height()+max(0, int(dy))), pygame.SRCALPHA)
            surf.blit(sh, (int(dx), int(dy))); surf.blit(base, (0, 0))
            out = surf

        if alpha is not None:
            out.set_alpha(alpha)

        if pos is not None:
            x, y = pos
            self.screen.blit(out, (int(x), int(y)))

        return out

    def draw_centered(self, text: str, y: float, *, font=None, color=INK, scale: float = 1.0) -> pygame.Surface:
        surf = self.draw_text(text, font=font, color=color, scale=scale)
        self.screen.blit(surf, (self.w // 2 - surf.get_width() // 2, int(y)))
        return surf

    def draw_chip(
        self,
        text: str,
        x: int,
        y: int,
        pad: int = 10,
        radius: int = 10,
        bg=(20, 22, 30, 160),
        border=(120, 200, 255, 220),
        text_color=INK,
        *,
        font: Optional[pygame.font.Font] = None,
        border_w: int = 1,
    ) -> pygame.Rect:
        fnt = font or self.font
        t_surf = fnt.render(text, True, text_color)
        w, h = t_surf.get_width() + pad * 2, t_surf.get_height() + pad * 2

        chip = pygame.Surface((w, h), pygame.SRCALPHA)
        pygame.draw.rect(chip, bg, chip.get_rect(), border_radius=radius)
        pygame.draw.rect(chip, border, chip.get_rect(), width=border_w, border_radius=radius)

        shadow = pygame.Surface((w, h), pygame.SRCALPHA)
        pygame.draw.rect(shadow, (0, 0, 0, 120), shadow.get_rect(), border_radius=radius + 2)
        self.screen.blit(shadow, (x + 3, y + 4))

        chip.blit(t_surf, (pad, pad))
        self.screen.blit(chip, (x, y))
        return pygame.Rect(x, y, w, h)

    def _blit_bg(self) -> None:
        self.screen.fill(BG)
        for x, y, r in self.stars:
            pygame.draw.circle(self.screen, STARFIELD_COLOR, (x, y), r)

    def _draw_lives(self, right: int, cy: int) -> None:
        total = max(0, int(self.session.tuning.lives))
        alive = max(0, min(int(self.hud.lives if self.hud else total), total))
        scale = self.fx.pulse_scale("lives")
        radius = max(2, int(LIVES_RADIUS * scale))
        gap = radius * 2
        x = right - total * (radius * 2) - (total - 1) * gap
        for i in range(total):
            dot = pygame.Surface((radius * 2, radius * 2), pygame.SRCALPHA)
            alpha = 255 if i < alive else LIVES_LOST_ALPHA
            pygame.draw.circle(dot, (*LIVES_COLOR, alpha), (radius, radius), radius)
            self.screen.blit(dot, (x, cy - radius))
            x += radius * 2 + gap

    def _draw_label_value(self, label: str, value: str, x: int, y: int, *, scale: float = 1.0) -> int:
        lab = self.draw_text(label, pos=(x, y), font=self.hud_label_font, color=HUD_LABEL_COLOR, shadow=False)
        val = self.draw_text(value, font=self.hud_value_font, color=HUD_VALUE_COLOR, scale=scale)
        self.screen.blit(val, (x, y + lab.get_height()))
        return max(lab.get_width(), val.get_width())

    def _draw_hud(self) -> None:
        hud = self.hud or self.session.hud()
        bar = pygame.Rect(0, 0, self.w, TOPBAR_HEIGHT)
        self._draw_round_rect(self.screen, bar, TOPBAR_BG, radius=0)
        pygame.draw.line(self.screen, TOPBAR_UNDERLINE_COLOR, (0, bar.bottom), (self.w, bar.bottom), TOPBAR_UNDERLINE_THICKNESS)

        pad = 16
        y = 6
        x = pad
        x += self._draw_label_value("SCORE", str(hud.score), x, y, scale=self.fx.pulse_scale("score")) + pad * 2
        x += self._draw_label_value("LEVEL", str(hud.level), x, y, scale=self.fx.pulse_scale("level")) + pad * 2
        self._draw_label_value("BEST", str(max(hud.high_score, hud.score)), x, y)
        self._draw_lives(self.w - pad, bar.centery)

        if hud.boss_mode:
            self.time_bar.draw(self.session.progress.boss.ratio(), BOSS_RED, "BOSS WAVE", top=bar.bottom)
        elif hud.frozen:
            self.time_bar.draw(self.session.progress.freeze.ratio(), CYAN, "FROZEN", top=bar.bottom)

        self._draw_input_box(hud)

    def input_color(self, hud: HudState):
        if self.fx.is_flash_active("error"):
            return CORAL
        if not hud.current_input:
            return CYAN
        return GREEN if hud.input_bound else CORAL

    def _draw_input_box(self, hud: HudState) -> None:
        col = self.input_color(hud)
        text = hud.current_input.upper() or "_"
        tw, th = self.mid.size(text)
        box_w = max(INPUT_BOX_MIN_W, tw + 48)
        rect = pygame.Rect(self.w // 2 - box_w // 2, self.h - INPUT_BOX_HEIGHT - 12, box_w, INPUT_BOX_HEIGHT)
        self._draw_round_rect(self.screen, rect, INPUT_BOX_BG, border=col, border_w=2, radius=UI_RADIUS)
        self.draw_text(text, pos=(rect.centerx - tw / 2, rect.centery - th / 2), font=self.mid, color=col)

    def _draw_border(self) -> None:
        hud = self.hud
        if hud is None:
            return
        col = BOSS_RED if hud.boss_mode else CYAN if hud.frozen else None
        if col is not None:
            pygame.draw.rect(self.screen, col, self.screen.get_rect(), width=BORDER_W)

    def _draw_level_modal(self) -> None:
        now = self.now()
        content = self.banner.content
        if content is None or not self.banner.is_active(now):
            return
        phase, t = self.banner.phase(now)
        if phase == "in":
            k = self.fx.ease("out_cubic", t)
        elif phase == "out":
            k = 1.0 - self.fx.ease("in_cubic", t)
        else:
            k = 1.0

        title = content.badge_text
        sub = content.subtitle
        lvl = f"LEVEL {content.level}"
        tw = max(self.big.size(title)[0], self.mid.size(sub)[0], self.mid.size(lvl)[0])
        panel_w = tw + MODAL_PANEL_PAD * 2
        panel_h = self.big.get_height() + self.mid.get_height() * 2 + MODAL_PANEL_PAD * 2 + 16
        cy = int(-panel_h / 2 + (self.h / 2 + panel_h / 2) * k)
        rect = pygame.Rect(self.w // 2 - panel_w // 2, cy - panel_h // 2, panel_w, panel_h)
        border = MODAL_BOSS_BORDER if content.boss else MODAL_PANEL_BORDER
        self._draw_round_rect(self.screen, rect, MODAL_PANEL_BG, border=border, border_w=3, radius=MODAL_PANEL_RADIUS)

        y = rect.top + MODAL_PANEL_PAD
        y += self.draw_centered(title, y, font=self.big, color=border).get_height()
        y += self.draw_centered(lvl, y + 4, font=self.mid, color=ACCENT).get_height() + 8
        self.draw_centered(sub, y, font=self.mid, color=INK)

    def _draw_pause_overlay(self) -> None:
        overlay = pygame.Surface((self.w, self.h), pygame.SRCALPHA)
        overlay.fill(OVERLAY_BG)
        self.screen.blit(overlay, (0, 0))
        y = self.h * 0.35
        y += self.draw_centered("PAUSED", y, font=self.big, color=ACCENT).get_height() + MENU_HINT_GAP
        self.draw_centered("ESC = resume    -    Q = quit to menu", y, font=self.font, color=(210, 220, 235))
        mute = "M = unmute" if self.session.muted else "M = mute"
        self.draw_centered(mute, y + self.font.get_height() + 12, font=self.font, color=HUD_LABEL_COLOR)

    def _draw_gameplay(self) -> None:
        self._blit_bg()
        s = self.session
        self.words_painter.draw(s.words, s.state.active_word)
        self.particles_painter.draw(s.particles)
        self._draw_border()

        nuke = self.fx.flash_alpha("nuke")
        if nuke > 0.0:
            r, g, b, a = NUKE_FLASH_COLOR
            flash = pygame.Surface((self.w, self.h), pygame.SRCALPHA)
            flash.fill((r, g, b, int(a * nuke)))
            self.screen.blit(flash, (0, 0))

        self._draw_hud()
        self._draw_level_modal()
        if s.state.is_paused:
            self._draw_pause_overlay()

    def _draw_menu(self) -> None:
        self._blit_bg()
        ty = int(self.h * MENU_TITLE_Y_FACTOR)
        title = self.draw_text(MENU_TITLE, font=self.big, color=INK)
        tx = self.w // 2 - title.get_width() // 2
        glow = pygame.Rect(tx - 24, ty - 12, title.get_width() + 48, title.get_height() + 24)
        self._draw_round_rect(self.screen, glow, MENU_TITLE_NEON_COLOR, radius=glow.height // 2)
        self.screen.blit(title, (tx, ty))

        y = ty + title.get_height() + MENU_HINT_GAP
        best = self.session.high_score
        y += self.draw_centered(f"HIGH SCORE  {best}", y, font=self.mid, color=ACCENT).get_height() + MENU_HINT_GAP
        sound = "OFF" if self.session.muted else "ON"
        self.draw_centered(f"Sound: {sound}", y, font=self.font, color=HUD_LABEL_COLOR)

        hint = "ENTER = start    -    I = how to play    -    M = mute    -    ESC = quit"
        hw, hh = self.font.size(hint)
        self.draw_text(hint, pos=(self.w / 2 - hw / 2, self.h - 24 - hh), font=self.font, color=(210, 220, 235))

    def _draw_instructions(self) -> None:
        self._blit_bg()
        y = self.h * 0.14
        y += self.draw_centered("HOW TO PLAY", y, font=self.big, color=ACCENT).get_height() + 24
        for line in INSTRUCTION_LINES:
            if line:
                self.draw_centered(line, y, font=self.font, color=INK)
            y += self.font.get_height() + 10
        hint = "ESC = back"
        hw, hh = self.font.size(hint)
        self.draw_text(hint, pos=(self.w / 2 - hw / 2, self.h - 24 - hh), font=self.font, color=(210, 220, 235))

    def _draw_over(self) -> None:
        self._blit_bg()
        stats = self.stats or self.session.last_stats
        cx = self.w // 2
        y = int(self.h * OVER_TITLE_Y_FACTOR)
        y += self.draw_centered("GAME OVER", y, font=self.big, color=CORAL).get_height() + 16
        if stats is not None:
            score = self.draw_centered(str(stats.score), y, font=self.big, color=INK, scale=1.15)
            if stats.is_new_record:
                badge = "NEW RECORD!"
                bx = cx - self.font.size(badge)[0] // 2
                self.draw_chip(badge, bx - 12, y - 18, pad=8, radius=10,
                               bg=(22, 26, 34, 160), border=(120, 200, 255, 200), font=self.font)
            y += score.get_height() + 12
            y += self.draw_centered(f"Level {stats.level}    -    Best {stats.high_score}", y,
                                    font=self.mid, color=ACCENT).get_height() + 8
            self.draw_centered(f"{stats.words_destroyed} words destroyed    -    {stats.mistakes} mistakes", y,
                               font=self.font, color=HUD_LABEL_COLOR)

        info_text = "SPACE = play again   -   ESC = menu"
        iw, ih = self.font.size(info_text)
        self.draw_text(info_text, pos=(cx - iw // 2, self.h - ih - 24), font=self.font, color=(210, 220, 235))

    def draw(self):
        self.fb.fill((0, 0, 0, 0))
        old_screen = self.screen
        self.screen = self.fb
        try:
            if self.scene is Scene.GAME:
                self._draw_gameplay()
            elif self.scene is Scene.MENU:
                self._draw_menu()
            elif self.scene is Scene.INSTRUCTIONS:
                self._draw_instructions()
            elif self.scene is Scene.OVER:
                self._draw_over()
        finally:
            self.screen = old_screen

        dx, dy = self.fx.shake_offset(self.w)
        self.screen.fill(BG)
        self.screen.blit(self.fb, (int(dx), int(dy)))
        pygame.display.flip()


__all__ = ["Game"]
