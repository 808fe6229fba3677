from __future__ import annotations

from typing import TYPE_CHECKING, Iterable, Optional

import pygame

from .constants import *  # noqa: F401,F403
from .enums import WordType
from .models import Particle, Word

if TYPE_CHECKING:
    from .game import Game


class WordPainter:
    """Falling words, letter by letter: typed part green, next letter amber, rest in the word colour."""

    def __init__(self, game: "Game") -> None:
        self.g = game
        self._glyphs: dict[tuple[str, tuple[int, int, int]], pygame.Surface] = {}

    def _glyph(self, ch: str, color) -> pygame.Surface:
        key = (ch, tuple(color))
        surf = self._glyphs.get(key)
        if surf is None:
            font = self.g.word_font
            base = font.render(ch, True, color)
            outline = font.render(ch, True, OUTLINE)
            o = WORD_OUTLINE_PX
            surf = pygame.Surface((base.get_width() + o * 2, base.get_height() + o * 2), pygame.SRCALPHA)
            for dx in (-o, 0, o):
                for dy in (-o, 0, o):
                    if dx or dy:
                        surf.blit(outline, (o + dx, o + dy))
            surf.blit(base, (o, o))
            if len(self._glyphs) > 2048:
                self._glyphs.clear()
            self._glyphs[key] = surf
        return surf

    def letter_colors(self, word: Word, active: bool) -> list:
        cols = []
        for i in range(len(word.text)):
            if i < word.typed_length:
                cols.append(GREEN)
            elif active and i == word.typed_length:
                cols.append(AMBER)
            else:
                cols.append(word.color)
        return cols

    def draw(self, words: Iterable[Word], active_id: Optional[int], offset=(0, 0)) -> None:
        g = self.g
        ox, oy = offset
        for word in words:
            x = word.x + ox
            y = word.y + oy
            cols = self.letter_colors(word, word.id == active_id)
            cx = x
            for ch, col in zip(word.text, cols):
                glyph = self._glyph(ch, col)
                g.screen.blit(glyph, (int(cx) - WORD_OUTLINE_PX, int(y) - WORD_OUTLINE_PX))
                cx += g.word_font.size(ch)[0]
            if word.type is not WordType.NORMAL:
                self._badge(word, x, y)

    def _badge(self, word: Word, x: float, y: float) -> None:
        g = self.g
        label = BADGE_TEXT[word.type.value]
        surf = g.badge_font.render(label, True, word.color)
        g.screen.blit(surf, (int(x), int(y) - surf.get_height() - BADGE_GAP))


class ParticlePainter:
    def __init__(self, game: "Game") -> None:
        self.g = game

    def draw(self, particles: Iterable[Particle], offset=(0, 0)) -> None:
        g = self.g
        ox, oy = offset
        for p in particles:
            r = max(1, int(p.size))
            alpha = max(0, min(PARTICLE_ALPHA_MAX, int(p.life * 255)))
            dot = pygame.Surface((r * 2, r * 2), pygame.SRCALPHA)
            pygame.draw.circle(dot, (*p.color, alpha), (r, r), r)
            g.screen.blit(dot, (int(p.x + ox) - r, int(p.y + oy) - r))


class TimeBar:
    def __init__(self, game: "Game") -> None:
        self.g = game

    def draw(self, ratio: float, fill_color, label: Optional[str] = None, *, top: int = 0) -> None:
        g = self.g
        ratio = max(0.0, min(1.0, ratio))
        bar_w = int(g.w * TIMER_BAR_WIDTH_FACTOR)
        bar_h = int(TIMER_BAR_HEIGHT)
        bar_x = (g.w - bar_w) // 2
        bar_y = top + TIMER_BAR_TOP_GAP

        if label:
            surf = g.draw_text(label, color=fill_color, font=g.hud_label_font, shadow=True)
            tx = bar_x + (bar_w - surf.get_width()) // 2
            g.screen.blit(surf, (tx, bar_y))
            bar_y += surf.get_height() + TIMER_LABEL_GAP

        pygame.draw.rect(g.screen, TIMER_BAR_BG, (bar_x, bar_y, bar_w, bar_h), border_radius=TIMER_BAR_BORDER_RADIUS)

        fill_w = int(bar_w * ratio)
        if fill_w > 0:
            pygame.draw.rect(
                g.screen,
                fill_color,
                (bar_x, bar_y, fill_w, bar_h),
                border_radius=TIMER_BAR_BORDER_RADIUS,
            )

        pygame.draw.rect(
            g.screen,
            TIMER_BAR_BORDER,
            (bar_x, bar_y, bar_w, bar_h),
            width=TIMER_BAR_BORDER_W,
            border_radius=TIMER_BAR_BORDER_RADIUS,
        )


__all__ = ["WordPainter", "ParticlePainter", "TimeBar"]
