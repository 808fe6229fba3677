from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True)
class BannerContent:
    level: int
    badge_text: str
    subtitle: str
    boss: bool = False


class BannerManager:
    """Slide-in/hold/slide-out timing for the level-up modal.

    The session decides when the modal opens and closes; this only animates it.
    `hide()` jumps straight into the out phase from wherever the banner is.
    """

    def __init__(self, in_sec: float, out_sec: float) -> None:
        self.in_sec = float(in_sec)
        self.out_sec = float(out_sec)
        self.content: Optional[BannerContent] = None
        self.anim_start = 0.0
        self.hide_start: Optional[float] = None

    def start(self, now: float, content: BannerContent) -> None:
        self.content = content
        self.anim_start = now
        self.hide_start = None

    def hide(self, now: float) -> None:
        if self.content is None or self.hide_start is not None:
            return
        self.hide_start = now

    def clear(self) -> None:
        self.content = None
        self.hide_start = None

    def is_active(self, now: float) -> bool:
        if self.content is None:
            return False
        if self.hide_start is not None:
            return now < self.hide_start + self.out_sec
        return True

    def phase(self, now: float) -> Tuple[str, float]:
        if self.hide_start is not None:
            return "out", min(1.0, (now - self.hide_start) / max(1e-6, self.out_sec))
        t = max(0.0, now - self.anim_start)
        if t <= self.in_sec:
            return "in", (t / max(1e-6, self.in_sec))
        return "hold", 1.0


__all__ = ["BannerManager", "BannerContent"]
