from __future__ import annotations

from typing import Callable, Iterable, Optional


class PausableCountdown:
    """Countdown in seconds that only runs while resumed. Stopping it banks the time left."""

    def __init__(self, now_fn: Callable[[], float]) -> None:
        self._now = now_fn
        self.duration = 0.0
        self.remaining = 0.0
        self.running = False
        self._armed = False
        self._t0 = 0.0

    def arm(self, seconds: float, *, running: bool = True) -> None:
        """(Re)start from full duration. Re-arming replaces what was left, it never stacks."""
        self.duration = max(0.0, float(seconds))
        self.remaining = self.duration
        self.running = False
        self._armed = True
        self._t0 = 0.0
        if running:
            self.resume()

    def stop(self) -> None:
        if self.running:
            self.remaining = max(0.0, self.remaining - (self._now() - self._t0))
            self.running = False

    def resume(self) -> None:
        if not self.running and self.remaining > 0.0:
            self._t0 = self._now()
            self.running = True

    def left(self, now: Optional[float] = None) -> float:
        if not self.running:
            return self.remaining
        now = self._now() if now is None else now
        return max(0.0, self.remaining - (now - self._t0))

    def ratio(self) -> float:
        if self.duration <= 0.0:
            return 0.0
        return max(0.0, min(1.0, self.left() / self.duration))

    @property
    def armed(self) -> bool:
        return self._armed

    def expired(self, now: Optional[float] = None) -> bool:
        return self.armed and self.left(now) <= 0.0

    def reset(self) -> None:
        self.duration = 0.0
        self.remaining = 0.0
        self.running = False
        self._armed = False
        self._t0 = 0.0


def stop_all(timers: Iterable[PausableCountdown]) -> None:
    for t in timers:
        t.stop()


def resume_all(timers: Iterable[PausableCountdown]) -> None:
    for t in timers:
        t.resume()


__all__ = ["PausableCountdown", "stop_all", "resume_all"]
