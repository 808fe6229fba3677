from __future__ import annotations

from typing import Any, Dict, Optional

from .config import CFG, save_config


class ConfigHighScoreStore:
    """High score kept under "highscore" in config.json."""

    def __init__(self, cfg: Optional[Dict[str, Any]] = None) -> None:
        self.cfg = CFG if cfg is None else cfg

    def get_high_score(self) -> int:
        try:
            return max(0, int(self.cfg.get("highscore", 0) or 0))
        except (TypeError, ValueError):
            return 0

    def set_high_score(self, value: int) -> None:
        value = max(0, int(value))
        self.cfg["highscore"] = value
        save_config({"highscore": value})


__all__ = ["ConfigHighScoreStore"]
