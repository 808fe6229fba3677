# typeattack/config.py
from __future__ import annotations
import json, logging, os
from typing import Dict, Any

from pathlib import Path
PKG_DIR = Path(__file__).resolve().parent

logger = logging.getLogger(__name__)

CONFIG_PATH = os.environ.get("TYPEATTACK_CONFIG") or os.path.join(os.path.dirname(__file__), "config.json")

DEFAULT_CFG: Dict[str, Any] = {
    "display": {"fullscreen": False, "fps": 60, "width": 800, "height": 600},
    "word": {
        "min_speed": 0.5,
        "max_speed": 3.5,
        "spawn_rate_ms": 2000,
        "font_size": 24,
        "spawn_y": -30.0,
        "miss_margin": 10.0,
        "recent_limit": 20,
    },
    "difficulty": {
        "min_spawn_ms": 650,
        "spawn_decay_ms": 140,
        "speed_ramp": 0.18,
        "boss_spawn_ms": 450,
        "boss_speed_boost": 0.6,
        "boss_max_speed_bonus": 1.2,
        "boss_duration_ms": 14000,
        "boss_every_levels": 10,
        "boss_min_length": 7,
    },
    "scoring": {
        "points_per_char": 10,
        "power_up_bonus": 75,
        "nuke_points_per_word": 10,
        "level_threshold": 200,
        "wrong_key_penalty": 5,
        "mistake_life_threshold": 5,
    },
    "powerups": {"freeze_chance": 0.05, "nuke_chance": 0.05, "freeze_ms": 3500},
    "timing": {
        "level_up_modal_ms": 1800,
        "modal_pause_ms": 900,
        "error_flash_ms": 220,
        "fail_sound_gap_ms": 150,
        "shake_ms": 400,
    },
    "lives": 3,
    "audio": {"sfx_volume": 0.8, "ambience_volume": 0.35, "muted": False},
    "highscore": 0,
}

def _deepcopy(obj):
    return json.loads(json.dumps(obj))

def _merge(dst: dict, src: dict) -> dict:
    for k, v in src.items():
        if isinstance(v, dict) and isinstance(dst.get(k), dict):
            _merge(dst[k], v)
        else:
            dst[k] = v
    return dst

def _clamp(v, lo, hi, cast=float):
    return cast(max(lo, min(hi, cast(v))))

def _sanitize_cfg(cfg: dict) -> dict:
    d = cfg["display"]
    d["fps"]    = _clamp(d.get("fps", 60), 30, 240, int)
    d["width"]  = _clamp(d.get("width", 800), 320, 10000, int)
    d["height"] = _clamp(d.get("height", 600), 240, 10000, int)
    d["fullscreen"] = bool(d.get("fullscreen", False))

    w = cfg["word"]
    w["min_speed"]     = _clamp(w["min_speed"], 0.05, 50.0)
    w["max_speed"]     = _clamp(w["max_speed"], w["min_speed"], 50.0)
    w["spawn_rate_ms"] = _clamp(w["spawn_rate_ms"], 50, 60000)
    w["font_size"]     = _clamp(w["font_size"], 8, 200, int)
    w["recent_limit"]  = _clamp(w["recent_limit"], 0, 1000, int)

    df = cfg["difficulty"]
    df["min_spawn_ms"]      = _clamp(df["min_spawn_ms"], 50, w["spawn_rate_ms"])
    df["boss_spawn_ms"]     = _clamp(df["boss_spawn_ms"], 50, 60000)
    df["boss_duration_ms"]  = _clamp(df["boss_duration_ms"], 0, 600000)
    df["boss_every_levels"] = _clamp(df["boss_every_levels"], 1, 1000, int)

    s = cfg["scoring"]
    s["points_per_char"]        = _clamp(s["points_per_char"], 0, 10000, int)
    s["level_threshold"]        = _clamp(s["level_threshold"], 1, 10**9, int)
    s["wrong_key_penalty"]      = _clamp(s["wrong_key_penalty"], 0, 10000, int)
    s["mistake_life_threshold"] = _clamp(s["mistake_life_threshold"], 1, 1000, int)

    p = cfg["powerups"]
    p["freeze_chance"] = _clamp(p["freeze_chance"], 0.0, 1.0)
    p["nuke_chance"]   = _clamp(p["nuke_chance"], 0.0, 1.0 - p["freeze_chance"])
    p["freeze_ms"]     = _clamp(p["freeze_ms"], 0, 600000)

    cfg["lives"] = _clamp(cfg["lives"], 1, 9, int)
    a = cfg.setdefault("audio", {})
    a["sfx_volume"]      = _clamp(a.get("sfx_volume", 0.8), 0.0, 1.0)
    a["ambience_volume"] = _clamp(a.get("ambience_volume", 0.35), 0.0, 1.0)
    a["muted"]           = bool(a.get("muted", False))
    cfg["highscore"] = max(0, int(cfg.get("highscore", 0) or 0))
    cfg["config_path"] = str(Path(CONFIG_PATH).resolve())
    return cfg

def save_config(partial_cfg: dict) -> None:
    try:
        with open(CONFIG_PATH, "r", encoding="utf-8") as f:
            base = json.load(f)
        if not isinstance(base, dict): base = {}
    except Exception:
        base = {}
    partial_cfg = {k: v for k, v in partial_cfg.items() if k != "config_path"}
    merged = _merge(base, partial_cfg)
    try:
        with open(CONFIG_PATH, "w", encoding="utf-8") as f:
            json.dump(merged, f, ensure_ascii=False, indent=2)
    except Exception as exc:
        logger.warning("could not write %s: %s", CONFIG_PATH, exc)

def load_config() -> dict:
    cfg = _deepcopy(DEFAULT_CFG)
    try:
        with open(CONFIG_PATH, "r", encoding="utf-8") as f:
            user = json.load(f)
        if isinstance(user, dict):
            _merge(cfg, user)
    except FileNotFoundError:
        save_config(cfg)
    except Exception as exc:
        logger.warning("ignoring unreadable config %s: %s", CONFIG_PATH, exc)
    try:
        return _sanitize_cfg(cfg)
    except (KeyError, TypeError, ValueError) as exc:
        logger.warning("config %s is invalid (%s), using defaults", CONFIG_PATH, exc)
        return _sanitize_cfg(_deepcopy(DEFAULT_CFG))

CFG = load_config()
