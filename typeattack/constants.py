from __future__ import annotations

from pathlib import Path

from .config import CFG

PKG_DIR = Path(__file__).resolve().parent


# --- Palette ----------------------------------------------------------------
BG = (7, 8, 20)                  # deep space background
INK = (235, 235, 235)            # primary text colour
ACCENT = (255, 210, 90)          # accent colour for highlights
STARFIELD_COLOR = (150, 160, 200)
STARFIELD_COUNT = 90

GREEN = (0, 245, 160)            # typed letters, bound input
AMBER = (251, 191, 36)           # next letter of the active word
CORAL = (255, 107, 107)          # unbound input, errors
CYAN = (34, 211, 238)            # idle input, freeze border
BOSS_RED = (239, 68, 68)         # boss border
OUTLINE = (0, 0, 0)

# --- Layout ----------------------------------------------------------------
FPS = int(CFG.get("display", {}).get("fps", 60))
CANVAS_SIZE = (int(CFG["display"]["width"]), int(CFG["display"]["height"]))
FULLSCREEN = bool(CFG["display"].get("fullscreen", False))
TEXT_SHADOW_OFFSET = (2, 2)
UI_RADIUS = 8
BORDER_W = 4

# --- Words -------------------------------------------------------------------
WORD_FONT_SIZE = int(CFG["word"]["font_size"])
WORD_OUTLINE_PX = 2
BADGE_FONT_SIZE = 11
BADGE_GAP = 4
BADGE_TEXT = {"nuke": "NUKE", "freeze": "FREEZE"}

# --- Particles ---------------------------------------------------------------
PARTICLE_ALPHA_MAX = 230

# --- Effects -----------------------------------------------------------------
SHAKE_DURATION = float(CFG["timing"].get("shake_ms", 400)) / 1000.0
SHAKE_AMPLITUDE_FACT = 0.012
SHAKE_FREQ_HZ = 18.0
ERROR_FLASH_SEC = float(CFG["timing"].get("error_flash_ms", 220)) / 1000.0
NUKE_FLASH_SEC = 0.12
NUKE_FLASH_COLOR = (251, 191, 36, 64)

PULSE_BASE_DURATION = 0.30
PULSE_BASE_MAX_SCALE = 1.18
PULSE_KIND_SCALE = {
    "score": 1.10,    # score readout on every change
    "level": 1.06,    # level readout on level up
    "lives": 1.00,    # hearts on damage
}
PULSE_KIND_DURATION = {
    "score": 0.26,
    "level": 0.40,
    "lives": 0.30,
}

# --- Level-up modal ------------------------------------------------------------
MODAL_IN_SEC = 0.25
MODAL_OUT_SEC = 0.25
MODAL_PANEL_BG = (22, 26, 34, 200)
MODAL_PANEL_BORDER = (168, 85, 247)
MODAL_BOSS_BORDER = BOSS_RED
MODAL_PANEL_RADIUS = 24
MODAL_PANEL_PAD = 24

# --- Time bar (boss / freeze windows) -----------------------------------------
TIMER_BAR_WIDTH_FACTOR = 0.40
TIMER_BAR_HEIGHT = 8
TIMER_BAR_BG = (40, 40, 50)
TIMER_BAR_BORDER = (160, 180, 200)
TIMER_BAR_BORDER_W = 1
TIMER_BAR_BORDER_RADIUS = 4
TIMER_BAR_TOP_GAP = 6
TIMER_LABEL_GAP = 4

# --- HUD ---------------------------------------------------------------------
TOPBAR_HEIGHT = 56
TOPBAR_BG = (22, 26, 34, 170)
TOPBAR_UNDERLINE_COLOR = (90, 200, 255)
TOPBAR_UNDERLINE_THICKNESS = 3
INPUT_BOX_HEIGHT = 48
INPUT_BOX_BG = (12, 14, 26, 200)
INPUT_BOX_MIN_W = 220
HUD_LABEL_COLOR = (180, 200, 230)
HUD_VALUE_COLOR = INK
LIVES_COLOR = (255, 80, 110)
LIVES_LOST_ALPHA = 70
LIVES_RADIUS = 7

# --- Screens -----------------------------------------------------------------
MENU_TITLE = "TYPE ATTACK"
MENU_TITLE_Y_FACTOR = 0.26
MENU_TITLE_NEON_COLOR = (90, 200, 255, 75)
MENU_HINT_GAP = 40
OVER_TITLE_Y_FACTOR = 0.28
OVERLAY_BG = (0, 0, 0, 160)
INSTRUCTION_LINES = [
    "Words fall from the sky. Type them before they land.",
    "The first word matching what you type locks on.",
    "Backspace drops the lock. A wrong letter costs points,",
    "and every fifth mistake costs a life.",
    "FREEZE words stop the sky. NUKE words clear it.",
    "Every tenth level brings a boss wave.",
    "",
    "ESC pause    ENTER close level-up panel    M mute",
]

# Typography
FONT_PATH = str(PKG_DIR / "assets" / "font" / "Orbitron-VariableFont_wght.ttf")
FONT_SIZE_SMALL = 18
FONT_SIZE_MID = 24
FONT_SIZE_BIG = 60
HUD_LABEL_FONT_SIZE = 14
HUD_VALUE_FONT_SIZE = 26
