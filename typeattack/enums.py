from enum import Enum

class WordType(str, Enum):
    NORMAL = "normal"
    FREEZE = "freeze"
    NUKE   = "nuke"

class SoundKind(str, Enum):
    TYPE      = "type"
    ERROR     = "error"
    FAIL      = "fail"
    EXPLODE   = "explode"
    POWERUP   = "powerup"
    GAME_OVER = "gameOver"

class InputFlash(str, Enum):
    NONE  = "NONE"
    ERROR = "ERROR"
