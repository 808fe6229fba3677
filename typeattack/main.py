from __future__ import annotations

import logging
import os
import sys

import pygame

from .config import CFG, CONFIG_PATH
from .constants import CANVAS_SIZE, FPS, FULLSCREEN
from .game import Game
from .input_queue import InputQueue

logger = logging.getLogger(__name__)


def setup_logging() -> None:
    level_name = os.environ.get("TYPEATTACK_LOG", "WARNING").upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


# ============================== MAIN LOOP ============================== #
def main():
    setup_logging()
    pygame.init()
    pygame.key.set_repeat()
    flags = pygame.FULLSCREEN | pygame.SCALED if FULLSCREEN else 0
    screen = pygame.display.set_mode(CANVAS_SIZE, flags)
    pygame.display.set_caption("Type Attack")
    logger.info("config %s, %dx%d @ %d fps", CONFIG_PATH, CANVAS_SIZE[0], CANVAS_SIZE[1], FPS)
    game = Game(screen)
    iq = InputQueue()

    while True:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                pygame.quit(); sys.exit(0)
            game.handle_event(event, iq)
        game.update(iq)
        game.draw()
        game.clock.tick(int(CFG.get("display", {}).get("fps", FPS)))

if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        pygame.quit(); sys.exit(0)
