#!/usr/bin/env python3
"""
Entry point: python -m dolphin_jump

Environment:
    DOLPHIN_JUMP_ASSETS     directory holding images and sounds (default: ./assets)
    DOLPHIN_JUMP_DB         sqlite file for the high score (default: ./dolphin_jump.db)
    DOLPHIN_JUMP_LOG_LEVEL  logging level name (default: INFO)
"""

import logging
import os

from .constants import ASSETS_DIR, DB_FILE
from .game import DolphinGame


def main():
    logging.basicConfig(
        level=os.environ.get("DOLPHIN_JUMP_LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    game = DolphinGame(
        assets_dir=os.environ.get("DOLPHIN_JUMP_ASSETS", ASSETS_DIR),
        db_file=os.environ.get("DOLPHIN_JUMP_DB", DB_FILE),
    )
    game.run()


if __name__ == "__main__":
    main()
