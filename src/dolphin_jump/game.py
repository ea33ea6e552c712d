"""
game.py: Window, clock and the main loop tying simulation, input and rendering together.
"""

import logging
import random
from typing import Optional, Tuple

import pygame

from .assets import AssetManifest, AssetStore
from .audio import AudioPlayer, init_mixer
from .constants import ASSETS_DIR, CANVAS_W, CANVAS_H, DB_FILE, LOADING_HOLD_MS, RENDER_FPS, WINDOW_TITLE
from .data_models import GameContext, Mode
from .highscore_db import HighScoreStore
from .input_router import InputRouter
from .renderer import Renderer
from .simulation import SimulationEngine

logger = logging.getLogger(__name__)


class DolphinGame:
    def __init__(self, assets_dir: str = ASSETS_DIR, db_file: str = DB_FILE, seed: Optional[int] = None):
        pygame.init()
        self.window = pygame.display.set_mode((CANVAS_W, CANVAS_H), pygame.RESIZABLE)
        pygame.display.set_caption(WINDOW_TITLE)
        init_mixer()

        # --- Game Logic ---
        self.scores = HighScoreStore(db_file)
        self.ctx = GameContext()
        self.ctx.state.best = self.scores.read_best()

        self.assets = AssetStore(assets_dir)
        self.audio = AudioPlayer(self.assets, self.ctx.state)
        self.engine = SimulationEngine(
            assets=self.assets, audio=self.audio, scores=self.scores, rng=random.Random(seed))
        self.renderer = Renderer(self.assets)
        self.router = InputRouter(self.engine, self.to_canvas)

        # Time Management
        self.clock = pygame.time.Clock()
        self.loaded_at: Optional[int] = None

    def to_canvas(self, pos: Tuple[float, float]) -> Tuple[float, float]:
        """Window pixels -> canvas pixels, undoing the display scaling."""
        w, h = self.window.get_size()
        return pos[0] * CANVAS_W / w, pos[1] * CANVAS_H / h

    def run(self):
        """The main execution loop."""
        self.assets.start(AssetManifest.default())
        running = True
        try:
            while running:
                self.clock.tick(RENDER_FPS)

                for event in pygame.event.get():
                    if event.type == pygame.QUIT:
                        running = False
                    elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                        running = False
                    else:
                        self.router.handle(event, self.ctx)

                if self.ctx.state.mode is Mode.LOADING:
                    self._update_loading()
                    loaded, total = self.assets.progress
                    canvas = self.renderer.draw_loading(loaded, total, self.assets.last_loaded)
                else:
                    self.engine.step(self.ctx)
                    canvas = self.renderer.draw(self.ctx)

                self._present(canvas)
        finally:
            self.shutdown()

    def _update_loading(self):
        if not self.assets.is_complete:
            return
        now = pygame.time.get_ticks()
        if self.loaded_at is None:
            self.loaded_at = now
            self.assets.convert_for_display()
        elif now - self.loaded_at >= LOADING_HOLD_MS:
            self.engine.finish_loading(self.ctx)

    def _present(self, canvas: pygame.Surface):
        size = self.window.get_size()
        if size == canvas.get_size():
            self.window.blit(canvas, (0, 0))
        else:
            self.window.blit(pygame.transform.scale(canvas, size), (0, 0))
        pygame.display.flip()

    def shutdown(self):
        logger.info("Shutting down (best %d)", self.ctx.state.best)
        self.audio.stop_all()
        self.assets.close()
        self.scores.save_best(self.ctx.state.best)
        self.scores.close()
        pygame.quit()
