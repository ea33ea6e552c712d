"""
input_router.py: Maps pointer, touch and keyboard events to game actions.
"""

import logging
from typing import Callable, Tuple

import pygame

from .constants import CANVAS_W, CANVAS_H
from .data_models import GameContext, Mode, START_BUTTON, RESTART_BUTTON
from .simulation import SimulationEngine

logger = logging.getLogger(__name__)

Point = Tuple[float, float]

# Buttons 4 and up are the wheel and extra side buttons
LAST_CLICK_BUTTON = 3


def identity(pos: Point) -> Point:
    return float(pos[0]), float(pos[1])


class InputRouter:
    """
    Dispatches pygame events for the current mode.
    `to_canvas` converts window pixels to canvas pixels.
    """

    def __init__(self, engine: SimulationEngine, to_canvas: Callable[[Point], Point] = identity):
        self.engine = engine
        self.to_canvas = to_canvas

    def handle(self, event: pygame.event.Event, ctx: GameContext):
        # SDL mirrors touches as mouse events; the FINGER events already cover them
        if getattr(event, "touch", False):
            return
        if event.type == pygame.MOUSEBUTTONDOWN:
            if event.button > LAST_CLICK_BUTTON:
                return
            self._pointer_down(ctx, self.to_canvas(event.pos))
        elif event.type == pygame.FINGERDOWN:
            self._pointer_down(ctx, self._touch_pos(event))
        elif event.type == pygame.MOUSEMOTION:
            ctx.mouse = self.to_canvas(event.pos)
        elif event.type == pygame.FINGERMOTION:
            ctx.mouse = self._touch_pos(event)
        elif event.type == pygame.KEYDOWN:
            self._key_down(ctx, event.key)

    def _pointer_down(self, ctx: GameContext, pos: Point):
        self._unlock_audio(ctx)
        ctx.mouse = pos
        mode = ctx.state.mode
        if mode is Mode.COVER:
            if START_BUTTON.contains(pos):
                self.engine.reset_game(ctx)
        elif mode is Mode.OVER:
            if RESTART_BUTTON.contains(pos):
                self.engine.reset_game(ctx)
        elif mode is Mode.PLAY:
            self.engine.trigger_jump(ctx)

    def _key_down(self, ctx: GameContext, key: int):
        self._unlock_audio(ctx)
        if key == pygame.K_SPACE and ctx.state.mode is Mode.PLAY:
            self.engine.trigger_jump(ctx)
        elif key == pygame.K_r and ctx.state.mode is Mode.OVER:
            self.engine.reset_game(ctx)

    @staticmethod
    def _touch_pos(event: pygame.event.Event) -> Point:
        # Touch coordinates are normalised to the window
        return event.x * CANVAS_W, event.y * CANVAS_H

    @staticmethod
    def _unlock_audio(ctx: GameContext):
        if not ctx.state.audio_unlocked:
            ctx.state.audio_unlocked = True
            logger.debug("Audio unlocked by user input")
