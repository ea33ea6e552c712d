"""
data_models.py: Data structures for the game state.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Tuple

from .constants import (
    CANVAS_W, DOLPHIN_X, GROUND_Y, ICE_Y, ICE_START_X, POWERUP_START_X, POWERUP_START_Y,
    BUTTON_W, BUTTON_H, START_BUTTON_Y, RESTART_BUTTON_Y,
)


class Mode(Enum):
    LOADING = "LOADING"
    COVER = "COVER"
    PLAY = "PLAY"
    OVER = "OVER"


# Allowed mode transitions; anything else is a programming error
TRANSITIONS = {
    Mode.LOADING: frozenset({Mode.COVER}),
    Mode.COVER: frozenset({Mode.PLAY}),
    Mode.PLAY: frozenset({Mode.OVER}),
    Mode.OVER: frozenset({Mode.PLAY}),
}


class InvalidTransition(ValueError):
    """Raised when a mode change is not in the transition table."""

    def __init__(self, current: Mode, requested: Mode):
        super().__init__(f"Cannot switch from {current.value} to {requested.value}")
        self.current = current
        self.requested = requested


@dataclass
class GameState:
    """Scores, counters and the current mode."""
    mode: Mode = Mode.LOADING
    score: int = 0
    best: int = 0
    frames: int = 0
    shake: int = 0
    audio_unlocked: bool = False

    def transition(self, new_mode: Mode):
        if new_mode not in TRANSITIONS[self.mode]:
            raise InvalidTransition(self.mode, new_mode)
        self.mode = new_mode


@dataclass
class Dolphin:
    x: float = DOLPHIN_X
    y: float = GROUND_Y
    vy: float = 0.0
    is_jumping: bool = False
    landing_hold: int = 0


@dataclass
class IceObstacle:
    x: float = ICE_START_X
    y: float = ICE_Y
    active: bool = False
    passed: bool = False
    sprite_key: str = ""


@dataclass
class Powerup:
    x: float = POWERUP_START_X
    y: float = POWERUP_START_Y
    speed: float = 0.0
    active: bool = False
    shield_on: bool = False


@dataclass
class Cloud:
    sprite_key: str
    x: float
    y: float
    width: float
    height: float
    speed: float


@dataclass(frozen=True)
class Button:
    x: float
    y: float
    w: float
    h: float
    text: str

    def contains(self, pos: Tuple[float, float]) -> bool:
        px, py = pos
        return self.x <= px <= self.x + self.w and self.y <= py <= self.y + self.h


START_BUTTON = Button((CANVAS_W - BUTTON_W) / 2, START_BUTTON_Y, BUTTON_W, BUTTON_H, "START")
RESTART_BUTTON = Button((CANVAS_W - BUTTON_W) / 2, RESTART_BUTTON_Y, BUTTON_W, BUTTON_H, "RESTART")


@dataclass
class GameContext:
    """
    Everything one frame of the game reads or writes.
    Passed explicitly to the simulation, renderer and input router.
    """
    state: GameState = field(default_factory=GameState)
    dolphin: Dolphin = field(default_factory=Dolphin)
    ice: IceObstacle = field(default_factory=IceObstacle)
    powerup: Powerup = field(default_factory=Powerup)
    clouds: List[Cloud] = field(default_factory=list)
    mouse: Tuple[float, float] = (0.0, 0.0)  # Canvas coordinates
