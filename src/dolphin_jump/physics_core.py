"""
physics_core.py: Deterministic kinematics, difficulty curves and hitbox tests.
"""

from typing import NamedTuple, Tuple

from .constants import (
    GRAVITY, JUMP_STRENGTH, GROUND_Y,
    ICE_BASE_SPEED, ICE_MAX_SPEED, ICE_SPEED_SCORE_STEP,
    RESPAWN_HI_BASE, RESPAWN_HI_FLOOR, RESPAWN_LO_BASE, RESPAWN_LO_FLOOR, RESPAWN_SCORE_FACTOR,
    POWERUP_BOX_INSET, POWERUP_BOX_SIZE,
)
from .data_models import Dolphin, IceObstacle, Powerup


class Box(NamedTuple):
    x: float
    y: float
    w: float
    h: float


def rect_intersect(a: Box, b: Box) -> bool:
    """Axis-aligned overlap test. Touching edges count as a hit."""
    return not (b.x > a.x + a.w or
                b.x + b.w < a.x or
                b.y > a.y + a.h or
                b.y + b.h < a.y)


class PhysicsCore:
    """
    Frame-based physics used by the simulation step.
    All quantities are pixels and pixels per frame.
    """

    GROUND_Y = GROUND_Y

    def apply_gravity_and_movement(self, y: float, velocity: float) -> Tuple[float, float]:
        """Integrates one frame: velocity first, then position."""
        velocity += GRAVITY
        y += velocity
        return y, velocity

    def jump(self) -> float:
        """Returns the upward velocity given at takeoff."""
        return JUMP_STRENGTH

    def obstacle_speed(self, score: int) -> int:
        """Step difficulty curve: one extra pixel per frame every few points, capped."""
        return min(ICE_MAX_SPEED, ICE_BASE_SPEED + score // ICE_SPEED_SCORE_STEP)

    def respawn_bounds(self, score: int) -> Tuple[int, int]:
        """
        Returns (lo, hi) for the obstacle's new x after it leaves the screen.
        Both shrink as the score rises and are floor-clamped.
        """
        hi = max(RESPAWN_HI_FLOOR, RESPAWN_HI_BASE - score * RESPAWN_SCORE_FACTOR)
        lo = max(RESPAWN_LO_FLOOR, RESPAWN_LO_BASE - score * RESPAWN_SCORE_FACTOR)
        return lo, hi

    # -------- Hitboxes --------

    def dolphin_pickup_box(self, dolphin: Dolphin, size: Tuple[int, int]) -> Box:
        w, h = size
        return Box(dolphin.x + 10, dolphin.y + 5, w - 20, h - 10)

    def dolphin_hit_box(self, dolphin: Dolphin, size: Tuple[int, int]) -> Box:
        w, h = size
        return Box(dolphin.x + 20, dolphin.y + 10, w - 40, h - 20)

    def ice_hit_box(self, ice: IceObstacle, size: Tuple[int, int]) -> Box:
        w, h = size
        return Box(ice.x + 10, ice.y + 10, w - 20, h - 10)

    def powerup_box(self, powerup: Powerup) -> Box:
        return Box(powerup.x + POWERUP_BOX_INSET, powerup.y + POWERUP_BOX_INSET,
                   POWERUP_BOX_SIZE, POWERUP_BOX_SIZE)
