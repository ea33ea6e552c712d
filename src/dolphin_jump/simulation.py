"""
simulation.py: The per-frame game simulation and mode transitions.
"""

import logging
import random
from dataclasses import dataclass, field
from typing import Optional, Tuple

from .assets import AssetStore
from .audio import AudioPlayer
from .constants import (
    CANVAS_W, GROUND_Y, DOLPHIN_X, LANDING_HOLD_FRAMES,
    ICE_START_X, ICE_Y, ICE_RESPAWN_THRESHOLD, ICE_FALLBACK_WIDTH, SHIELD_PUSHBACK,
    POWERUP_CHANCE, POWERUP_START_X, POWERUP_START_Y, POWERUP_SPAWN_X_OFFSET, POWERUP_SPAWN_X_RANGE,
    POWERUP_SPAWN_Y_MIN, POWERUP_SPAWN_Y_RANGE, POWERUP_SPEED_MIN, POWERUP_SPEED_RANGE, POWERUP_DESPAWN_X,
    CLOUD_COUNT, CLOUD_SPAWN_RANGE, CLOUD_Y_MIN, CLOUD_Y_RANGE, CLOUD_SCALE_MIN, CLOUD_SCALE_RANGE,
    CLOUD_SPEED_MIN, CLOUD_SPEED_RANGE, CLOUD_DESPAWN_MARGIN,
    SHAKE_LANDING, SHAKE_SHIELD_HIT, SHAKE_GAME_OVER,
    MUSIC_VOLUME, JUMP_VOLUME, SPLASH_VOLUME, SHIELD_VOLUME, HIT_VOLUME, GAMEOVER_VOLUME,
    IMG_SHIELD, SEQ_ICE, SEQ_CLOUD, SEQ_JUMP, SEQ_SWIM, PLACEHOLDER_SIZE,
)
from .data_models import Cloud, GameContext, GameState, Mode
from .highscore_db import HighScoreStore
from .physics_core import PhysicsCore, rect_intersect

logger = logging.getLogger(__name__)

DEFAULT_SPRITE_SIZE = (PLACEHOLDER_SIZE, PLACEHOLDER_SIZE)


@dataclass
class SimulationEngine(PhysicsCore):
    """
    Advances the game one frame at a time.
    The only code that mutates a GameContext.
    """
    assets: AssetStore = field(default_factory=AssetStore)
    audio: Optional[AudioPlayer] = None
    scores: Optional[HighScoreStore] = None
    rng: random.Random = field(default_factory=random.Random)

    # -------- Mode transitions --------

    def finish_loading(self, ctx: GameContext):
        ctx.state.transition(Mode.COVER)
        logger.info("Loading finished, showing cover screen")

    def reset_game(self, ctx: GameContext):
        """Starts a fresh round. Valid from the cover and game-over screens."""
        state = ctx.state
        state.transition(Mode.PLAY)
        state.score = 0
        state.shake = 0

        dolphin = ctx.dolphin
        dolphin.x = DOLPHIN_X
        dolphin.y = GROUND_Y
        dolphin.vy = 0.0
        dolphin.is_jumping = False
        dolphin.landing_hold = 0

        ice = ctx.ice
        ice.x = ICE_START_X
        ice.y = ICE_Y
        ice.active = True
        ice.passed = False
        ice.sprite_key = self.rng.choice(SEQ_ICE)

        powerup = ctx.powerup
        powerup.active = False
        powerup.shield_on = False
        powerup.x = POWERUP_START_X
        powerup.y = POWERUP_START_Y

        ctx.clouds.clear()
        for _ in range(CLOUD_COUNT):
            ctx.clouds.append(self.spawn_cloud())

        logger.debug("Round started (best %d)", state.best)
        self._play("bgmusic", loop=True, volume=MUSIC_VOLUME)

    def game_over(self, ctx: GameContext):
        state = ctx.state
        state.transition(Mode.OVER)
        self.start_shake(state, SHAKE_GAME_OVER)
        if state.score > state.best:
            state.best = state.score
        if self.scores is not None and state.score > self.scores.read_best():
            self.scores.save_best(state.score)
            logger.info("New best score: %d", state.score)
        logger.info("Game over at score %d", state.score)
        self._play("gameover", volume=GAMEOVER_VOLUME)

    def start_shake(self, state: GameState, frames: int):
        state.shake = frames

    # -------- Player actions --------

    def trigger_jump(self, ctx: GameContext):
        """Takes off if playing and on the ground. Ignored while airborne."""
        if ctx.state.mode is not Mode.PLAY:
            return
        dolphin = ctx.dolphin
        if dolphin.is_jumping:
            return
        dolphin.is_jumping = True
        dolphin.vy = self.jump()
        dolphin.landing_hold = 0
        self._play("jump", volume=JUMP_VOLUME)

    # -------- Frame update --------

    def step(self, ctx: GameContext):
        """
        The main simulation step.
        Counters tick in every mode; the world only moves while playing.
        """
        state = ctx.state
        state.frames += 1
        if state.shake > 0:
            state.shake -= 1

        if state.mode is not Mode.PLAY:
            return

        speed = self.obstacle_speed(state.score)

        # 1. Clouds
        self._step_clouds(ctx)

        # 2. Ice obstacle and scoring
        self._step_ice(ctx, speed)

        # 3. Powerup
        if ctx.powerup.active:
            self._step_powerup(ctx)

        # 4. Dolphin
        self._step_dolphin(ctx)

        # 5. Ice collision
        self._check_ice_collision(ctx)

    def spawn_cloud(self, off_screen: bool = False) -> Cloud:
        sprite_key = self.rng.choice(SEQ_CLOUD)
        base_w, base_h = self.assets.image_size(sprite_key, DEFAULT_SPRITE_SIZE)
        scale = CLOUD_SCALE_MIN + self.rng.random() * CLOUD_SCALE_RANGE
        if off_screen:
            x = CANVAS_W + self.rng.random() * CLOUD_SPAWN_RANGE
        else:
            x = self.rng.random() * (CANVAS_W + CLOUD_SPAWN_RANGE)
        return Cloud(
            sprite_key=sprite_key,
            x=x,
            y=CLOUD_Y_MIN + self.rng.random() * CLOUD_Y_RANGE,
            width=base_w * scale,
            height=base_h * scale,
            speed=CLOUD_SPEED_MIN + self.rng.random() * CLOUD_SPEED_RANGE,
        )

    def _step_clouds(self, ctx: GameContext):
        for cloud in ctx.clouds:
            cloud.x -= cloud.speed
        ctx.clouds[:] = [c for c in ctx.clouds if c.x > -c.width - CLOUD_DESPAWN_MARGIN]
        while len(ctx.clouds) < CLOUD_COUNT:
            ctx.clouds.append(self.spawn_cloud(off_screen=True))

    def _step_ice(self, ctx: GameContext, speed: int):
        ice = ctx.ice
        ice.x -= speed

        if ice.x <= ICE_RESPAWN_THRESHOLD:
            lo, hi = self.respawn_bounds(ctx.state.score)
            ice.x = lo + self.rng.random() * (hi - lo)
            ice.passed = False
            ice.sprite_key = self.rng.choice(SEQ_ICE)
            self._maybe_spawn_powerup(ctx)

        ice_w = self.assets.image_size(ice.sprite_key, (ICE_FALLBACK_WIDTH, 0))[0]
        if not ice.passed and ice.x + ice_w < ctx.dolphin.x:
            ice.passed = True
            ctx.state.score += 1
            if ctx.state.score > ctx.state.best:
                ctx.state.best = ctx.state.score

    def _maybe_spawn_powerup(self, ctx: GameContext):
        powerup = ctx.powerup
        if powerup.active or self.rng.random() >= POWERUP_CHANCE:
            return
        if not self.assets.has_image(IMG_SHIELD):
            return
        powerup.active = True
        powerup.x = CANVAS_W + POWERUP_SPAWN_X_OFFSET + self.rng.random() * POWERUP_SPAWN_X_RANGE
        powerup.y = POWERUP_SPAWN_Y_MIN + self.rng.random() * POWERUP_SPAWN_Y_RANGE
        powerup.speed = POWERUP_SPEED_MIN + self.rng.random() * POWERUP_SPEED_RANGE

    def _step_powerup(self, ctx: GameContext):
        powerup = ctx.powerup
        powerup.x -= powerup.speed

        dolphin_box = self.dolphin_pickup_box(ctx.dolphin, self._dolphin_size(ctx))
        if rect_intersect(self.powerup_box(powerup), dolphin_box):
            powerup.shield_on = True
            powerup.active = False
            self._play("shield", volume=SHIELD_VOLUME)

        if powerup.x < POWERUP_DESPAWN_X:
            powerup.active = False

    def _step_dolphin(self, ctx: GameContext):
        dolphin = ctx.dolphin
        if not dolphin.is_jumping:
            dolphin.y = self.GROUND_Y
            return

        dolphin.y, dolphin.vy = self.apply_gravity_and_movement(dolphin.y, dolphin.vy)
        if dolphin.y < self.GROUND_Y:
            return

        dolphin.y = self.GROUND_Y
        dolphin.vy = 0.0
        if dolphin.landing_hold == 0:
            self._play("splash", volume=SPLASH_VOLUME)
            self.start_shake(ctx.state, SHAKE_LANDING)

        if dolphin.landing_hold < LANDING_HOLD_FRAMES:
            dolphin.landing_hold += 1
        else:
            dolphin.landing_hold = 0
            dolphin.is_jumping = False

    def _check_ice_collision(self, ctx: GameContext):
        ice = ctx.ice
        if not self.assets.has_image(ice.sprite_key):
            return
        dolphin_box = self.dolphin_hit_box(ctx.dolphin, self._dolphin_size(ctx))
        ice_box = self.ice_hit_box(ice, self.assets.image_size(ice.sprite_key))
        if not rect_intersect(dolphin_box, ice_box):
            return

        if ctx.powerup.shield_on:
            ctx.powerup.shield_on = False
            self.start_shake(ctx.state, SHAKE_SHIELD_HIT)
            self._play("hit", volume=HIT_VOLUME)
            ice.x += SHIELD_PUSHBACK
        else:
            self.game_over(ctx)

    # -------- Helpers --------

    def _dolphin_size(self, ctx: GameContext) -> Tuple[int, int]:
        sprite = SEQ_JUMP[-1] if ctx.dolphin.is_jumping else SEQ_SWIM[0]
        return self.assets.image_size(sprite, DEFAULT_SPRITE_SIZE)

    def _play(self, key: str, loop: bool = False, volume: float = 1.0):
        if self.audio is not None:
            self.audio.play(key, loop=loop, volume=volume)
