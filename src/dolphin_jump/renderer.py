"""
renderer.py: Paints a GameContext onto the fixed-size canvas.

The scene (background, clouds, water, ice, powerup, dolphin) is drawn with a
random per-frame jitter while the screen shakes. HUD, cover and game-over
overlays are drawn afterwards without it.
"""

import random
from typing import Dict, Optional, Tuple

import pygame

from .assets import AssetStore
from .constants import (
    CANVAS_W, CANVAS_H, GROUND_Y, WATER_Y,
    ANIM_FRAME_TICKS, ANIM_CYCLE_TICKS, JUMP_SPRITE_NEAR, JUMP_SPRITE_GROUND_EPS,
    SHAKE_STRONG_THRESHOLD, SHAKE_STRONG_PX, SHAKE_WEAK_PX,
    BG_FALLBACK_COLOR, GOLD, WHITE, SHIELD_BADGE_COLOR,
    BUTTON_COLOR, BUTTON_HOVER_COLOR, BUTTON_RADIUS, BUTTON_BORDER, OVER_OVERLAY_ALPHA,
    LOADING_BAR_COLOR, LOADING_BAR_W, LOADING_BAR_H,
    IMG_BG, IMG_COVER, IMG_SHIELD, SEQ_SWIM, SEQ_JUMP, SEQ_WATER,
)
from .data_models import Button, Cloud, Dolphin, GameContext, Mode, START_BUTTON, RESTART_BUTTON

Offset = Tuple[int, int]

SCALED_CLOUD_CACHE_MAX = 64


def animation_index(frames: int) -> int:
    """Index into a 4-image loop, advancing every ANIM_FRAME_TICKS frames."""
    return (frames % ANIM_CYCLE_TICKS) // ANIM_FRAME_TICKS


def select_dolphin_sprite(mode: Mode, dolphin: Dolphin, frames: int) -> str:
    """Picks the dolphin image from its jump phase, or the swim loop otherwise."""
    if mode is Mode.PLAY and dolphin.is_jumping:
        height = GROUND_Y - dolphin.y
        if dolphin.vy < 0 and height <= JUMP_SPRITE_GROUND_EPS:
            return SEQ_JUMP[0]
        if dolphin.vy < 0:
            return SEQ_JUMP[1] if height < JUMP_SPRITE_NEAR else SEQ_JUMP[2]
        if dolphin.y >= GROUND_Y - JUMP_SPRITE_GROUND_EPS:
            return SEQ_JUMP[5]
        return SEQ_JUMP[3] if height > JUMP_SPRITE_NEAR else SEQ_JUMP[4]
    return SEQ_SWIM[animation_index(frames)]


def shake_offset(shake: int, rng: random.Random) -> Offset:
    if shake <= 0:
        return 0, 0
    intensity = SHAKE_STRONG_PX if shake > SHAKE_STRONG_THRESHOLD else SHAKE_WEAK_PX
    return (round(rng.uniform(-intensity, intensity)),
            round(rng.uniform(-intensity, intensity)))


class Renderer:
    """Read-only view of the game: never mutates the context it draws."""

    def __init__(self, assets: AssetStore, canvas: Optional[pygame.Surface] = None,
                 rng: Optional[random.Random] = None):
        if not pygame.font.get_init():
            pygame.font.init()
        self.assets = assets
        self.canvas = canvas if canvas is not None else pygame.Surface((CANVAS_W, CANVAS_H))
        self.rng = rng if rng is not None else random.Random()
        # (sprite key, width, height) -> scaled cloud image
        self._scaled: Dict[Tuple[str, int, int], pygame.Surface] = {}

        self.hud_font = self._font(34)
        self.small_font = self._font(24)
        self.title_font = self._font(72)

        self.over_overlay = pygame.Surface((CANVAS_W, CANVAS_H), pygame.SRCALPHA)
        self.over_overlay.fill((0, 0, 0, OVER_OVERLAY_ALPHA))

    @staticmethod
    def _font(size: int) -> pygame.font.Font:
        font = pygame.font.Font(None, size)
        font.set_bold(True)
        return font

    # -------- Frame --------

    def draw(self, ctx: GameContext) -> pygame.Surface:
        state = ctx.state
        canvas = self.canvas
        canvas.fill((0, 0, 0))

        offset = shake_offset(state.shake, self.rng)
        in_round = state.mode in (Mode.PLAY, Mode.OVER)

        # 1. Background
        bg = self.assets.get_image(IMG_BG)
        if bg is not None:
            self._blit(bg, 0, 0, offset)
        else:
            canvas.fill(BG_FALLBACK_COLOR, pygame.Rect(offset, (CANVAS_W, CANVAS_H)))

        # 2. Clouds
        if in_round:
            for cloud in ctx.clouds:
                scaled = self._scaled_cloud(cloud)
                if scaled is not None:
                    self._blit(scaled, cloud.x, cloud.y, offset)

        # 3. Water
        water = self.assets.get_image(SEQ_WATER[animation_index(state.frames)])
        if water is not None:
            self._blit(water, 0, WATER_Y, offset)

        # 4. Ice
        if in_round:
            ice_img = self.assets.get_image(ctx.ice.sprite_key)
            if ice_img is not None:
                self._blit(ice_img, ctx.ice.x, ctx.ice.y, offset)

        # 5. Powerup
        if state.mode is Mode.PLAY and ctx.powerup.active:
            shield = self.assets.get_image(IMG_SHIELD)
            if shield is not None:
                self._blit(shield, ctx.powerup.x, ctx.powerup.y, offset)

        # 6. Dolphin
        if in_round:
            sprite = self.assets.get_image(select_dolphin_sprite(state.mode, ctx.dolphin, state.frames))
            if sprite is not None:
                self._blit(sprite, ctx.dolphin.x, ctx.dolphin.y, offset)

        # --- Overlays (no shake) ---
        if in_round:
            self._draw_hud(ctx)
        if state.mode is Mode.COVER:
            self._draw_cover(ctx)
        elif state.mode is Mode.OVER:
            self._draw_game_over(ctx)

        return canvas

    def draw_loading(self, loaded: int, total: int, name: str) -> pygame.Surface:
        canvas = self.canvas
        canvas.fill(BG_FALLBACK_COLOR)
        self._text_centered("Loading...", CANVAS_H // 2 - 40, self.hud_font, WHITE)

        bar = pygame.Rect((CANVAS_W - LOADING_BAR_W) // 2, CANVAS_H // 2, LOADING_BAR_W, LOADING_BAR_H)
        pct = loaded / total if total else 1.0
        filled = bar.copy()
        filled.width = int(bar.width * min(pct, 1.0))
        pygame.draw.rect(canvas, LOADING_BAR_COLOR, filled)
        pygame.draw.rect(canvas, WHITE, bar, 2)

        if name:
            self._text_centered(f"Loaded: {name}", bar.bottom + 40, self.small_font, WHITE)
        return canvas

    # -------- Overlays --------

    def _draw_hud(self, ctx: GameContext):
        state = ctx.state
        self._text(f"Score: {state.score}", 20, 30, self.hud_font, GOLD)
        self._text(f"Best: {state.best}", 20, 60, self.hud_font, WHITE)
        if state.mode is Mode.PLAY and ctx.powerup.shield_on:
            self._text("SHIELD", CANVAS_W - 90, 40, self.small_font, SHIELD_BADGE_COLOR)

    def _draw_cover(self, ctx: GameContext):
        cover = self.assets.get_image(IMG_COVER)
        if cover is not None:
            self.canvas.blit(cover, (0, 0))
        else:
            self.canvas.fill(BG_FALLBACK_COLOR)
        self._text_centered("Jump over ice, keep swimming.", 440, self.hud_font, GOLD)
        self._draw_button(START_BUTTON, ctx.mouse)
        self._text(f"Best: {ctx.state.best}", 20, 30, self.small_font, WHITE)

    def _draw_game_over(self, ctx: GameContext):
        self.canvas.blit(self.over_overlay, (0, 0))
        self._text_centered("GAME OVER", 220, self.title_font, GOLD)
        self._draw_button(RESTART_BUTTON, ctx.mouse)
        self._text_centered("Click RESTART or press R", 450, self.small_font, WHITE)

    def _draw_button(self, button: Button, mouse: Tuple[float, float]):
        rect = pygame.Rect(int(button.x), int(button.y), int(button.w), int(button.h))
        color = BUTTON_HOVER_COLOR if button.contains(mouse) else BUTTON_COLOR
        pygame.draw.rect(self.canvas, color, rect, border_radius=BUTTON_RADIUS)
        pygame.draw.rect(self.canvas, WHITE, rect, BUTTON_BORDER, border_radius=BUTTON_RADIUS)

        label = self.hud_font.render(button.text, True, WHITE)
        self.canvas.blit(label, label.get_rect(center=rect.center))

    # -------- Primitives --------

    def _scaled_cloud(self, cloud: Cloud) -> Optional[pygame.Surface]:
        """Scales each cloud image once per size; clouds keep their size for life."""
        image = self.assets.get_image(cloud.sprite_key)
        if image is None:
            return None
        size = (max(1, int(cloud.width)), max(1, int(cloud.height)))
        cache_key = (cloud.sprite_key,) + size
        scaled = self._scaled.get(cache_key)
        if scaled is None:
            if len(self._scaled) >= SCALED_CLOUD_CACHE_MAX:
                self._scaled.clear()
            scaled = pygame.transform.scale(image, size)
            self._scaled[cache_key] = scaled
        return scaled

    def _blit(self, image: pygame.Surface, x: float, y: float, offset: Offset):
        self.canvas.blit(image, (int(x) + offset[0], int(y) + offset[1]))

    def _text(self, text: str, x: float, baseline: float, font: pygame.font.Font, color):
        """Draws text whose baseline sits at the given y, like a canvas fillText."""
        surf = font.render(text, True, color)
        self.canvas.blit(surf, (int(x), int(baseline) - font.get_ascent()))

    def _text_centered(self, text: str, baseline: float, font: pygame.font.Font, color):
        width = font.size(text)[0]
        self._text(text, (CANVAS_W - width) / 2, baseline, font, color)
