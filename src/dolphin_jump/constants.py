"""
constants.py: Centralized configuration for the game world, assets and persistence.
"""

# -------- Window & Timing --------
CANVAS_W = 900
CANVAS_H = 600
RENDER_FPS = 60
LOADING_HOLD_MS = 500           # Pause on the full loading bar before the cover screen
WINDOW_TITLE = "Dolphin Jump"

# -------- Physics Config (pixels / frame) --------
GROUND_Y = 500
GRAVITY = 0.6
JUMP_STRENGTH = -15.0
DOLPHIN_X = 100
LANDING_HOLD_FRAMES = 8         # Ground pose held after touchdown before re-jump is allowed

# -------- Ice Obstacle Config --------
ICE_Y = 450
ICE_START_X = 1100
ICE_RESPAWN_THRESHOLD = -200
ICE_BASE_SPEED = 10
ICE_MAX_SPEED = 18
ICE_SPEED_SCORE_STEP = 4        # +1 speed every N points
ICE_FALLBACK_WIDTH = 50
SHIELD_PUSHBACK = 180

# Respawn bounds shrink by this much per point, floor-clamped
RESPAWN_HI_BASE = 1400
RESPAWN_HI_FLOOR = 950
RESPAWN_LO_BASE = 1100
RESPAWN_LO_FLOOR = 800
RESPAWN_SCORE_FACTOR = 10

# -------- Powerup Config --------
POWERUP_CHANCE = 0.18
POWERUP_START_X = CANVAS_W + 600
POWERUP_START_Y = 390
POWERUP_SPAWN_X_OFFSET = 200    # Spawns at CANVAS_W + offset + random(0, range)
POWERUP_SPAWN_X_RANGE = 700
POWERUP_SPAWN_Y_MIN = 350
POWERUP_SPAWN_Y_RANGE = 140
POWERUP_SPEED_MIN = 1.6
POWERUP_SPEED_RANGE = 1.0
POWERUP_BOX_INSET = 10
POWERUP_BOX_SIZE = 40
POWERUP_DESPAWN_X = -200

# -------- Cloud Config --------
CLOUD_COUNT = 12
CLOUD_SPAWN_RANGE = 700         # Horizontal spread beyond the right edge
CLOUD_Y_MIN = 10
CLOUD_Y_RANGE = 200
CLOUD_SCALE_MIN = 0.45
CLOUD_SCALE_RANGE = 0.55
CLOUD_SPEED_MIN = 0.8
CLOUD_SPEED_RANGE = 1.4
CLOUD_DESPAWN_MARGIN = 100

# -------- Screen Shake (frames) --------
SHAKE_LANDING = 8
SHAKE_SHIELD_HIT = 18
SHAKE_GAME_OVER = 24
SHAKE_STRONG_THRESHOLD = 10
SHAKE_STRONG_PX = 6
SHAKE_WEAK_PX = 3

# -------- Animation --------
ANIM_FRAME_TICKS = 10           # Frames each water/swim image stays on screen
ANIM_CYCLE_TICKS = 40
WATER_Y = 400
JUMP_SPRITE_NEAR = 60           # Height above ground splitting near/far jump poses
JUMP_SPRITE_GROUND_EPS = 2

# -------- Audio --------
AUDIO_LOAD_GRACE_SECONDS = 2.0
MIXER_CHANNELS = 16
MUSIC_VOLUME = 0.35
JUMP_VOLUME = 0.9
SPLASH_VOLUME = 0.8
SHIELD_VOLUME = 0.9
HIT_VOLUME = 0.8
GAMEOVER_VOLUME = 0.9

# -------- UI --------
BG_FALLBACK_COLOR = (5, 10, 30)
GOLD = (255, 215, 0)
WHITE = (255, 255, 255)
SHIELD_BADGE_COLOR = (120, 220, 255)
BUTTON_COLOR = (20, 120, 220)
BUTTON_HOVER_COLOR = (30, 170, 255)
BUTTON_W = 220
BUTTON_H = 70
BUTTON_RADIUS = 14
BUTTON_BORDER = 3
START_BUTTON_Y = 480
RESTART_BUTTON_Y = 360
OVER_OVERLAY_ALPHA = 140        # 0.55 opacity
LOADING_BAR_COLOR = (30, 170, 255)
LOADING_BAR_W = 500
LOADING_BAR_H = 24

# -------- Persistence --------
DB_FILE = "dolphin_jump.db"
HIGHSCORE_KEY = "jumper_highscore"

# -------- Asset Manifest --------
ASSETS_DIR = "assets"

IMG_BG = "bg1.png"
IMG_COVER = "cover.png"
IMG_SHIELD = "shield.png"
IMAGES_TO_LOAD = (IMG_BG, IMG_COVER, IMG_SHIELD)

SEQ_SWIM = ("swim1.png", "swim2.png", "swim3.png", "swim4.png")
SEQ_JUMP = ("jump1.png", "jump2.png", "jump3.png", "jump4.png", "jump5.png", "jump6.png")
SEQ_WATER = ("water1.png", "water2.png", "water3.png", "water4.png")
SEQ_ICE = ("ice1.png", "ice2.png", "ice3.png", "ice4.png", "ice5.png", "ice6.png")
SEQ_CLOUD = ("cloud1.png", "cloud2.png", "cloud3.png", "cloud4.png", "cloud5.png", "cloud6.png")

AUDIO_TO_LOAD = {
    "bgmusic": "bgmusic.mp3",
    "jump": "jumpw.mp3",
    "splash": "splash1.mp3",
    "gameover": "gameover.mp3",
    "shield": "shield.wav",
    "hit": "hit.wav",
}
OPTIONAL_AUDIO = frozenset({"shield", "hit"})

PLACEHOLDER_SIZE = 64
PLACEHOLDER_COLOR = (255, 0, 0)
