import random

import pytest

from dolphin_jump.constants import GROUND_Y, SEQ_ICE, CLOUD_COUNT, IMG_SHIELD
from dolphin_jump.data_models import GameContext, InvalidTransition, Mode
from dolphin_jump.simulation import SimulationEngine


class ZeroRandom(random.Random):
    """Every uniform draw lands on the low end of its range."""

    def random(self):
        return 0.0


def put_ice_on_dolphin(ctx):
    """Airborne dolphin level with the ice, which overlaps it after this frame's move."""
    ctx.dolphin.is_jumping = True
    ctx.dolphin.y = 440.0
    ctx.dolphin.vy = 0.0
    ctx.ice.x = 150.0


def plays(engine, key):
    return engine.assets.get_sound(key).plays


# -------- Mode transitions --------

def test_reset_game_starts_a_fresh_round(engine, playing):
    ctx = playing
    assert ctx.state.mode is Mode.PLAY
    assert ctx.state.score == 0
    assert ctx.dolphin.y == GROUND_Y and not ctx.dolphin.is_jumping
    assert ctx.ice.active and not ctx.ice.passed
    assert ctx.ice.x == 1100
    assert ctx.ice.sprite_key in SEQ_ICE
    assert not ctx.powerup.active and not ctx.powerup.shield_on
    assert len(ctx.clouds) == CLOUD_COUNT

    loops, channel = plays(engine, "bgmusic")[0]
    assert loops == -1
    assert channel.volume == pytest.approx(0.35)


def test_background_music_is_not_restarted_while_playing(engine, playing):
    engine.game_over(playing)
    engine.reset_game(playing)
    assert len(plays(engine, "bgmusic")) == 1


def test_undefined_transitions_are_rejected(engine, ctx):
    with pytest.raises(InvalidTransition):
        engine.reset_game(ctx)  # still LOADING
    assert ctx.state.mode is Mode.LOADING

    engine.finish_loading(ctx)
    with pytest.raises(InvalidTransition):
        engine.finish_loading(ctx)
    with pytest.raises(InvalidTransition):
        engine.game_over(ctx)

    engine.reset_game(ctx)
    with pytest.raises(InvalidTransition):
        engine.reset_game(ctx)
    assert ctx.state.mode is Mode.PLAY


# -------- Frame counters and frozen modes --------

def test_world_is_frozen_outside_play(engine, ctx):
    engine.finish_loading(ctx)
    ctx.state.shake = 5
    ice_x = ctx.ice.x

    for _ in range(3):
        engine.step(ctx)

    assert ctx.state.frames == 3
    assert ctx.state.shake == 2
    assert ctx.ice.x == ice_x
    assert ctx.clouds == []


def test_shake_keeps_decaying_after_game_over(engine, playing):
    put_ice_on_dolphin(playing)
    engine.step(playing)
    assert playing.state.mode is Mode.OVER
    assert playing.state.shake == 24

    ice_x = playing.ice.x
    engine.step(playing)
    assert playing.state.shake == 23
    assert playing.ice.x == ice_x


# -------- Scoring --------

def test_score_counts_each_obstacle_pass_once(engine, playing):
    ctx = playing
    respawns = 0
    prev_score = 0
    prev_x = ctx.ice.x
    scored_this_cycle = False

    for _ in range(3000):
        engine.step(ctx)
        assert ctx.state.mode is Mode.PLAY
        assert len(ctx.clouds) == CLOUD_COUNT
        assert ctx.state.best >= ctx.state.score

        if ctx.ice.x > prev_x:
            respawns += 1
            scored_this_cycle = False

        delta = ctx.state.score - prev_score
        assert delta in (0, 1)
        if delta:
            assert not scored_this_cycle
            assert ctx.ice.passed
            scored_this_cycle = True

        prev_score = ctx.state.score
        prev_x = ctx.ice.x

    assert respawns > 10
    assert ctx.state.score == respawns + (1 if ctx.ice.passed else 0)


def test_speed_follows_score(engine, playing):
    playing.ice.x = 5000.0
    playing.state.score = 16
    engine.step(playing)
    assert playing.ice.x == 5000.0 - 14


# -------- Jumping --------

def test_jump_arc_and_landing_hold(engine, playing):
    ctx = playing
    ctx.ice.x = 5000.0
    engine.trigger_jump(ctx)
    assert ctx.dolphin.is_jumping
    assert ctx.dolphin.vy == -15.0

    for _ in range(25):
        engine.step(ctx)
    assert ctx.dolphin.vy == pytest.approx(0.0, abs=1e-9)
    assert ctx.dolphin.y < GROUND_Y

    frames = 25
    while ctx.dolphin.landing_hold == 0:
        engine.step(ctx)
        frames += 1
        assert frames < 100
    assert frames in (49, 50)
    assert ctx.dolphin.y == GROUND_Y
    assert ctx.state.shake == 8
    assert len(plays(engine, "splash")) == 1

    for _ in range(7):
        engine.step(ctx)
        assert ctx.dolphin.is_jumping
    engine.step(ctx)
    assert not ctx.dolphin.is_jumping
    assert ctx.dolphin.landing_hold == 0
    assert len(plays(engine, "splash")) == 1


def test_jump_while_airborne_is_ignored(engine, playing):
    ctx = playing
    ctx.ice.x = 5000.0
    engine.trigger_jump(ctx)
    for _ in range(5):
        engine.step(ctx)
    before = (ctx.dolphin.vy, ctx.dolphin.y, ctx.dolphin.is_jumping, ctx.dolphin.landing_hold)

    engine.trigger_jump(ctx)

    assert (ctx.dolphin.vy, ctx.dolphin.y, ctx.dolphin.is_jumping, ctx.dolphin.landing_hold) == before
    assert len(plays(engine, "jump")) == 1


def test_jump_only_in_play(engine, ctx):
    engine.finish_loading(ctx)
    engine.trigger_jump(ctx)
    assert not ctx.dolphin.is_jumping
    assert ctx.dolphin.vy == 0.0


# -------- Collisions --------

def test_unshielded_collision_ends_the_game_and_saves_best(engine, playing, scores):
    playing.state.score = 7
    put_ice_on_dolphin(playing)
    engine.step(playing)

    assert playing.state.mode is Mode.OVER
    assert playing.state.best == 7
    assert scores.read_best() == 7
    assert len(plays(engine, "gameover")) == 1


def test_persisted_best_never_decreases(engine, playing, scores):
    playing.state.score = 7
    put_ice_on_dolphin(playing)
    engine.step(playing)

    engine.reset_game(playing)
    playing.state.score = 3
    put_ice_on_dolphin(playing)
    engine.step(playing)

    assert playing.state.mode is Mode.OVER
    assert playing.state.best == 7
    assert scores.read_best() == 7


def test_shield_absorbs_exactly_one_hit(engine, playing):
    ctx = playing
    ctx.powerup.shield_on = True
    put_ice_on_dolphin(ctx)
    engine.step(ctx)

    assert ctx.state.mode is Mode.PLAY
    assert not ctx.powerup.shield_on
    assert ctx.ice.x == 150.0 - 10 + 180
    assert ctx.state.shake == 18
    assert len(plays(engine, "hit")) == 1

    put_ice_on_dolphin(ctx)
    engine.step(ctx)
    assert ctx.state.mode is Mode.OVER


# -------- Powerups --------

def test_powerup_pickup_grants_shield(engine, playing):
    ctx = playing
    ctx.ice.x = 5000.0
    ctx.powerup.active = True
    ctx.powerup.x, ctx.powerup.y, ctx.powerup.speed = 120.0, 480.0, 2.0

    engine.step(ctx)

    assert ctx.powerup.shield_on
    assert not ctx.powerup.active
    assert len(plays(engine, "shield")) == 1


def test_powerup_despawns_off_screen(engine, playing):
    ctx = playing
    ctx.ice.x = 5000.0
    ctx.powerup.active = True
    ctx.powerup.x, ctx.powerup.y, ctx.powerup.speed = -199.0, 0.0, 2.0

    engine.step(ctx)

    assert not ctx.powerup.active
    assert not ctx.powerup.shield_on


def test_respawn_relocates_ice_and_may_spawn_powerup(engine, playing):
    ctx = playing
    engine.rng = ZeroRandom()
    ctx.ice.x = -195.0
    ctx.ice.passed = True

    engine.step(ctx)

    assert ctx.ice.x == 1100.0
    assert not ctx.ice.passed
    assert ctx.powerup.active
    assert (ctx.powerup.x, ctx.powerup.y) == (1100.0 - 1.6, 350.0)
    assert ctx.powerup.speed == pytest.approx(1.6)


def test_no_second_powerup_while_one_is_active(engine, playing):
    ctx = playing
    engine.rng = ZeroRandom()
    ctx.powerup.active = True
    ctx.powerup.x, ctx.powerup.y, ctx.powerup.speed = 5000.0, 0.0, 2.0
    ctx.ice.x = -195.0

    engine.step(ctx)

    assert ctx.powerup.x == 4998.0


def test_no_powerup_without_its_sprite(engine, playing):
    ctx = playing
    engine.rng = ZeroRandom()
    del engine.assets.images[IMG_SHIELD]
    ctx.ice.x = -195.0

    engine.step(ctx)

    assert not ctx.powerup.active


# -------- Clouds --------

def test_clouds_are_topped_up_after_leaving(engine, playing):
    ctx = playing
    ctx.ice.x = 5000.0
    gone = ctx.clouds[0]
    gone.x = -10000.0

    engine.step(ctx)

    assert len(ctx.clouds) == CLOUD_COUNT
    assert gone not in ctx.clouds
    newest = ctx.clouds[-1]
    assert 900 <= newest.x < 1600
    assert 10 <= newest.y < 210
    assert 0.8 <= newest.speed < 2.2
    assert 64 * 0.45 <= newest.width < 64


def test_engine_without_audio_or_scores(assets):
    engine = SimulationEngine(assets=assets, rng=random.Random(3))
    ctx = GameContext()
    engine.finish_loading(ctx)
    engine.reset_game(ctx)
    ctx.state.score = 2
    put_ice_on_dolphin(ctx)
    engine.step(ctx)
    assert ctx.state.mode is Mode.OVER
    assert ctx.state.best == 2


def test_missing_ice_sprite_cannot_collide(engine, playing):
    del engine.assets.images[playing.ice.sprite_key]
    put_ice_on_dolphin(playing)
    engine.step(playing)
    assert playing.state.mode is Mode.PLAY
