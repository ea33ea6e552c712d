import os

# Headless SDL so pygame surfaces and fonts work without a screen or sound card
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

import random

import pytest

from dolphin_jump.assets import AssetManifest, AssetStore
from dolphin_jump.audio import AudioPlayer
from dolphin_jump.data_models import GameContext
from dolphin_jump.highscore_db import HighScoreStore
from dolphin_jump.simulation import SimulationEngine

from fakes import FakeSound, fake_image_loader


@pytest.fixture
def assets():
    store = AssetStore("assets", image_loader=fake_image_loader, sound_loader=FakeSound)
    assert store.load(AssetManifest.default())
    return store


@pytest.fixture
def scores():
    store = HighScoreStore(":memory:")
    yield store
    store.close()


@pytest.fixture
def ctx():
    context = GameContext()
    context.state.audio_unlocked = True
    return context


@pytest.fixture
def engine(assets, scores, ctx):
    return SimulationEngine(
        assets=assets,
        audio=AudioPlayer(assets, ctx.state),
        scores=scores,
        rng=random.Random(1234),
    )


@pytest.fixture
def playing(engine, ctx):
    """A context that has finished loading and started a round."""
    engine.finish_loading(ctx)
    engine.reset_game(ctx)
    return ctx
