"""
audio.py: Sound playback gated on the first user interaction.
"""

import logging
from typing import Dict

import pygame

from .assets import AssetStore
from .constants import MIXER_CHANNELS
from .data_models import GameState

logger = logging.getLogger(__name__)


def init_mixer() -> bool:
    """Opens the audio device. Returns False when no device is available."""
    try:
        pygame.mixer.init()
    except pygame.error as e:
        logger.warning("Audio disabled: %s", e)
        return False
    pygame.mixer.set_num_channels(MIXER_CHANNELS)
    logger.info("Audio mixer initialized")
    return True


class AudioPlayer:
    """
    Plays sounds from the asset store.
    One-shots overlap on separate channels; looping sounds play at most once.
    """

    def __init__(self, assets: AssetStore, state: GameState):
        self.assets = assets
        self.state = state
        self._loops: Dict[str, object] = {}

    def play(self, key: str, loop: bool = False, volume: float = 1.0):
        if not self.state.audio_unlocked:
            return None
        sound = self.assets.get_sound(key)
        if sound is None:
            return None

        if loop:
            channel = self._loops.get(key)
            if channel is not None and channel.get_busy():
                return channel

        channel = sound.play(loops=-1 if loop else 0)
        if channel is None:
            return None
        channel.set_volume(volume)
        if loop:
            self._loops[key] = channel
        return channel

    def stop_all(self):
        for channel in self._loops.values():
            channel.stop()
        self._loops.clear()
        if pygame.mixer.get_init():
            pygame.mixer.stop()
