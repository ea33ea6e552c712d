"""Stand-ins for pygame media objects so tests need no asset files."""

import os

import pygame

DOLPHIN_SIZE = (120, 80)
ICE_SIZE = (100, 40)   # Short enough that a swimming dolphin passes underneath
DEFAULT_SIZE = (64, 64)


def sprite_size(path: str):
    name = os.path.basename(path)
    if name.startswith(("swim", "jump")):
        return DOLPHIN_SIZE
    if name.startswith("ice"):
        return ICE_SIZE
    return DEFAULT_SIZE


def fake_image_loader(path: str) -> pygame.Surface:
    return pygame.Surface(sprite_size(path))


class FakeChannel:
    def __init__(self):
        self.volume = None
        self.busy = True

    def set_volume(self, volume):
        self.volume = volume

    def get_busy(self):
        return self.busy

    def stop(self):
        self.busy = False


class FakeSound:
    def __init__(self, path: str):
        self.path = path
        self.plays = []

    def play(self, loops=0):
        channel = FakeChannel()
        self.plays.append((loops, channel))
        return channel
