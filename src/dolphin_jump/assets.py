"""
assets.py: Concurrent asset loading with placeholder fallback and progress tracking.

Every asset in the manifest is loaded on a worker thread. Each one settles
exactly once, either with its handle or with a fallback (a generated placeholder
for images, None for sounds), and the store completes when the settled count
reaches the manifest total.
"""

import logging
import os
import threading
from concurrent.futures import Future
from dataclasses import dataclass, field
from functools import partial
from typing import Callable, Dict, FrozenSet, List, Optional, Set, Tuple

import pygame

from .constants import (
    ASSETS_DIR, AUDIO_LOAD_GRACE_SECONDS, AUDIO_TO_LOAD, OPTIONAL_AUDIO,
    IMAGES_TO_LOAD, SEQ_SWIM, SEQ_JUMP, SEQ_WATER, SEQ_ICE, SEQ_CLOUD,
    PLACEHOLDER_SIZE, PLACEHOLDER_COLOR, WHITE,
)

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int, str], None]

IMAGE = "image"
AUDIO = "audio"


@dataclass(frozen=True)
class AssetManifest:
    """Image file names plus the audio key -> file name mapping."""
    images: Tuple[str, ...]
    audio: Dict[str, str] = field(default_factory=dict)
    optional_audio: FrozenSet[str] = frozenset()

    @classmethod
    def default(cls) -> "AssetManifest":
        images = IMAGES_TO_LOAD + SEQ_SWIM + SEQ_JUMP + SEQ_WATER + SEQ_ICE + SEQ_CLOUD
        return cls(images=images, audio=dict(AUDIO_TO_LOAD), optional_audio=OPTIONAL_AUDIO)

    @property
    def total(self) -> int:
        return len(self.images) + len(self.audio)


def create_placeholder(text: str) -> pygame.Surface:
    """A red square labelled with the missing file name."""
    surf = pygame.Surface((PLACEHOLDER_SIZE, PLACEHOLDER_SIZE))
    surf.fill(PLACEHOLDER_COLOR)
    if pygame.font.get_init():
        label = pygame.font.Font(None, 14).render(text, True, WHITE)
        surf.blit(label, (5, 30), pygame.Rect(0, 0, PLACEHOLDER_SIZE - 10, label.get_height()))
    return surf


class DeferredSound:
    """
    A sound accepted before its decode finished.
    Plays once the underlying load has succeeded; silent until then.
    """

    def __init__(self, future: Future):
        self._future = future

    def resolve(self):
        if not self._future.done() or self._future.exception() is not None:
            return None
        return self._future.result()

    def play(self, loops: int = 0):
        sound = self.resolve()
        if sound is None:
            return None
        return sound.play(loops=loops)


class AssetStore:
    """Holds loaded images and sounds keyed by file name / logical key."""

    def __init__(self, assets_dir: str = ASSETS_DIR,
                 image_loader: Optional[Callable] = None,
                 sound_loader: Optional[Callable] = None,
                 audio_grace: float = AUDIO_LOAD_GRACE_SECONDS):
        self.assets_dir = assets_dir
        self.audio_grace = audio_grace
        self._image_loader = image_loader or pygame.image.load
        self._sound_loader = sound_loader or pygame.mixer.Sound

        self.images: Dict[str, pygame.Surface] = {}
        self.sounds: Dict[str, object] = {}
        self.placeholders: Set[str] = set()
        self.last_loaded = ""

        self._loaded = 0
        self._total = 0
        self._optional_audio: FrozenSet[str] = frozenset()
        self._on_progress: Optional[ProgressCallback] = None
        self._settled: Set[Tuple[str, str]] = set()
        self._timers: List[threading.Timer] = []
        self._lock = threading.Lock()
        self._complete = threading.Event()
        self._started = False

    # -------- Loading --------

    def start(self, manifest: AssetManifest, on_progress: Optional[ProgressCallback] = None):
        """Submits every load and returns immediately."""
        if self._started:
            raise RuntimeError("Asset loading has already been started")
        self._started = True
        self._total = manifest.total
        self._optional_audio = manifest.optional_audio
        self._on_progress = on_progress

        if self._total == 0:
            self._complete.set()
            return

        logger.info("Loading %d assets from %s", self._total, self.assets_dir)
        for name in manifest.images:
            future = self._submit(self._image_loader, self._path(name))
            future.add_done_callback(partial(self._on_image_done, name))

        for key, fname in manifest.audio.items():
            future = self._submit(self._sound_loader, self._path(fname))
            timer = threading.Timer(self.audio_grace, self._on_sound_grace, args=(key, fname, future))
            timer.daemon = True
            with self._lock:
                self._timers.append(timer)
            timer.start()
            future.add_done_callback(partial(self._on_sound_done, key, fname))

    @staticmethod
    def _submit(loader: Callable, path: str) -> Future:
        """Runs one load on a daemon thread so a stuck decode never blocks interpreter exit."""
        future: Future = Future()

        def run():
            if not future.set_running_or_notify_cancel():
                return
            try:
                result = loader(path)
            except Exception as exc:
                future.set_exception(exc)
            else:
                future.set_result(result)

        threading.Thread(target=run, name=f"asset-loader:{os.path.basename(path)}", daemon=True).start()
        return future

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Blocks until every asset has settled. Returns False on timeout."""
        return self._complete.wait(timeout)

    def load(self, manifest: AssetManifest, on_progress: Optional[ProgressCallback] = None) -> bool:
        self.start(manifest, on_progress)
        return self.wait()

    def close(self):
        """Cancels any outstanding audio grace timers."""
        with self._lock:
            timers, self._timers = self._timers, []
        for timer in timers:
            timer.cancel()

    @property
    def is_complete(self) -> bool:
        return self._complete.is_set()

    @property
    def progress(self) -> Tuple[int, int]:
        with self._lock:
            return self._loaded, self._total

    def convert_for_display(self):
        """Converts images to the display's pixel format. Needs an open display."""
        with self._lock:
            for name, image in self.images.items():
                self.images[name] = image.convert_alpha()

    # -------- Lookup --------

    def get_image(self, name: str) -> Optional[pygame.Surface]:
        return self.images.get(name)

    def get_sound(self, key: str):
        return self.sounds.get(key)

    def has_image(self, name: str) -> bool:
        return name in self.images

    def image_size(self, name: str, default: Optional[Tuple[int, int]] = None) -> Optional[Tuple[int, int]]:
        image = self.images.get(name)
        if image is None:
            return default
        return image.get_size()

    # -------- Completion handlers (run on worker / timer threads) --------

    def _path(self, fname: str) -> str:
        return os.path.join(self.assets_dir, fname)

    def _on_image_done(self, name: str, future: Future):
        exc = future.exception()
        if exc is None:
            self._settle(IMAGE, name, name, future.result())
            return
        logger.warning("Missing image: %s (%s)", name, exc)
        self._settle(IMAGE, name, name, create_placeholder(name), placeholder=True)

    def _on_sound_done(self, key: str, fname: str, future: Future):
        exc = future.exception()
        handle = None
        if exc is None:
            handle = future.result()
        else:
            level = logging.INFO if key in self._optional_audio else logging.WARNING
            logger.log(level, "Missing audio: %s (%s)", fname, exc)
        if not self._settle(AUDIO, key, fname, handle):
            logger.debug("Audio %s finished after its grace period", fname)

    def _on_sound_grace(self, key: str, fname: str, future: Future):
        if self._settle(AUDIO, key, fname, DeferredSound(future)):
            logger.info("Audio %s not ready after %.1fs, continuing without it", fname, self.audio_grace)

    def _settle(self, kind: str, key: str, fname: str, handle, placeholder: bool = False) -> bool:
        """Records one asset. Returns False if it had already settled."""
        with self._lock:
            if (kind, key) in self._settled:
                return False
            self._settled.add((kind, key))
            if kind == IMAGE:
                self.images[key] = handle
                if placeholder:
                    self.placeholders.add(key)
            else:
                self.sounds[key] = handle
            self._loaded += 1
            self.last_loaded = fname
            loaded, total = self._loaded, self._total

        if self._on_progress is not None:
            self._on_progress(loaded, total, fname)
        if loaded == total:
            logger.info("Assets loaded: %d/%d (%d placeholders)", loaded, total, len(self.placeholders))
            self.close()
            self._complete.set()
        return True
