"""Slideshow timer that advances through a fixed image list when polled."""

from __future__ import annotations

import logging
import time
from enum import Enum
from pathlib import Path
from typing import Callable, Iterable

logger = logging.getLogger(__name__)


class SlideshowState(Enum):
    IDLE = "idle"
    RUNNING = "running"


class SlideshowTimer:
    """Steps through a snapshot of image paths on a wall-clock cadence.

    The host calls ``tick`` once per update; it returns the path to show
    next, or None. The snapshot is independent of directory navigation,
    so it may be a tag-filtered subset.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._images: list[Path] = []
        self._current_index = 0
        self._last_advance = clock()
        self._state = SlideshowState.IDLE
        self.completed_once = False

    @property
    def state(self) -> SlideshowState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._state is SlideshowState.RUNNING

    @property
    def images(self) -> list[Path]:
        return list(self._images)

    @property
    def current_index(self) -> int:
        return self._current_index

    @property
    def current_image(self) -> Path | None:
        if 0 <= self._current_index < len(self._images):
            return self._images[self._current_index]
        return None

    def start(self, images: Iterable[str | Path]) -> None:
        self._images = [Path(p) for p in images]
        self._current_index = 0
        self._last_advance = self._clock()
        self.completed_once = False
        if self._images:
            self._state = SlideshowState.RUNNING
            logger.info(f"Slideshow started with {len(self._images)} images")
        else:
            self._state = SlideshowState.IDLE

    def stop(self) -> None:
        if self._state is SlideshowState.RUNNING:
            logger.info("Slideshow stopped")
        self._state = SlideshowState.IDLE

    def consume_completed(self) -> bool:
        """Return the completed-once flag and clear it."""
        completed = self.completed_once
        self.completed_once = False
        return completed

    def tick(self, interval: float, loop: bool) -> Path | None:
        """Advance if at least interval seconds passed since the last advance.

        Past the end of the list the timer wraps to the first image when
        loop is set, otherwise it goes idle and returns None so the last
        image stays displayed.
        """
        if not self.is_running or not self._images:
            return None

        now = self._clock()
        if now - self._last_advance < interval:
            return None

        self._last_advance = now
        self._current_index += 1

        if self._current_index >= len(self._images):
            self.completed_once = True
            if loop:
                self._current_index = 0
            else:
                # Keep pointing at the final image
                self._current_index = len(self._images) - 1
                self._state = SlideshowState.IDLE
                logger.info("Slideshow finished")
                return None

        return self._images[self._current_index]
