"""Viewer state owned by one host loop, plus the handlers that act on it.

The host (a GUI tick or the CLI) keeps a single ``ViewerState`` and
passes it to these functions; nothing here is global.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from photo_tagger.config.config import ConfigManager
from photo_tagger.tags.codec import find_images_with_tag
from photo_tagger.tags.session import TagSession
from photo_tagger.viewer.hotkeys import HotKey, HotkeyMap
from photo_tagger.viewer.image_set import ImageSet
from photo_tagger.viewer.slideshow import SlideshowTimer

logger = logging.getLogger(__name__)


@dataclass
class ViewerState:
    config: ConfigManager
    session: TagSession
    slideshow: SlideshowTimer = field(default_factory=SlideshowTimer)
    hotkeys: HotkeyMap = field(default_factory=HotkeyMap)

    @property
    def image_set(self) -> ImageSet:
        return self.session.image_set

    @property
    def status_message(self) -> str:
        return self.session.status_message


def create_state(
    config: ConfigManager,
    slideshow: SlideshowTimer | None = None,
) -> ViewerState:
    """Build a ViewerState, compiling the hotkey table from config."""
    return ViewerState(
        config=config,
        session=TagSession(ImageSet()),
        slideshow=slideshow if slideshow is not None else SlideshowTimer(),
        hotkeys=HotkeyMap.from_config(config.hotkey_tags),
    )


def change_directory(state: ViewerState, directory: str | Path) -> Path | None:
    """Point the viewer at a directory and open its first image, if any."""
    state.image_set.set_directory(directory)
    first = state.image_set.current
    if first is None:
        state.session.close()
    else:
        state.session.open(first)
    return first


def handle_hotkey(state: ViewerState, key: HotKey) -> bool:
    """Toggle the tag bound to key. Returns True if the tag list changed."""
    tag = state.hotkeys.tag_for(key)
    if tag is None:
        return False
    return state.session.toggle_tag(tag, auto_save=state.config.auto_save)


def start_slideshow(
    state: ViewerState,
    directory: str | Path,
    tag: str | None = None,
) -> bool:
    """Start a slideshow over directory, optionally only images with tag."""
    directory = Path(directory)
    if tag:
        images = find_images_with_tag(directory, tag)
    else:
        if state.image_set.directory != directory.resolve():
            state.image_set.set_directory(directory)
        images = state.image_set.files

    state.slideshow.start(images)
    first = state.slideshow.current_image
    if not state.slideshow.is_running or first is None:
        state.session.status_message = "No images found for slideshow"
        logger.info(state.session.status_message)
        return False

    state.session.open(first)
    state.session.status_message = "Slideshow started"
    return True


def update_slideshow(state: ViewerState) -> Path | None:
    """Poll the slideshow once; open the image it advanced to, if any."""
    path = state.slideshow.tick(
        state.config.slideshow_interval,
        state.config.slideshow_loop,
    )
    if path is not None:
        state.session.open(path)

    if not state.slideshow.is_running and state.slideshow.consume_completed():
        state.session.status_message = "Slideshow completed"
        logger.info(state.session.status_message)
    return path


def stop_slideshow(state: ViewerState) -> None:
    state.slideshow.stop()
    state.session.status_message = "Slideshow stopped"
