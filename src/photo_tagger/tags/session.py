"""Keeps the in-memory tag list in step with the current image."""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path
from typing import Any, Callable

from photo_tagger.tags.codec import load_tags, save_tags
from photo_tagger.tags.errors import InvalidTagError, TagError
from photo_tagger.tags.tag_list import TagOp, apply_op
from photo_tagger.viewer.image_set import ImageSet

logger = logging.getLogger(__name__)

# Moves a file to the trash; raises on failure
TrashFunction = Callable[[Path], Any]


class Direction(Enum):
    NEXT = "next"
    PREVIOUS = "previous"


class TagSession:
    """Owns the tag list of the current image.

    Every open or navigation replaces the tag list with what is stored
    in the newly current image. ``is_dirty`` is True exactly when the
    in-memory list differs from the last loaded or saved one.

    Failures never raise: they are logged and described in
    ``status_message``, and the method returns False.
    """

    def __init__(self, image_set: ImageSet | None = None):
        self.image_set = image_set if image_set is not None else ImageSet()
        self._current: Path | None = None
        self._tags: list[str] = []
        self._saved_tags: list[str] = []
        self.status_message = ""

    @property
    def current_path(self) -> Path | None:
        return self._current

    @property
    def tags(self) -> list[str]:
        return list(self._tags)

    @property
    def is_dirty(self) -> bool:
        return self._tags != self._saved_tags

    def open(self, path: str | Path) -> bool:
        """Make path the current image and load its tags."""
        if not self.image_set.open(path):
            self._report(f"Cannot open: {path}", logging.WARNING)
            return False
        self._load(self.image_set.current)
        self._report(f"Opened: {self._current}")
        return True

    def navigate(self, direction: Direction, auto_save: bool = False) -> Path | None:
        """Move to the next or previous sibling and load its tags.

        With auto_save, pending changes are saved first; a failed save is
        reported but does not block the move.
        """
        if self.is_dirty:
            if auto_save:
                self.save()
            else:
                logger.warning(f"Discarding unsaved tag changes for {self._current}")

        if direction is Direction.NEXT:
            path = self.image_set.next()
        else:
            path = self.image_set.previous()
        if path is not None:
            self._load(path)
        return path

    def next(self, auto_save: bool = False) -> Path | None:
        return self.navigate(Direction.NEXT, auto_save)

    def previous(self, auto_save: bool = False) -> Path | None:
        return self.navigate(Direction.PREVIOUS, auto_save)

    def close(self) -> None:
        """Forget the current image and its tags."""
        self._current = None
        self._tags = []
        self._saved_tags = []

    def mutate(self, op: TagOp, tag: str, auto_save: bool = False) -> bool:
        """Apply add/remove/toggle to the tag list. Returns True on change."""
        if self._require_current() is None:
            return False
        try:
            changed = apply_op(self._tags, op, tag)
        except InvalidTagError as e:
            self._report(str(e), logging.WARNING)
            return False

        if changed and auto_save:
            self.save()
        return changed

    def add_tag(self, tag: str, auto_save: bool = False) -> bool:
        return self.mutate(TagOp.ADD, tag, auto_save)

    def remove_tag(self, tag: str, auto_save: bool = False) -> bool:
        return self.mutate(TagOp.REMOVE, tag, auto_save)

    def toggle_tag(self, tag: str, auto_save: bool = False) -> bool:
        return self.mutate(TagOp.TOGGLE, tag, auto_save)

    def save(self) -> bool:
        """Write the tag list to the current image.

        On failure the list and the dirty state are left as they were.
        """
        if self._require_current() is None:
            return False
        try:
            save_tags(self._current, self._tags)
        except TagError as e:
            self._report(f"Error saving tags: {e}", logging.ERROR)
            return False
        self._saved_tags = list(self._tags)
        self._report("Tags saved")
        return True

    def delete_current(self, trash_fn: TrashFunction) -> bool:
        """Trash the current image via trash_fn and move to a neighbour."""
        path = self._require_current()
        if path is None:
            return False
        try:
            trash_fn(path)
        except Exception as e:
            self._report(f"Error deleting file: {e}", logging.ERROR)
            return False

        next_path = self.image_set.remove_current_and_advance()
        if next_path is not None:
            self._load(next_path)
        else:
            self.close()
        self._report(f"Moved to trash: {path}")
        return True

    def _require_current(self) -> Path | None:
        """The open image, provided the image list still points at it."""
        if self._current is not None and self._current != self.image_set.current:
            logger.info(f"Image list moved away from {self._current}; closing it")
            self.close()
        if self._current is None:
            self._report("No image open", logging.WARNING)
        return self._current

    def _load(self, path: Path) -> None:
        self._current = path
        self._tags = load_tags(path)
        self._saved_tags = list(self._tags)

    def _report(self, message: str, level: int = logging.INFO) -> None:
        self.status_message = message
        logger.log(level, message)
