"""Directory-scoped image list with current-image navigation."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Iterable

from photo_tagger.tags.codec import is_image_file

logger = logging.getLogger(__name__)

# Lists the entries of one directory
DirectoryLister = Callable[[Path], Iterable[Path]]


def list_image_files(directory: str | Path) -> list[Path]:
    """Viewable files directly inside directory, sorted by raw path string."""
    directory = Path(directory)
    try:
        entries = list(directory.iterdir())
    except OSError as e:
        logger.warning(f"Cannot list {directory}: {e}")
        return []
    files = [p for p in entries if p.is_file() and is_image_file(p)]
    return sorted(files, key=str)


class ImageSet:
    """The viewable images of one directory and which of them is current.

    The list is sorted case-sensitively by path string (no natural sort).
    ``current_index`` is valid whenever the list is non-empty and ``None``
    otherwise.
    """

    def __init__(self, lister: DirectoryLister = list_image_files):
        self._lister = lister
        self._directory: Path | None = None
        self._files: list[Path] = []
        self._current_index: int | None = None

    @property
    def directory(self) -> Path | None:
        return self._directory

    @property
    def files(self) -> list[Path]:
        return list(self._files)

    @property
    def total(self) -> int:
        return len(self._files)

    @property
    def is_empty(self) -> bool:
        return not self._files

    @property
    def current_index(self) -> int | None:
        return self._current_index

    @property
    def current(self) -> Path | None:
        if self._current_index is None:
            return None
        return self._files[self._current_index]

    def set_directory(self, directory: str | Path) -> None:
        """Re-scan directory (non-recursive), discarding prior state."""
        directory = Path(directory).resolve()
        files = [Path(p) for p in self._lister(directory) if is_image_file(p)]
        self._directory = directory
        self._files = sorted(files, key=str)
        self._current_index = 0 if self._files else None
        logger.debug(f"Scanned {directory}: {len(self._files)} images")

    def open(self, path: str | Path) -> bool:
        """Make path current, re-scanning its parent directory.

        Returns False (state unchanged) if path is missing or not viewable.
        """
        path = Path(path).resolve()
        if not is_image_file(path) or not path.exists():
            return False

        self.set_directory(path.parent)
        try:
            self._current_index = self._files.index(path)
        except ValueError:
            self._current_index = 0 if self._files else None
        return True

    def goto(self, index: int) -> Path | None:
        if 0 <= index < len(self._files):
            self._current_index = index
        return self.current

    def next(self) -> Path | None:
        if not self._files:
            return None
        self._current_index = (self._current_index + 1) % len(self._files)
        return self.current

    def previous(self) -> Path | None:
        if not self._files:
            return None
        if self._current_index > 0:
            self._current_index -= 1
        else:
            self._current_index = len(self._files) - 1
        return self.current

    def remove_current_and_advance(self) -> Path | None:
        """Drop the current path from the list and select a neighbour.

        The file itself is not touched. The image now at the same index
        becomes current, else the previous one; returns the new current
        path, or None when the list is now empty.
        """
        if self._current_index is None:
            return None

        pos = self._current_index
        removed = self._files.pop(pos)
        logger.debug(f"Removed {removed} from image list")

        if not self._files:
            self._current_index = None
        elif pos < len(self._files):
            self._current_index = pos
        else:
            self._current_index = pos - 1
        return self.current
