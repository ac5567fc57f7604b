"""Shared fixtures: small real image files built with Pillow."""

from __future__ import annotations

from pathlib import Path

import pytest
from PIL import Image

_FORMATS = {
    ".jpg": "JPEG",
    ".jpeg": "JPEG",
    ".png": "PNG",
    ".webp": "WEBP",
    ".gif": "GIF",
    ".bmp": "BMP",
}


def write_image(path: Path, color: str = "red", user_comment: bytes | None = None) -> Path:
    """Write an 8x8 image whose format follows the file extension."""
    path.parent.mkdir(parents=True, exist_ok=True)
    img = Image.new("RGB", (8, 8), color)
    save_kwargs = {"format": _FORMATS[path.suffix.lower()]}
    if user_comment is not None:
        exif = Image.Exif()
        exif[0x8769] = {0x9286: user_comment}  # Exif IFD -> UserComment
        save_kwargs["exif"] = exif.tobytes()
    img.save(path, **save_kwargs)
    return path


@pytest.fixture
def make_image(tmp_path):
    """Factory: make_image("a.jpg") -> absolute Path inside tmp_path."""
    def _make(name: str, **kwargs) -> Path:
        return write_image(tmp_path / name, **kwargs).resolve()
    return _make


@pytest.fixture
def photo_dir(tmp_path, make_image):
    """A directory with three JPEGs, a GIF, and a non-image file."""
    make_image("a.jpg")
    make_image("b.jpg")
    make_image("c.jpg")
    make_image("d.gif")
    (tmp_path / "notes.txt").write_text("not an image")
    return tmp_path.resolve()


class FakeClock:
    """Monotonic clock advanced by hand."""

    def __init__(self, start: float = 100.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()
