"""Read and write tag lists embedded in an image's EXIF UserComment.

Tags are stored as a single ``;``-joined UTF-8 string. Reading tolerates
the character-set prefixes (``ASCII\\0\\0\\0``, ``UNICODE\\0``) other tools
write in front of the comment; writing never adds one.
"""

from __future__ import annotations

import io
import logging
import os
import shutil
import tempfile
from enum import Enum
from pathlib import Path
from typing import Any, Iterable

import piexif
from PIL import Image, PngImagePlugin

from photo_tagger.tags.errors import TagError, TagWriteError, UnsupportedFormatError
from photo_tagger.tags.tag_list import TAG_SEPARATOR

logger = logging.getLogger(__name__)

VIEWABLE_EXTENSIONS = frozenset({"png", "jpg", "jpeg", "gif", "webp", "bmp"})
TAGGABLE_EXTENSIONS = frozenset({"png", "jpg", "jpeg", "webp"})

EXIF_IFD_POINTER = 0x8769
USER_COMMENT = 0x9286

_CHARSET_MARKERS = ("ASCII", "UNICODE")
_CHARSET_PREFIX_LEN = 8


class ImageKind(Enum):
    NOT_AN_IMAGE = "not_an_image"
    VIEWABLE = "viewable"
    TAGGABLE = "taggable"


def _extension(path: str | Path) -> str:
    return Path(path).suffix.lower().lstrip(".")


def classify(path: str | Path) -> ImageKind:
    """Classify a path by extension (case-insensitive)."""
    ext = _extension(path)
    if ext in TAGGABLE_EXTENSIONS:
        return ImageKind.TAGGABLE
    if ext in VIEWABLE_EXTENSIONS:
        return ImageKind.VIEWABLE
    return ImageKind.NOT_AN_IMAGE


def is_image_file(path: str | Path) -> bool:
    """True for any format the viewer can display."""
    return classify(path) is not ImageKind.NOT_AN_IMAGE


def is_supported_format(path: str | Path) -> bool:
    """True for formats whose container can carry embedded tags."""
    return classify(path) is ImageKind.TAGGABLE


def decode_comment(raw: bytes | str) -> list[str]:
    """Turn a raw UserComment value into a tag list.

    Never raises: invalid UTF-8 is replaced, and duplicates are kept in
    the order they appear.
    """
    if isinstance(raw, str):
        raw = raw.encode("utf-8", errors="replace")
    text = raw.decode("utf-8", errors="replace").strip()
    if text.startswith(_CHARSET_MARKERS):
        text = text[_CHARSET_PREFIX_LEN:]
    text = text.replace("\x00", "")
    return [piece.strip() for piece in text.split(TAG_SEPARATOR) if piece.strip()]


def encode_comment(tags: Iterable[str]) -> bytes:
    """Join tags into the raw UserComment bytes (no charset prefix)."""
    return TAG_SEPARATOR.join(tags).encode("utf-8")


def load_tags(path: str | Path) -> list[str]:
    """Load the tag list embedded in an image.

    Unsupported formats, missing files and unreadable metadata all yield
    an empty list.
    """
    path = Path(path)
    if not is_supported_format(path):
        return []

    try:
        with Image.open(path) as img:
            exif = img.getexif()
            raw = exif.get_ifd(EXIF_IFD_POINTER).get(USER_COMMENT)
    except Exception as e:
        logger.debug(f"Could not read tags from {path}: {e}")
        return []

    if raw is None:
        return []
    return decode_comment(raw)


def save_tags(path: str | Path, tags: Iterable[str]) -> None:
    """Write tags into an image's UserComment, replacing the file atomically.

    Raises:
        UnsupportedFormatError: The file cannot carry embedded tags.
        TagWriteError: Reading the image or writing the file failed.
    """
    path = Path(path)
    if not is_supported_format(path):
        raise UnsupportedFormatError(
            f"Cannot store tags in '{path.suffix or path.name}' files: {path}"
        )

    comment = encode_comment(tags)
    try:
        with Image.open(path) as img:
            image_format = img.format
            if getattr(img, "is_animated", False) and image_format == "PNG":
                raise UnsupportedFormatError(
                    f"Cannot store tags in animated PNG without dropping frames: {path}"
                )
            exif_bytes = _build_exif(img, comment)

            if image_format == "PNG":
                data = _render_png(img, exif_bytes)
            elif image_format in ("JPEG", "WEBP"):
                output = io.BytesIO()
                piexif.insert(exif_bytes, path.read_bytes(), output)
                data = output.getvalue()
            else:
                raise UnsupportedFormatError(
                    f"{path} contains {image_format} data, which cannot carry tags"
                )

        _atomic_write(path, data)
    except TagError:
        raise
    except Exception as e:
        raise TagWriteError(f"Failed to write tags to {path}: {e}") from e

    logger.debug(f"Saved {comment!r} to {path}")


def find_images_with_tag(directory: str | Path, tag: str) -> list[Path]:
    """Taggable images directly inside directory whose tags include tag."""
    matches = [
        path for path in _supported_files(directory)
        if tag in load_tags(path)
    ]
    return sorted(matches, key=str)


def collect_all_tags(directory: str | Path) -> set[str]:
    """Every tag used by the taggable images directly inside directory."""
    all_tags: set[str] = set()
    for path in _supported_files(directory):
        all_tags.update(load_tags(path))
    return all_tags


def _supported_files(directory: str | Path) -> list[Path]:
    directory = Path(directory)
    try:
        entries = list(directory.iterdir())
    except OSError as e:
        logger.warning(f"Cannot list {directory}: {e}")
        return []
    return [p for p in entries if p.is_file() and is_supported_format(p)]


def _build_exif(img: Image.Image, comment: bytes) -> bytes:
    """Return the image's EXIF block with UserComment set to comment."""
    exif = img.getexif()
    if EXIF_IFD_POINTER in exif:
        exif.get_ifd(EXIF_IFD_POINTER)[USER_COMMENT] = comment
    else:
        exif[EXIF_IFD_POINTER] = {USER_COMMENT: comment}
    return exif.tobytes()


def _render_png(img: Image.Image, exif_bytes: bytes) -> bytes:
    """Re-encode a PNG with new EXIF, keeping its text chunks."""
    pnginfo = PngImagePlugin.PngInfo()
    for key, value in img.info.items():
        # Legacy EXIF text chunk is superseded by the eXIf chunk written below
        if isinstance(value, str) and key != "Raw profile type exif":
            pnginfo.add_text(key, value)

    save_kwargs: dict[str, Any] = {
        "format": "PNG",
        "exif": exif_bytes,
        "pnginfo": pnginfo,
    }
    for key in ("icc_profile", "transparency", "dpi"):
        if key in img.info:
            save_kwargs[key] = img.info[key]

    output = io.BytesIO()
    img.save(output, **save_kwargs)
    return output.getvalue()


def _atomic_write(path: Path, data: bytes) -> None:
    """Safe write: temp file in same directory, then atomic replace."""
    fd, tmp_path = tempfile.mkstemp(
        suffix=path.suffix, dir=path.parent, prefix=".save_tags_"
    )
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
        shutil.copymode(path, tmp_path)
        os.replace(tmp_path, path)
    except Exception:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)
        raise
