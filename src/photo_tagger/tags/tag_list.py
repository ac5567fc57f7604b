"""Set-like editing rules for an image's ordered tag list."""

from __future__ import annotations

from enum import Enum

from photo_tagger.tags.errors import InvalidTagError

TAG_SEPARATOR = ";"


class TagOp(Enum):
    ADD = "add"
    REMOVE = "remove"
    TOGGLE = "toggle"


def normalize_tag(tag: str) -> str | None:
    """Trim a tag. Returns None if nothing is left."""
    tag = tag.strip()
    return tag or None


def _validate(tag: str) -> None:
    if TAG_SEPARATOR in tag:
        raise InvalidTagError(f"Tag may not contain '{TAG_SEPARATOR}': {tag!r}")


def add_tag(tags: list[str], tag: str) -> bool:
    """Append tag unless it is empty or already present. Returns True on change."""
    tag = normalize_tag(tag)
    if tag is None:
        return False
    _validate(tag)
    if tag in tags:
        return False
    tags.append(tag)
    return True


def remove_tag(tags: list[str], tag: str) -> bool:
    """Delete every exact match of tag. Returns True on change."""
    before = len(tags)
    tags[:] = [t for t in tags if t != tag]
    return len(tags) != before


def toggle_tag(tags: list[str], tag: str) -> bool:
    """Remove tag if present, else add it. Returns True on change."""
    tag = normalize_tag(tag)
    if tag is None:
        return False
    if tag in tags:
        return remove_tag(tags, tag)
    return add_tag(tags, tag)


_OPS = {
    TagOp.ADD: add_tag,
    TagOp.REMOVE: remove_tag,
    TagOp.TOGGLE: toggle_tag,
}


def apply_op(tags: list[str], op: TagOp, tag: str) -> bool:
    return _OPS[op](tags, tag)
