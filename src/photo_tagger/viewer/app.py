"""Command-line host for the tag engine.

Usage:
    photo-tagger [--config PATH] [--settings PATH] [-v] <command> ...

Commands:
    show PATH               Print the tags stored in an image
    add PATH TAG...         Add tags and save
    remove PATH TAG...      Remove tags and save
    toggle PATH TAG...      Toggle tags and save
    find DIR TAG            List images in DIR carrying TAG
    tags DIR                List every tag used in DIR
    delete PATH             Move an image to the trash
    slideshow DIR           Run a headless slideshow, printing each image
"""

from __future__ import annotations

import argparse
import sys
import time
from pathlib import Path

import yaml
from send2trash import send2trash

from photo_tagger.config.config import ConfigManager, default_config_path
from photo_tagger.logging_setup import setup_logging
from photo_tagger.tags.codec import collect_all_tags, find_images_with_tag, load_tags
from photo_tagger.tags.tag_list import TagOp
from photo_tagger.viewer.controller import (
    ViewerState,
    create_state,
    start_slideshow,
    stop_slideshow,
    update_slideshow,
)
from photo_tagger.viewer.slideshow import SlideshowTimer

POLL_SECONDS = 0.05


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Tag images through their embedded EXIF metadata",
        prog="photo-tagger",
    )
    parser.add_argument(
        "--config", "-c",
        help="Path to config YAML file (default: user config directory)",
        default=None,
    )
    parser.add_argument(
        "--settings",
        help="Settings YAML whose tags.hotkeys table overrides the config",
        default=None,
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    show = sub.add_parser("show", help="Print the tags of an image")
    show.add_argument("path")

    for name, help_text in (
        ("add", "Add tags to an image"),
        ("remove", "Remove tags from an image"),
        ("toggle", "Toggle tags on an image"),
    ):
        edit = sub.add_parser(name, help=help_text)
        edit.add_argument("path")
        edit.add_argument("tags", nargs="+", metavar="TAG")

    find = sub.add_parser("find", help="List images in a directory with a tag")
    find.add_argument("directory")
    find.add_argument("tag")

    tags = sub.add_parser("tags", help="List every tag used in a directory")
    tags.add_argument("directory")

    delete = sub.add_parser("delete", help="Move an image to the trash")
    delete.add_argument("path")

    slideshow = sub.add_parser("slideshow", help="Run a headless slideshow")
    slideshow.add_argument("directory")
    slideshow.add_argument("--tag", "-t", default=None, help="Only images with this tag")
    slideshow.add_argument(
        "--interval", "-i",
        type=float,
        default=None,
        help="Seconds per image (0.5-60)",
    )
    slideshow.add_argument(
        "--loop",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Repeat after the last image",
    )
    return parser


def load_config(args: argparse.Namespace) -> ConfigManager:
    config = ConfigManager()
    config_path = Path(args.config) if args.config else default_config_path()
    config.load_layered(user_config_path=config_path, settings_path=args.settings)
    return config


def _print_tags(tags: list[str]) -> None:
    for tag in tags:
        print(tag)


def _cmd_show(state: ViewerState, args: argparse.Namespace) -> int:
    path = Path(args.path)
    if not path.exists():
        print(f"Error: '{args.path}' does not exist.")
        return 1
    _print_tags(load_tags(path))
    return 0


_EDIT_OPS = {"add": TagOp.ADD, "remove": TagOp.REMOVE, "toggle": TagOp.TOGGLE}


def _cmd_edit(state: ViewerState, args: argparse.Namespace) -> int:
    session = state.session
    if not session.open(args.path):
        print(f"Error: {session.status_message}")
        return 1

    op = _EDIT_OPS[args.command]
    for tag in args.tags:
        session.mutate(op, tag)

    if session.is_dirty and not session.save():
        print(session.status_message)
        return 1
    _print_tags(session.tags)
    return 0


def _cmd_find(state: ViewerState, args: argparse.Namespace) -> int:
    for path in find_images_with_tag(args.directory, args.tag):
        print(path)
    return 0


def _cmd_tags(state: ViewerState, args: argparse.Namespace) -> int:
    _print_tags(sorted(collect_all_tags(args.directory)))
    return 0


def _cmd_delete(state: ViewerState, args: argparse.Namespace) -> int:
    session = state.session
    if not session.open(args.path):
        print(f"Error: {session.status_message}")
        return 1
    if not session.delete_current(send2trash):
        print(session.status_message)
        return 1
    print(session.status_message)
    if session.current_path is not None:
        print(f"Next: {session.current_path}")
    return 0


def _cmd_slideshow(state: ViewerState, args: argparse.Namespace) -> int:
    if args.interval is not None:
        state.config.set("slideshow.interval", args.interval)
    if args.loop is not None:
        state.config.set("slideshow.loop", args.loop)

    if not start_slideshow(state, args.directory, args.tag):
        print(state.status_message)
        return 1

    _show_current(state)
    try:
        while state.slideshow.is_running:
            time.sleep(POLL_SECONDS)
            if update_slideshow(state) is not None:
                _show_current(state)
    except KeyboardInterrupt:
        stop_slideshow(state)
    print(state.status_message)
    return 0


def _show_current(state: ViewerState) -> None:
    session = state.session
    tags = ", ".join(session.tags)
    print(f"{session.current_path}  [{tags}]")


_COMMANDS = {
    "show": _cmd_show,
    "add": _cmd_edit,
    "remove": _cmd_edit,
    "toggle": _cmd_edit,
    "find": _cmd_find,
    "tags": _cmd_tags,
    "delete": _cmd_delete,
    "slideshow": _cmd_slideshow,
}


def main(argv: list[str] | None = None, slideshow: SlideshowTimer | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config(args)
    except (OSError, ValueError, yaml.YAMLError) as e:
        print(f"Error: could not load config: {e}")
        return 1
    setup_logging(config, verbose=args.verbose)

    state = create_state(config, slideshow=slideshow)
    return _COMMANDS[args.command](state, args)


if __name__ == "__main__":
    sys.exit(main())
