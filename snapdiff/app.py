"""Command line entry point and terminal loop."""

from __future__ import annotations

import argparse
import logging
import os
import shutil
import sys
import termios
import time
import tty
from typing import Callable

from snapdiff.clip import BLINK_TIMEOUT
from snapdiff.compare import CompareView
from snapdiff.selector import SelectorView
from snapdiff.snapshots import SnapshotError, get_snapshots

VERSION = "dev"
COMMIT = "none"
DEBUG_LOG = "debug.log"

_KEY_NAMES = {
    "\x1b[A": "up",
    "\x1bOA": "up",
    "\x1b[B": "down",
    "\x1bOB": "down",
    "\x1b[C": "right",
    "\x1bOC": "right",
    "\x1b[D": "left",
    "\x1bOD": "left",
    "\x1b[H": "home",
    "\x1b[1~": "home",
    "\x1b[F": "end",
    "\x1b[4~": "end",
    "\x1b[5~": "pgup",
    "\x1b[6~": "pgdown",
    "\r": "enter",
    "\n": "enter",
    "\x7f": "backspace",
    "\x08": "backspace",
    "\x03": "ctrl+c",
    "\x15": "ctrl+u",
    "\x04": "ctrl+d",
    "\x1b": "esc",
}

_ENTER_SCREEN = "\x1b[?1049h\x1b[?25l"
_LEAVE_SCREEN = "\x1b[?25h\x1b[?1049l"
_CLEAR = "\x1b[H\x1b[2J"


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse the repository and mount point, falling back to the environment."""
    parser = argparse.ArgumentParser(
        prog="snapdiff",
        description="A diff tool for restic snapshots.",
    )
    repo_default = os.environ.get("RESTIC_REPOSITORY")
    mount_default = os.environ.get("RESTIC_MOUNTPOINT")
    parser.add_argument(
        "-r",
        "--repo",
        default=repo_default,
        required=repo_default is None,
        help="Path of the restic repository ($RESTIC_REPOSITORY)",
    )
    parser.add_argument(
        "-m",
        "--mount",
        default=mount_default,
        required=mount_default is None,
        help="Path of the restic mount point ($RESTIC_MOUNTPOINT)",
    )
    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"snapdiff {VERSION} ({COMMIT})",
        help="Show app version",
    )
    return parser.parse_args(argv)


def _key_name(data: str) -> str:
    return _KEY_NAMES.get(data, data)


def _reader(fd: int) -> Callable[[], str]:
    def read_key() -> str:
        return _key_name(os.read(fd, 32).decode("utf-8", errors="replace"))

    return read_key


def run(view: SelectorView | CompareView) -> None:
    """Drive the views in the terminal until one of them quits."""
    stdin, stdout = sys.stdin, sys.stdout
    if not stdin.isatty():
        raise RuntimeError("standard input is not a terminal")
    fd = stdin.fileno()
    saved = termios.tcgetattr(fd)
    read_key = _reader(fd)

    def draw(current: SelectorView | CompareView) -> None:
        stdout.write(_CLEAR + current.view().replace("\n", "\r\n"))
        stdout.flush()

    stdout.write(_ENTER_SCREEN)
    try:
        tty.setraw(fd)
        sized = None
        while view is not None:
            size = shutil.get_terminal_size()
            if sized != (id(view), size):
                view.resize(size.columns, size.lines)
                sized = (id(view), size)
            draw(view)
            if isinstance(view, SelectorView) and view.waiting:
                view = view.load_snapshots()
                continue
            if isinstance(view, CompareView) and view.clip.active_index is not None:
                time.sleep(BLINK_TIMEOUT)
                view.clip.finish_blink()
                continue
            view = view.handle_key(read_key())
    finally:
        termios.tcsetattr(fd, termios.TCSADRAIN, saved)
        stdout.write(_LEAVE_SCREEN)
        stdout.flush()


def _setup_logging() -> None:
    if os.environ.get("DEBUG"):
        logging.basicConfig(filename=DEBUG_LOG, level=logging.DEBUG)


def main(argv: list[str] | None = None) -> int:
    """Run the snapshot browser; return the process exit status."""
    args = parse_args(argv)
    _setup_logging()

    try:
        snapshots = get_snapshots(args.repo, args.mount)
    except SnapshotError as exc:
        print(f"Error: cannot get snapshots: {exc}\n", file=sys.stderr)
        print("Did you mount the repository?", file=sys.stderr)
        print("Run 'man restic mount' for more information.", file=sys.stderr)
        return 1

    try:
        run(SelectorView(snapshots))
    except (OSError, RuntimeError, SnapshotError, ValueError) as exc:
        print(f"Error: program failed to run: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())