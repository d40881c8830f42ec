"""Panel listing three paths that can be copied to the clipboard."""

from __future__ import annotations

import base64
import logging
import sys
from typing import TextIO

from snapdiff.keys import clip_keymap

BLINK_TIMEOUT = 0.1
BLINK_INTERVAL = 0.005
NOT_SET = "not set"

_DARK = (0x23, 0x26, 0x27)
_LIGHT = (0xFC, 0xFC, 0xFC)
_RESET = "\x1b[0m"

logger = logging.getLogger(__name__)


def _colors(fg: tuple[int, int, int], bg: tuple[int, int, int]) -> str:
    return "\x1b[38;2;{};{};{}m\x1b[48;2;{};{};{}m".format(*fg, *bg)


_DEFAULT_STYLE = _colors(_LIGHT, _DARK)
_BLINK_STYLE = "\x1b[1m" + _colors(_DARK, _LIGHT)


def copy_to_clipboard(text: str, stream: TextIO) -> None:
    """Ask the terminal behind ``stream`` to put ``text`` on the clipboard."""
    payload = base64.b64encode(text.encode("utf-8")).decode("ascii")
    stream.write(f"\x1b]52;c;{payload}\x07")
    flush = getattr(stream, "flush", None)
    if flush is not None:
        flush()


class ClipPanel:
    """Three copyable paths; the one being copied blinks briefly."""

    def __init__(self, stream: TextIO | None = None, styled: bool = True, debug: bool = False) -> None:
        self.keymap = clip_keymap()
        self.rows = [NOT_SET, NOT_SET, NOT_SET]
        self.active_index: int | None = None
        self.stream = stream
        self.styled = styled
        self.debug = debug

    def update_paths(self, first: str, second: str, third: str) -> None:
        self.rows = [first, second, third]

    def handle_key(self, key: str) -> int | None:
        """Return the 1-based entry a copy key asks for, else None."""
        if any(binding.matches(key) for binding in self.keymap.short_help()):
            return int(key)
        return None

    def start_blink(self, index: int) -> None:
        """Highlight the 1-based entry ``index`` until the blink finishes."""
        if not 1 <= index <= len(self.rows):
            raise ValueError(f"no clipboard entry {index}")
        self.active_index = index

    def finish_blink(self) -> str | None:
        """Copy the highlighted entry, clear the highlight, return the text."""
        if self.active_index is None:
            return None
        text = self.rows[self.active_index - 1]
        copy_to_clipboard(text, self.stream if self.stream is not None else sys.stdout)
        logger.debug("Clipboard copied: %s", text)
        self.active_index = None
        return text

    def _render(self, text: str, blinking: bool) -> str:
        if not self.styled:
            return text
        return (_BLINK_STYLE if blinking else _DEFAULT_STYLE) + text + _RESET

    def view(self) -> str:
        parts = ["\n\n"]
        for number, path in enumerate(self.rows, start=1):
            parts.append(self._render(f"[{number}] {path}", number == self.active_index))
            parts.append("\n")
        if self.debug:
            parts.append("\n\n---\nDEBUG")
            parts.append(f"\n\n{self.active_index if self.active_index is not None else -1}")
            parts.append(f"\n\n{self.active_index is not None}")
        return "".join(parts)