"""Key bindings and the help line rendered from them."""

from __future__ import annotations

from dataclasses import dataclass
from itertools import zip_longest
from typing import Mapping

_SHORT_SEPARATOR = " • "
_COLUMN_SEPARATOR = "    "


@dataclass(frozen=True)
class KeyBinding:
    """A set of keys that trigger one action, with its help text."""

    keys: tuple[str, ...]
    help_key: str
    help_desc: str

    def matches(self, key: str) -> bool:
        """Return True if ``key`` triggers this binding."""
        return key in self.keys


@dataclass(frozen=True)
class KeyMap:
    """Named bindings plus the layout of the short and full help views."""

    bindings: Mapping[str, KeyBinding]
    short: tuple[str, ...]
    full: tuple[tuple[str, ...], ...]

    def __getitem__(self, name: str) -> KeyBinding:
        return self.bindings[name]

    def short_help(self) -> list[KeyBinding]:
        """Bindings shown in the one-line help."""
        return [self.bindings[name] for name in self.short]

    def full_help(self) -> list[list[KeyBinding]]:
        """Bindings shown in the expanded help, one list per column."""
        return [[self.bindings[name] for name in column] for column in self.full]


def compare_keymap() -> KeyMap:
    """Bindings of the snapshot comparison view."""
    return KeyMap(
        bindings={
            "help": KeyBinding(("?",), "?", "toggle help"),
            "quit": KeyBinding(("ctrl+c", "q"), "ctrl+c", "quit"),
            "next_dir": KeyBinding(("l", "right", "enter"), "l/right", "Open"),
            "prev_dir": KeyBinding(("h", "left", "backspace"), "h/left", "Back"),
            "clipboard": KeyBinding(("1", "2", "3"), "1,2,3", "Copy"),
        },
        short=("next_dir", "prev_dir", "clipboard"),
        full=(("next_dir", "help"), ("prev_dir", "quit"), ("clipboard",)),
    )


def selector_keymap() -> KeyMap:
    """Bindings of the snapshot selection view."""
    return KeyMap(
        bindings={
            "help": KeyBinding(("?",), "?", "toggle help"),
            "quit": KeyBinding(("ctrl+c", "q"), "ctrl+c", "quit"),
            "select": KeyBinding((" ",), "<space>", "Select"),
            "clear": KeyBinding(("backspace",), "<backspace>", "Clear"),
            "accept": KeyBinding(("enter",), "<enter>", "Open repositories"),
        },
        short=("select", "clear", "accept"),
        full=(("select", "help"), ("clear", "quit"), ("accept",)),
    )


def clip_keymap() -> KeyMap:
    """Bindings of the clipboard panel."""
    return KeyMap(
        bindings={
            "copy_one": KeyBinding(("1",), "1", "Copy [1]"),
            "copy_two": KeyBinding(("2",), "2", "Copy [2]"),
            "copy_three": KeyBinding(("3",), "3", "Copy [3]"),
        },
        short=("copy_one", "copy_two", "copy_three"),
        full=(("copy_one", "copy_two"), ("copy_three",)),
    )


def _render_column(bindings: list[KeyBinding]) -> list[str]:
    key_width = max((len(binding.help_key) for binding in bindings), default=0)
    return [f"{binding.help_key.ljust(key_width)} {binding.help_desc}" for binding in bindings]


def render_help(keymap: KeyMap, show_all: bool) -> str:
    """Render the short one-line help, or the full help in columns."""
    if not show_all:
        return _SHORT_SEPARATOR.join(
            f"{binding.help_key} {binding.help_desc}" for binding in keymap.short_help()
        )

    columns = [_render_column(group) for group in keymap.full_help() if group]
    widths = [max(len(line) for line in column) for column in columns]
    lines = []
    for cells in zip_longest(*columns, fillvalue=""):
        padded = (cell.ljust(width) for cell, width in zip(cells, widths))
        lines.append(_COLUMN_SEPARATOR.join(padded).rstrip())
    return "\n".join(lines)