"""A scrolling text table with a cursor-selected row."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence

SELECTED_FOREGROUND = "#232627"
SELECTED_BACKGROUND = "#fcfcfc"
_ELLIPSIS = "…"
_RESET = "\x1b[0m"


def _rgb(color: str) -> str:
    value = color.lstrip("#")
    red, green, blue = (int(value[start : start + 2], 16) for start in (0, 2, 4))
    return f"{red};{green};{blue}"


def _paint(text: str, bold: bool = False, fg: str | None = None, bg: str | None = None) -> str:
    codes = []
    if bold:
        codes.append("\x1b[1m")
    if fg:
        codes.append(f"\x1b[38;2;{_rgb(fg)}m")
    if bg:
        codes.append(f"\x1b[48;2;{_rgb(bg)}m")
    if not codes:
        return text
    return "".join(codes) + text + _RESET


@dataclass
class Column:
    title: str
    width: int


def _cell(value: str, width: int) -> str:
    if len(value) > width:
        value = value[: width - 1] + _ELLIPSIS if width > 0 else ""
    return " " + value.ljust(width) + " "


class Table:
    """Rows of string cells under column headers, ``height`` lines tall."""

    def __init__(
        self,
        columns: Iterable[Column],
        rows: Iterable[Sequence[str]] | None = None,
        height: int = 10,
        focused: bool = True,
        styled: bool = True,
    ) -> None:
        self.columns = list(columns)
        self.rows: list[list[str]] = []
        self.height = height
        self.focused = focused
        self.styled = styled
        self.cursor = 0
        self._offset = 0
        if rows is not None:
            self.set_rows(rows)

    @property
    def visible_rows(self) -> int:
        """Number of body rows shown below the header."""
        return max(self.height - 1, 1)

    @property
    def selected_row(self) -> list[str] | None:
        return self.rows[self.cursor] if self.rows else None

    def set_rows(self, rows: Iterable[Sequence[str]]) -> None:
        self.rows = [list(row) for row in rows]
        self.set_cursor(self.cursor)

    def set_columns(self, columns: Iterable[Column]) -> None:
        self.columns = list(columns)

    def set_cursor(self, cursor: int) -> None:
        """Move the cursor, clamped to the existing rows."""
        self.cursor = min(max(cursor, 0), max(len(self.rows) - 1, 0))
        if self.cursor < self._offset:
            self._offset = self.cursor
        elif self.cursor >= self._offset + self.visible_rows:
            self._offset = self.cursor - self.visible_rows + 1
        self._offset = max(min(self._offset, len(self.rows) - self.visible_rows), 0)

    def move_cursor(self, delta: int) -> None:
        self.set_cursor(self.cursor + delta)

    def goto_bottom(self) -> None:
        self.set_cursor(len(self.rows) - 1)

    def handle_key(self, key: str) -> bool:
        """Apply a navigation key; return True if the key was one."""
        if not self.focused:
            return False
        page = self.visible_rows
        half = max(page // 2, 1)
        deltas = {
            "up": -1, "k": -1,
            "down": 1, "j": 1,
            "pgup": -page, "b": -page,
            "pgdown": page, "f": page, " ": page,
            "u": -half, "ctrl+u": -half,
            "d": half, "ctrl+d": half,
        }
        if key in ("home", "g"):
            self.set_cursor(0)
        elif key in ("end", "G"):
            self.goto_bottom()
        elif key in deltas:
            self.move_cursor(deltas[key])
        else:
            return False
        return True

    def view(self) -> str:
        """Render the header and the visible window of rows."""
        header = "".join(_cell(column.title, column.width) for column in self.columns)
        lines = [_paint(header, bold=True) if self.styled else header]
        window = self.rows[self._offset : self._offset + self.visible_rows]
        for position, row in enumerate(window, start=self._offset):
            text = "".join(_cell(value, column.width) for value, column in zip(row, self.columns))
            if position == self.cursor and self.styled:
                text = _paint(text, bold=True, fg=SELECTED_FOREGROUND, bg=SELECTED_BACKGROUND)
            lines.append(text)
        lines.extend([""] * (self.visible_rows - len(window)))
        return "\n".join(lines)