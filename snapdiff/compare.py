"""Side-by-side comparison of one directory in two snapshots."""

from __future__ import annotations

import math
import os
from dataclasses import dataclass
from typing import TextIO

from snapdiff.clip import ClipPanel
from snapdiff.keys import compare_keymap, render_help
from snapdiff.sizes import format_bytes
from snapdiff.snapshots import SnapshotsMetadata
from snapdiff.table import Column, Table
from snapdiff.tree import DirData

MAX_COL_SIZE = 6
VIEWPORT_HEIGHT = 12
MISSING = "???"


@dataclass
class Row:
    """One entry present in the newer snapshot, the older one, or both."""

    dir_a: DirData
    dir_b: DirData
    diff: int
    abs_diff: int


def _placeholder() -> DirData:
    return DirData(path=MISSING, path_readable=MISSING, size=0)


def create_rows(dir_a: DirData, dir_b: DirData, metadata: SnapshotsMetadata) -> list[Row]:
    """Pair the children of both directories by their path inside the snapshot.

    Entries found on only one side are paired with a ``???`` placeholder.
    Rows are ordered by size difference, largest growth first.
    """
    newer = {os.path.relpath(child.path, metadata.newer_full_path): child for child in dir_a.children}
    older = {os.path.relpath(child.path, metadata.older_full_path): child for child in dir_b.children}
    missing = _placeholder()

    rows = []
    for path, a in newer.items():
        b = older.get(path)
        if b is not None:
            diff = a.size - b.size
            rows.append(Row(dir_a=a, dir_b=b, diff=diff, abs_diff=abs(diff)))
        else:
            rows.append(Row(dir_a=a, dir_b=missing, diff=a.size, abs_diff=abs(a.size)))
    for path, b in older.items():
        if path in newer:
            continue
        rows.append(Row(dir_a=missing, dir_b=b, diff=-b.size, abs_diff=abs(b.size)))

    rows.sort(key=lambda row: row.diff, reverse=True)
    return rows


def render_size_path(size: str, path: str, width: int) -> str:
    """Right-align ``size`` in ``width`` characters and append ``path``."""
    if len(size) > width:
        raise ValueError(f"column is too short to fit string {size}")
    return size.rjust(width) + " " + path


def generate_table_rows(rows: list[Row]) -> list[list[str]]:
    """Render rows as the newer, older and difference table cells."""
    table_rows = []
    for row in rows:
        sign = "-" if row.diff < 0 else "+"
        diff_str = sign + format_bytes(row.abs_diff)
        try:
            newer = render_size_path(row.dir_a.size_readable, row.dir_a.path_readable, MAX_COL_SIZE)
        except ValueError as exc:
            raise ValueError(f"can't generate table row for newer entry: {exc}") from exc
        try:
            older = render_size_path(row.dir_b.size_readable, row.dir_b.path_readable, MAX_COL_SIZE)
        except ValueError as exc:
            raise ValueError(f"can't generate table row for older entry: {exc}") from exc
        table_rows.append([newer, older, diff_str])
    return table_rows


class CompareView:
    """Table of differences between a directory in two snapshots.

    ``handle_key`` returns the view to show next: this one, a child view
    for a subdirectory, the parent view, or None to quit.
    """

    def __init__(
        self,
        width: int,
        height: int,
        dir_new: DirData,
        dir_old: DirData,
        metadata: SnapshotsMetadata,
        previous: CompareView | None = None,
        stream: TextIO | None = None,
        styled: bool = True,
    ) -> None:
        self.previous = previous
        self.metadata = metadata
        self.keymap = compare_keymap()
        self.clip = ClipPanel(stream=stream, styled=styled)
        self.show_all = False
        self.styled = styled
        self.width = width
        self.height = height
        self.rows = create_rows(dir_new, dir_old, metadata)
        self.table = Table(
            [Column("New", 20), Column("Old", 20), Column("Diff", 10)],
            height=VIEWPORT_HEIGHT,
            focused=True,
            styled=styled,
        )
        self._update_table(-1)
        self.resize(width, height)
        self._refresh_clipboard()

    def _update_table(self, cursor: int) -> None:
        self.table.set_rows(generate_table_rows(self.rows))
        self.table.set_cursor(cursor)

    def _current_row(self) -> Row | None:
        if not self.rows:
            return None
        return self.rows[self.table.cursor]

    def _refresh_clipboard(self) -> None:
        paths = self.clipboard_paths()
        if paths is not None:
            self.clip.update_paths(*paths)

    def resize(self, width: int, height: int) -> None:
        """Adapt the column widths to a terminal of the given size."""
        self.width = width
        self.height = height
        first = math.floor(width * 0.4)
        second = math.ceil(width * 0.4)
        third = width - first - second
        self.table.set_columns(
            [
                Column(f"--- New ({self.metadata.newer_id}) ---", first),
                Column(f"--- Old ({self.metadata.older_id}) ---", second),
                Column("---  Diff ---", third),
            ]
        )
        self.table.height = VIEWPORT_HEIGHT
        self._update_table(self.table.cursor)

    def handle_key(self, key: str) -> CompareView | None:
        """Apply a key press and return the view that is active afterwards."""
        if self.keymap["quit"].matches(key):
            return None
        if self.keymap["help"].matches(key):
            self.show_all = not self.show_all
            return self
        if self.keymap["next_dir"].matches(key):
            row = self._current_row()
            if row is None or not row.dir_a.children:
                return self
            return CompareView(
                self.width,
                self.height,
                row.dir_a,
                row.dir_b,
                self.metadata,
                previous=self,
                stream=self.clip.stream,
                styled=self.styled,
            )
        if self.keymap["prev_dir"].matches(key) and self.previous is not None:
            self.previous.resize(self.width, self.height)
            return self.previous

        old_cursor = self.table.cursor
        self.table.handle_key(key)
        if self.table.cursor != old_cursor:
            self._refresh_clipboard()

        index = self.clip.handle_key(key)
        if index is not None:
            self.clip.start_blink(index)
        return self

    def clipboard_paths(self) -> tuple[str, str, str] | None:
        """Paths of the selected entry: newer, older, and inside the backup.

        Returns None when there is no entry to select.
        """
        row = self._current_row()
        if row is None:
            return None
        newer_path = row.dir_a.path
        older_path = row.dir_b.path
        user_root = self.metadata.newer_full_path
        valid_path = newer_path
        if valid_path == MISSING:
            valid_path = older_path
            user_root = self.metadata.older_full_path
        relative = os.path.relpath(valid_path, user_root)
        return newer_path, older_path, "/" + relative

    def view(self) -> str:
        parts = [
            self.table.view(),
            "\n\n",
            self.clip.view(),
            "\n",
            render_help(self.keymap, self.show_all),
        ]
        return "".join(parts)