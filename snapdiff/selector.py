"""Choosing the two snapshots to compare."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, TextIO

from snapdiff.compare import CompareView
from snapdiff.keys import render_help, selector_keymap
from snapdiff.snapshots import Snapshot, SnapshotError, SnapshotsMetadata
from snapdiff.table import Column, Table
from snapdiff.tree import DirData, get_dir_entries

TABLE_HEIGHT = 10
SPINNER_FRAMES = ("|", "/", "-", "\\")
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
_NEWER_MARK = "1"
_OLDER_MARK = "2"
_UNMARKED = " "


def load_entries(newer_path: str, older_path: str) -> tuple[DirData, DirData]:
    """Read both snapshot directories concurrently."""
    with ThreadPoolExecutor(max_workers=2) as pool:
        newer_future = pool.submit(get_dir_entries, newer_path)
        older_future = pool.submit(get_dir_entries, older_path)
        newer = newer_future.result()
        older = older_future.result()
    if newer is None:
        raise SnapshotError(f"Failed to get new entries: cannot read {newer_path!r}")
    if older is None:
        raise SnapshotError(f"Failed to get old entries: cannot read {older_path!r}")
    return newer, older


def _columns() -> list[Column]:
    return [Column(" ", 1), Column("ID", 12), Column("DATE", 22), Column("SIZE", 12)]


class SelectorView:
    """Snapshot list in which a newer and then an older snapshot are marked.

    ``handle_key`` returns the view to show next: this one or None to quit.
    Once both snapshots are accepted ``waiting`` is set, and
    ``load_snapshots`` builds the comparison view.
    """

    def __init__(
        self,
        snapshots: Iterable[Snapshot],
        stream: TextIO | None = None,
        styled: bool = True,
    ) -> None:
        self.snapshots = list(snapshots)
        self.keymap = selector_keymap()
        self.snapshot_new: int | None = None
        self.snapshot_old: int | None = None
        self.waiting = False
        self.show_all = False
        self.width = 0
        self.height = 0
        self.stream = stream
        self.styled = styled
        self._frame = 0
        self.table = Table(_columns(), height=TABLE_HEIGHT, focused=True, styled=styled)
        self.table.set_rows(self.update_rows())
        self.table.goto_bottom()

    def update_rows(self) -> list[list[str]]:
        """Table rows; once a newer snapshot is marked, later ones are hidden."""
        rows = []
        for index, snapshot in enumerate(self.snapshots):
            if self.snapshot_new is not None and index > self.snapshot_new:
                break
            if index == self.snapshot_new:
                mark = _NEWER_MARK
            elif index == self.snapshot_old:
                mark = _OLDER_MARK
            else:
                mark = _UNMARKED
            rows.append([mark, snapshot.id, snapshot.date.strftime(_DATE_FORMAT), snapshot.size_str])
        return rows

    def resize(self, width: int, height: int) -> None:
        self.width = width
        self.height = height

    def handle_key(self, key: str) -> SelectorView | None:
        """Apply a key press and return the view that is active afterwards."""
        if self.keymap["quit"].matches(key):
            return None
        if self.keymap["help"].matches(key):
            self.show_all = not self.show_all
            return self
        if self.keymap["select"].matches(key):
            cursor = self.table.cursor
            if self.snapshot_new is None:
                self.snapshot_new = cursor
                self.table.set_rows(self.update_rows())
                self.table.goto_bottom()
            elif cursor < self.snapshot_new:
                self.snapshot_old = cursor
                self.table.set_rows(self.update_rows())
            return self
        if self.keymap["clear"].matches(key):
            self.snapshot_new = None
            self.snapshot_old = None
            self.table.set_rows(self.update_rows())
            return self
        if self.keymap["accept"].matches(key):
            if self.snapshot_new is not None and self.snapshot_old is not None:
                self.waiting = True
            return self
        self.table.handle_key(key)
        return self

    def load_snapshots(self) -> CompareView:
        """Read both marked snapshots and build the comparison view."""
        if self.snapshot_new is None or self.snapshot_old is None:
            raise SnapshotError("two snapshots must be selected")
        newer = self.snapshots[self.snapshot_new]
        older = self.snapshots[self.snapshot_old]
        metadata = SnapshotsMetadata(
            newer_full_path=newer.path,
            newer_id=newer.id,
            older_full_path=older.path,
            older_id=older.id,
        )
        try:
            newer_dir, older_dir = load_entries(newer.path, older.path)
        finally:
            self.waiting = False
        return CompareView(
            self.width,
            self.height,
            newer_dir,
            older_dir,
            metadata,
            stream=self.stream,
            styled=self.styled,
        )

    def view(self) -> str:
        parts = [self.table.view(), "\n"]
        if self.snapshot_new is not None:
            parts.append(f"\n[1] {self.snapshots[self.snapshot_new].path}")
        if self.snapshot_old is not None:
            parts.append(f"\n[2] {self.snapshots[self.snapshot_old].path}")
        if self.waiting:
            frame = SPINNER_FRAMES[self._frame % len(SPINNER_FRAMES)]
            self._frame += 1
            parts.append(f"\n\n{frame} Loading repositories\n")
        parts.append("\n")
        parts.append(render_help(self.keymap, self.show_all))
        return "".join(parts)