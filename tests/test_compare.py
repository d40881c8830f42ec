import io
import os

import pytest

from snapdiff.compare import (
    MAX_COL_SIZE,
    MISSING,
    VIEWPORT_HEIGHT,
    CompareView,
    Row,
    create_rows,
    generate_table_rows,
    render_size_path,
)
from snapdiff.sizes import format_bytes
from snapdiff.snapshots import SnapshotsMetadata
from snapdiff.tree import DirData

NEW_ROOT = os.path.join(os.sep, "mnt", "snapshots", "new")
OLD_ROOT = os.path.join(os.sep, "mnt", "snapshots", "old")

METADATA = SnapshotsMetadata(
    newer_full_path=NEW_ROOT,
    newer_id="aaaa1111",
    older_full_path=OLD_ROOT,
    older_id="bbbb2222",
)


def _file(root, rel, size):
    return DirData(
        path=os.path.join(root, rel),
        path_readable=os.path.basename(rel),
        size=size,
        size_readable=format_bytes(size),
    )


def _dir(root, rel, children):
    size = sum(child.size for child in children)
    return DirData(
        path=os.path.join(root, rel) if rel else root,
        path_readable="/" + (os.path.basename(rel) if rel else os.path.basename(root)),
        size=size,
        size_readable=format_bytes(size),
        is_dir=True,
        children=list(children),
    )


def _trees():
    new = _dir(
        NEW_ROOT,
        "",
        [
            _file(NEW_ROOT, "same.txt", 100),
            _file(NEW_ROOT, "grown.txt", 5000),
            _file(NEW_ROOT, "added.txt", 300),
            _dir(NEW_ROOT, "sub", [_file(NEW_ROOT, "sub/inner.txt", 50)]),
        ],
    )
    old = _dir(
        OLD_ROOT,
        "",
        [
            _file(OLD_ROOT, "same.txt", 100),
            _file(OLD_ROOT, "grown.txt", 1000),
            _file(OLD_ROOT, "removed.txt", 700),
            _dir(OLD_ROOT, "sub", [_file(OLD_ROOT, "sub/inner.txt", 20)]),
        ],
    )
    return new, old


def _view(width=100):
    new, old = _trees()
    return CompareView(width, 40, new, old, METADATA, stream=io.StringIO(), styled=False)


def test_create_rows_pairs_and_sorts():
    new, old = _trees()
    rows = create_rows(new, old, METADATA)
    assert len(rows) == 5
    diffs = [row.diff for row in rows]
    assert diffs == sorted(diffs, reverse=True)
    for row in rows:
        assert row.abs_diff == abs(row.diff)


def test_create_rows_common_entry_diff():
    new, old = _trees()
    rows = create_rows(new, old, METADATA)
    grown = next(row for row in rows if row.dir_a.path_readable == "grown.txt")
    assert grown.dir_b.path == os.path.join(OLD_ROOT, "grown.txt")
    assert grown.diff == 5000 - 1000


def test_create_rows_missing_entries_use_placeholder():
    new, old = _trees()
    rows = create_rows(new, old, METADATA)
    added = next(row for row in rows if row.dir_a.path_readable == "added.txt")
    assert added.dir_b.path == MISSING
    assert added.diff == 300
    removed = next(row for row in rows if row.dir_b.path_readable == "removed.txt")
    assert removed.dir_a.path == MISSING
    assert removed.diff == -700
    assert removed.abs_diff == 700
    assert rows[-1] is removed


def test_render_size_path_aligns():
    text = render_size_path("5 B", "name", MAX_COL_SIZE)
    assert text.endswith("5 B name")
    assert len(text) == MAX_COL_SIZE + len(" name")


def test_render_size_path_too_long():
    with pytest.raises(ValueError):
        render_size_path("1234567", "x", MAX_COL_SIZE)


def test_generate_table_rows_signs():
    new, old = _trees()
    rows = [
        Row(dir_a=_file(NEW_ROOT, "a", 10), dir_b=_file(OLD_ROOT, "a", 4), diff=6, abs_diff=6),
        Row(dir_a=_file(NEW_ROOT, "b", 2), dir_b=_file(OLD_ROOT, "b", 9), diff=-7, abs_diff=7),
    ]
    table = generate_table_rows(rows)
    assert table[0][2] == "+" + format_bytes(6)
    assert table[1][2] == "-" + format_bytes(7)
    assert table[0][0].endswith(" a")
    assert table[1][1].endswith(" b")


def test_generate_table_rows_rejects_wide_size():
    bad = DirData(path="/x", path_readable="x", size=1, size_readable="far too wide")
    rows = [Row(dir_a=bad, dir_b=bad, diff=0, abs_diff=0)]
    with pytest.raises(ValueError):
        generate_table_rows(rows)


def test_resize_sets_titles_and_widths():
    view = _view(width=97)
    titles = [column.title for column in view.table.columns]
    assert titles[0] == "--- New (aaaa1111) ---"
    assert titles[1] == "--- Old (bbbb2222) ---"
    assert titles[2] == "---  Diff ---"
    widths = [column.width for column in view.table.columns]
    assert sum(widths) == 97
    assert widths[0] <= widths[1]
    assert view.table.height == VIEWPORT_HEIGHT


def test_initial_clipboard_paths_follow_cursor():
    view = _view()
    first = view.rows[0]
    assert view.clip.rows[0] == first.dir_a.path
    assert view.clip.rows[1] == first.dir_b.path
    assert view.clip.rows[2] == "/" + first.dir_a.path_readable


def test_cursor_move_updates_clipboard():
    view = _view()
    assert view.handle_key("down") is view
    assert view.table.cursor == 1
    assert view.clip.rows[0] == view.rows[1].dir_a.path


def test_clipboard_paths_for_entry_only_in_older():
    view = _view()
    view.table.goto_bottom()
    newer, older, inside = view.clipboard_paths()
    assert newer == MISSING
    assert older == os.path.join(OLD_ROOT, "removed.txt")
    assert inside == "/removed.txt"


def test_quit_returns_none():
    view = _view()
    assert view.handle_key("q") is None
    assert view.handle_key("ctrl+c") is None


def test_help_toggle():
    view = _view()
    short = view.view()
    assert view.handle_key("?") is view
    assert view.show_all is True
    assert "toggle help" in view.view()
    assert "toggle help" not in short


def test_open_file_stays():
    view = _view()
    view.table.set_cursor(0)
    assert view.handle_key("enter") is view


def test_open_directory_and_go_back():
    view = _view()
    index = next(i for i, row in enumerate(view.rows) if row.dir_a.path_readable == "/sub")
    view.table.set_cursor(index)
    child = view.handle_key("l")
    assert isinstance(child, CompareView)
    assert child is not view
    assert child.previous is view
    assert len(child.rows) == 1
    assert child.rows[0].diff == 50 - 20
    assert child.handle_key("h") is view


def test_back_at_top_level_stays():
    view = _view()
    assert view.handle_key("backspace") is view


def test_copy_key_blinks_and_copies():
    stream = io.StringIO()
    new, old = _trees()
    view = CompareView(100, 40, new, old, METADATA, stream=stream, styled=False)
    assert view.handle_key("3") is view
    assert view.clip.active_index == 3
    copied = view.clip.finish_blink()
    assert copied == view.clipboard_paths()[2]
    assert stream.getvalue().startswith("\x1b]52;c;")


def test_view_contains_rows_and_clip_panel():
    view = _view()
    text = view.view()
    assert "[1] " + view.rows[0].dir_a.path in text
    assert "grown.txt" in text
    assert "Open" in text


def test_empty_directories():
    new = _dir(NEW_ROOT, "", [])
    old = _dir(OLD_ROOT, "", [])
    view = CompareView(80, 24, new, old, METADATA, stream=io.StringIO(), styled=False)
    assert view.rows == []
    assert view.clipboard_paths() is None
    assert view.handle_key("enter") is view