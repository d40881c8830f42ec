import base64
import io

import pytest

from snapdiff.clip import ClipPanel, NOT_SET, copy_to_clipboard


def _payload(written):
    assert written.startswith("\x1b]52;c;")
    assert written.endswith("\x07")
    return base64.b64decode(written[len("\x1b]52;c;") : -1]).decode("utf-8")


def test_initial_view_lists_unset_entries():
    text = ClipPanel(styled=False).view()
    assert "[1] not set" in text
    assert "[3] not set" in text
    assert text.startswith("\n\n")


def test_update_paths_shows_in_view():
    panel = ClipPanel(styled=False)
    panel.update_paths("/mnt/a", "/mnt/b", "/home/c")
    text = panel.view()
    assert "[1] /mnt/a\n" in text
    assert "[2] /mnt/b\n" in text
    assert "[3] /home/c\n" in text


@pytest.mark.parametrize("key,expected", [("1", 1), ("2", 2), ("3", 3), ("4", None), ("q", None)])
def test_handle_key(key, expected):
    assert ClipPanel().handle_key(key) == expected


def test_copy_to_clipboard_round_trip():
    stream = io.StringIO()
    copy_to_clipboard("/home/user/ünïcode", stream)
    assert _payload(stream.getvalue()) == "/home/user/ünïcode"


def test_blink_copies_selected_entry():
    stream = io.StringIO()
    panel = ClipPanel(stream=stream, styled=False)
    panel.update_paths("first", "second", "third")
    panel.start_blink(2)
    assert panel.active_index == 2
    assert panel.finish_blink() == "second"
    assert panel.active_index is None
    assert _payload(stream.getvalue()) == "second"


def test_finish_without_blink_copies_nothing():
    stream = io.StringIO()
    panel = ClipPanel(stream=stream)
    assert panel.finish_blink() is None
    assert stream.getvalue() == ""


@pytest.mark.parametrize("index", [0, 4])
def test_start_blink_rejects_out_of_range(index):
    with pytest.raises(ValueError):
        ClipPanel().start_blink(index)


def test_styled_view_marks_blinking_row_bold():
    panel = ClipPanel(stream=io.StringIO())
    panel.start_blink(1)
    lines = panel.view().strip("\n").split("\n")
    assert lines[0].startswith("\x1b[1m")
    assert not lines[1].startswith("\x1b[1m")
    assert f"[2] {NOT_SET}" in lines[1]


def test_debug_view_reports_active_index():
    panel = ClipPanel(styled=False, debug=True)
    panel.start_blink(3)
    text = panel.view()
    assert "DEBUG" in text
    assert "\n\n3" in text