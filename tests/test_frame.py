"""Tests for single-write frame composition."""

from opterm.core.constants import CLEAR_SCREEN, CURSOR_HOME, ERASE_LINE, HIDE_CURSOR, SHOW_CURSOR
from opterm.core.geometry import CursorPosition, ScreenGeometry
from opterm.render.frame import FrameCompositor, OutputBuffer

from conftest import RecordingSink


def compose(rows: int, cols: int, cursor: CursorPosition = CursorPosition(), content=()) -> bytes:
    return FrameCompositor(RecordingSink()).compose(ScreenGeometry(rows, cols), cursor, content)


class TestOutputBuffer:
    """Tests for OutputBuffer."""

    def test_append_and_text(self) -> None:
        buf = OutputBuffer()
        buf.append(b"\x1b[H").extend_text("héllo")
        assert buf.getvalue() == b"\x1b[Hh\xc3\xa9llo"
        assert len(buf) == 9


class TestCompose:
    """Frame layout."""

    def test_empty_content_fills_rows(self) -> None:
        frame = compose(3, 10)
        expected = (
            HIDE_CURSOR + CURSOR_HOME
            + b"~" + ERASE_LINE + b"\r\n"
            + b"~" + ERASE_LINE + b"\r\n"
            + b"~" + ERASE_LINE
            + b"\x1b[1;1H" + SHOW_CURSOR
        )
        assert frame == expected
        assert frame.count(b"~" + ERASE_LINE) == 3
        assert frame.count(b"\r\n") == 2

    def test_no_break_after_last_row(self) -> None:
        frame = compose(5, 10)
        body = frame[: frame.index(b"\x1b[1;1H")]
        assert not body.endswith(b"\r\n")

    def test_content_then_filler(self) -> None:
        frame = compose(3, 20, content=["hello", "world"])
        assert b"hello" + ERASE_LINE + b"\r\nworld" + ERASE_LINE + b"\r\n~" + ERASE_LINE in frame

    def test_truncates_long_rows(self) -> None:
        frame = compose(1, 10, content=["abcdefghijklmnop"])
        assert b"abcdefghij" + ERASE_LINE in frame
        assert b"k" not in frame

    def test_extra_content_rows_ignored(self) -> None:
        frame = compose(2, 10, content=["one", "two", "three"])
        assert b"three" not in frame

    def test_cursor_is_one_indexed(self) -> None:
        frame = compose(24, 80, CursorPosition(4, 7))
        assert frame.endswith(b"\x1b[5;8H" + SHOW_CURSOR)

    def test_cursor_clamped_to_screen(self) -> None:
        frame = compose(3, 10, CursorPosition(50, 50))
        assert frame.endswith(b"\x1b[3;10H" + SHOW_CURSOR)

    def test_custom_filler(self) -> None:
        frame = FrameCompositor(RecordingSink(), filler=".").compose(
            ScreenGeometry(2, 5), CursorPosition()
        )
        assert frame.count(b"." + ERASE_LINE) == 2


class TestRender:
    """Output discipline."""

    def test_single_write_per_frame(self) -> None:
        sink = RecordingSink()
        FrameCompositor(sink).render(ScreenGeometry(24, 80), CursorPosition(), ["x"] * 10)
        assert len(sink.writes) == 1
        assert sink.writes[0].startswith(HIDE_CURSOR)

    def test_clear_screen(self) -> None:
        sink = RecordingSink()
        FrameCompositor(sink).clear_screen()
        assert sink.writes == [CLEAR_SCREEN + CURSOR_HOME]
