"""Flicker-free full screen rendering.

A frame is accumulated into one buffer and flushed with a single write.
Rows are overwritten in place (home, draw, erase to end of line) rather
than clearing the screen first, so the terminal never shows a blank or
half-drawn screen.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

from opterm.core.constants import (
    CLEAR_SCREEN,
    CURSOR_HOME,
    ERASE_LINE,
    HIDE_CURSOR,
    ROW_BREAK,
    SHOW_CURSOR,
    move_cursor,
)
from opterm.core.geometry import CursorPosition, ScreenGeometry

if TYPE_CHECKING:
    from opterm.terminal.stream import ByteSink


class OutputBuffer:
    """Growable byte buffer for a single frame."""

    def __init__(self) -> None:
        # bytearray over-allocates on growth, so appends are amortized O(1)
        self._data = bytearray()

    def append(self, data: bytes) -> OutputBuffer:
        self._data += data
        return self

    def extend_text(self, text: str) -> OutputBuffer:
        """Append text encoded as UTF-8."""
        self._data += text.encode("utf-8", errors="replace")
        return self

    def getvalue(self) -> bytes:
        return bytes(self._data)

    def __len__(self) -> int:
        return len(self._data)


class FrameCompositor:
    """Builds and writes whole frames to a terminal sink."""

    def __init__(self, sink: ByteSink, filler: str = "~") -> None:
        self.sink = sink
        self.filler = filler

    def compose(
        self,
        geometry: ScreenGeometry,
        cursor: CursorPosition,
        content_rows: Sequence[str] = (),
    ) -> bytes:
        """Build the byte image of one frame."""
        buf = OutputBuffer()
        buf.append(HIDE_CURSOR).append(CURSOR_HOME)

        for y in range(geometry.rows):
            if y < len(content_rows):
                buf.extend_text(content_rows[y][:geometry.cols])
            else:
                buf.extend_text(self.filler)
            buf.append(ERASE_LINE)
            # No break after the last row, or the terminal scrolls
            if y < geometry.rows - 1:
                buf.append(ROW_BREAK)

        row, col = cursor.clamp(geometry).to_wire()
        buf.append(move_cursor(row, col))
        buf.append(SHOW_CURSOR)
        return buf.getvalue()

    def render(
        self,
        geometry: ScreenGeometry,
        cursor: CursorPosition,
        content_rows: Sequence[str] = (),
    ) -> None:
        """Compose a frame and flush it with exactly one write."""
        self.sink.write_all(self.compose(geometry, cursor, content_rows))

    def clear_screen(self) -> None:
        """Clear the screen and home the cursor."""
        self.sink.write_all(CLEAR_SCREEN + CURSOR_HOME)
