"""Minimal full-screen program: filler rows, a movable cursor, Ctrl-Q to quit."""

from __future__ import annotations

from opterm import __version__
from opterm.core.geometry import CursorPosition, ScreenGeometry
from opterm.core.keys import Direction, KeyEvent, KeyKind
from opterm.terminal.context import TerminalContext

# Cursor deltas for arrow keys
_MOVES: dict[Direction, tuple[int, int]] = {
    Direction.UP: (-1, 0),
    Direction.DOWN: (1, 0),
    Direction.LEFT: (0, -1),
    Direction.RIGHT: (0, 1),
}


def welcome_rows(geometry: ScreenGeometry, filler: str = "~") -> list[str]:
    """Content rows with a centered banner a third of the way down."""
    banner = f"opterm -- version {__version__}"[:geometry.cols]
    row = geometry.rows // 3
    padding = (geometry.cols - len(banner)) // 2
    rows = [filler] * row
    if padding:
        rows.append(filler + " " * (padding - 1) + banner)
    else:
        rows.append(banner)
    return rows[:geometry.rows]


class ScreenApp:
    """
    Interactive screen loop.

    Render a frame, block for one key event, update state, repeat.
    """

    def __init__(self, term: TerminalContext, show_banner: bool = True) -> None:
        self.term = term
        self.show_banner = show_banner
        self.cursor = CursorPosition()
        self.running = False

    def run(self) -> None:
        """Main application loop."""
        self.running = True
        while self.running:
            self.render()
            self.handle_event(self.term.wait_event())

    def render(self) -> None:
        geometry = self.term.geometry
        filler = self.term.config.filler
        rows = welcome_rows(geometry, filler) if self.show_banner else []
        self.term.render(self.cursor, rows)

    def handle_event(self, event: KeyEvent) -> None:
        """Apply one key event to the application state."""
        if event.kind is KeyKind.EOF:
            self.running = False
        elif event.kind is KeyKind.CONTROL and event.byte == self.term.config.quit_key:
            self.running = False
        elif event.kind is KeyKind.ARROW and event.direction is not None:
            dy, dx = _MOVES[event.direction]
            moved = CursorPosition(self.cursor.row + dy, self.cursor.col + dx)
            self.cursor = moved.clamp(self.term.geometry)
