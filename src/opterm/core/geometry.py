"""Screen geometry and cursor position."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ScreenGeometry:
    """Visible terminal dimensions in character cells."""
    rows: int
    cols: int

    def __post_init__(self) -> None:
        if self.rows <= 0 or self.cols <= 0:
            raise ValueError(f"Screen geometry must be positive, got {self.rows}x{self.cols}")

    @classmethod
    def parse(cls, text: str) -> ScreenGeometry:
        """Parse a 'ROWSxCOLS' string, e.g. '24x80'."""
        rows, sep, cols = text.strip().lower().partition("x")
        if not sep:
            raise ValueError(f"Invalid geometry {text!r}, expected ROWSxCOLS")
        try:
            return cls(int(rows), int(cols))
        except ValueError as e:
            raise ValueError(f"Invalid geometry {text!r}: {e}") from None

    def __str__(self) -> str:
        return f"{self.rows}x{self.cols}"


@dataclass(frozen=True)
class CursorPosition:
    """Cursor location, 0-indexed."""
    row: int = 0
    col: int = 0

    def clamp(self, geometry: ScreenGeometry) -> CursorPosition:
        """Return this position constrained to the visible screen."""
        return CursorPosition(
            max(0, min(self.row, geometry.rows - 1)),
            max(0, min(self.col, geometry.cols - 1)),
        )

    def to_wire(self) -> tuple[int, int]:
        """1-indexed (row, col) as used in cursor movement sequences."""
        return self.row + 1, self.col + 1
