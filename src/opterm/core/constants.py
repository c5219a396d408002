"""Control sequences emitted to and parsed from the terminal."""

# ANSI escape sequences
ESC = b"\x1b"
CSI = ESC + b"["

HIDE_CURSOR = CSI + b"?25l"
SHOW_CURSOR = CSI + b"?25h"
CURSOR_HOME = CSI + b"H"
ERASE_LINE = CSI + b"K"           # Erase from cursor to end of line
CLEAR_SCREEN = CSI + b"2J"

# Cursor forward/down are clamped at the screen edge, so a large count
# lands on the bottom-right cell of any plausible terminal.
FAR_MOVE = 999
REQUEST_POSITION_REPORT = CSI + b"6n"
POSITION_REPORT_END = b"R"

ROW_BREAK = b"\r\n"

# Byte values
ESC_BYTE = 0x1B
BRACKET_BYTE = 0x5B  # '['
DEL_BYTE = 0x7F


def move_cursor(row: int, col: int) -> bytes:
    """Move cursor to position (1-indexed)."""
    return CSI + f"{row};{col}H".encode("ascii")


def cursor_far_bottom_right(count: int = FAR_MOVE) -> bytes:
    """Move right then down by count cells, clamped at the screen edge."""
    return CSI + f"{count}C".encode("ascii") + CSI + f"{count}B".encode("ascii")


CURSOR_FAR_BOTTOM_RIGHT = cursor_far_bottom_right()
