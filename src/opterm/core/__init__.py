"""Core value types, wire constants and errors."""

from opterm.core.errors import DeviceError, EndOfStream, ProtocolError, TerminalError
from opterm.core.geometry import CursorPosition, ScreenGeometry
from opterm.core.keys import Direction, KeyEvent, KeyKind, ctrl_key

__all__ = [
    "CursorPosition",
    "DeviceError",
    "Direction",
    "EndOfStream",
    "KeyEvent",
    "KeyKind",
    "ProtocolError",
    "ScreenGeometry",
    "TerminalError",
    "ctrl_key",
]
