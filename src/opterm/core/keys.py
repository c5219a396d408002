"""Semantic key events decoded from raw terminal input."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional

from opterm.core.constants import DEL_BYTE


class Direction(Enum):
    """Arrow key directions."""
    UP = auto()
    DOWN = auto()
    LEFT = auto()
    RIGHT = auto()


class KeyKind(Enum):
    """Kinds of key events."""
    PRINTABLE = auto()
    CONTROL = auto()
    ARROW = auto()
    ESCAPE = auto()      # Bare escape with no recognized trailing sequence
    WOULD_BLOCK = auto() # No input within the idle timeout
    EOF = auto()


def ctrl_key(ch: str) -> int:
    """Byte sent by Ctrl+<ch>, e.g. ctrl_key('q') == 0x11."""
    return ord(ch) & 0x1F


def is_control_byte(byte: int) -> bool:
    """True for C0 control bytes and DEL."""
    return byte < 0x20 or byte == DEL_BYTE


@dataclass(frozen=True)
class KeyEvent:
    """Represents a keyboard input event."""
    kind: KeyKind
    byte: Optional[int] = None            # For PRINTABLE and CONTROL
    direction: Optional[Direction] = None # For ARROW
    raw: bytes = b""                      # Bytes consumed for this event

    @classmethod
    def printable(cls, byte: int) -> KeyEvent:
        return cls(KeyKind.PRINTABLE, byte=byte, raw=bytes([byte]))

    @classmethod
    def control(cls, byte: int) -> KeyEvent:
        return cls(KeyKind.CONTROL, byte=byte, raw=bytes([byte]))

    @classmethod
    def arrow(cls, direction: Direction, raw: bytes = b"") -> KeyEvent:
        return cls(KeyKind.ARROW, direction=direction, raw=raw)

    @classmethod
    def escape(cls, raw: bytes = b"\x1b") -> KeyEvent:
        return cls(KeyKind.ESCAPE, raw=raw)

    @property
    def char(self) -> Optional[str]:
        """Character for printable ASCII events."""
        if self.kind is KeyKind.PRINTABLE and self.byte is not None and self.byte < 0x80:
            return chr(self.byte)
        return None

    def is_ctrl(self, ch: str) -> bool:
        """Check if this is Ctrl+<ch>."""
        return self.kind is KeyKind.CONTROL and self.byte == ctrl_key(ch)


WOULD_BLOCK = KeyEvent(KeyKind.WOULD_BLOCK)
