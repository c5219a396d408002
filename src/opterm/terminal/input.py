"""Keyboard input decoding with escape sequence disambiguation."""

from __future__ import annotations

import logging
import time
from enum import Enum, auto
from typing import Iterator

from opterm.core.constants import BRACKET_BYTE, ESC_BYTE
from opterm.core.errors import EndOfStream
from opterm.core.keys import (
    WOULD_BLOCK,
    Direction,
    KeyEvent,
    KeyKind,
    is_control_byte,
)
from opterm.terminal.stream import ByteSource

logger = logging.getLogger(__name__)


class DecoderState(Enum):
    """Escape sequence recognizer states."""
    IDLE = auto()
    SAW_ESCAPE = auto()
    SAW_ESCAPE_BRACKET = auto()
    DONE = auto()


# Final byte of ESC [ <final> -> direction
ARROWS: dict[int, Direction] = {
    ord("A"): Direction.UP,
    ord("B"): Direction.DOWN,
    ord("C"): Direction.RIGHT,
    ord("D"): Direction.LEFT,
}


def classify_byte(byte: int) -> KeyEvent:
    """Event for a single byte that does not start an escape sequence."""
    if is_control_byte(byte):
        return KeyEvent.control(byte)
    return KeyEvent.printable(byte)


class KeyDecoder:
    """
    Turns a terminal byte stream into key events.

    Reads one byte at a time. An escape byte is followed by up to two
    more reads that share one idle-timeout window, measured from the
    escape byte. If the sequence does not complete in time, a bare
    Escape is reported. That costs one idle timeout of
    latency on every real Escape press.
    """

    def __init__(self, source: ByteSource, timeout: float = 0.1) -> None:
        self.source = source
        self.timeout = timeout

    def next_event(self) -> KeyEvent:
        """
        Decode the next key event.

        Returns a WOULD_BLOCK event when no byte arrives within the idle
        timeout and an EOF event at end of input. DeviceError from the
        source propagates.
        """
        state = DecoderState.IDLE
        raw = bytearray()
        event = WOULD_BLOCK
        deadline = 0.0

        while state is not DecoderState.DONE:
            if state is DecoderState.IDLE:
                timeout = self.timeout
            else:
                # Zero still polls for bytes that have already arrived
                timeout = max(0.0, deadline - time.monotonic())
            try:
                chunk = self.source.read(1, timeout)
            except EndOfStream:
                if state is DecoderState.IDLE:
                    event = KeyEvent(KeyKind.EOF)
                else:
                    event = KeyEvent.escape(bytes(raw))
                break

            if not chunk:
                if state is not DecoderState.IDLE:
                    event = KeyEvent.escape(bytes(raw))
                break

            byte = chunk[0]
            raw.append(byte)

            if state is DecoderState.IDLE:
                if byte == ESC_BYTE:
                    state = DecoderState.SAW_ESCAPE
                    deadline = time.monotonic() + self.timeout
                else:
                    event = classify_byte(byte)
                    state = DecoderState.DONE

            elif state is DecoderState.SAW_ESCAPE:
                if byte == BRACKET_BYTE:
                    state = DecoderState.SAW_ESCAPE_BRACKET
                else:
                    event = KeyEvent.escape(bytes(raw))
                    state = DecoderState.DONE

            elif state is DecoderState.SAW_ESCAPE_BRACKET:
                direction = ARROWS.get(byte)
                if direction is not None:
                    event = KeyEvent.arrow(direction, bytes(raw))
                else:
                    logger.debug("Unrecognized escape sequence %r", bytes(raw))
                    event = KeyEvent.escape(bytes(raw))
                state = DecoderState.DONE

        return event

    def wait_event(self) -> KeyEvent:
        """Decode the next event, re-polling past idle timeouts."""
        while True:
            event = self.next_event()
            if event.kind is not KeyKind.WOULD_BLOCK:
                return event

    def iter_events(self) -> Iterator[KeyEvent]:
        """Yield events until end of input."""
        while True:
            event = self.wait_event()
            if event.kind is KeyKind.EOF:
                return
            yield event
