"""Key echo: show the bytes behind each key press until 'q'."""

from __future__ import annotations

import logging
from typing import Optional

from opterm.config import TerminalConfig
from opterm.core.constants import CLEAR_SCREEN, CURSOR_HOME
from opterm.core.errors import DeviceError
from opterm.core.keys import KeyEvent, KeyKind
from opterm.terminal.input import KeyDecoder
from opterm.terminal.session import RawModeSession
from opterm.terminal.stream import TerminalStream

logger = logging.getLogger(__name__)


def describe_event(event: KeyEvent) -> str:
    """
    One-line description of a key event.

    Byte values first, then what they decoded to, e.g. ``113 ('q')``,
    ``17 (Ctrl-Q)`` or ``27 91 65 (Up)``.
    """
    codes = " ".join(str(b) for b in event.raw)
    if event.kind is KeyKind.PRINTABLE:
        char = event.char
        return f"{codes} ('{char}')" if char is not None else codes
    if event.kind is KeyKind.CONTROL and event.byte is not None:
        if 0 < event.byte < 0x20:
            return f"{codes} (Ctrl-{chr(event.byte + 0x40)})"
        return codes
    if event.kind is KeyKind.ARROW and event.direction is not None:
        return f"{codes} ({event.direction.name.title()})"
    if event.kind is KeyKind.ESCAPE:
        return f"{codes} (Escape)"
    return codes


def is_quit(event: KeyEvent, config: TerminalConfig) -> bool:
    if event.kind is KeyKind.PRINTABLE and event.char == "q":
        return True
    return event.kind is KeyKind.CONTROL and event.byte == config.quit_key


class KeyEchoApp:
    """Prints every decoded key in raw mode, clearing the screen on the way out."""

    def __init__(
        self,
        stream: TerminalStream,
        session: RawModeSession,
        config: Optional[TerminalConfig] = None,
    ) -> None:
        self.stream = stream
        self.session = session
        self.config = config or TerminalConfig()
        self.decoder = KeyDecoder(stream, self.config.idle_timeout)

    def run(self) -> int:
        """Echo keys until quit or end of input. Returns the number echoed."""
        count = 0
        with self.session:
            try:
                for event in self.decoder.iter_events():
                    if is_quit(event, self.config):
                        break
                    # Output post-processing is off, so lines need an explicit \r
                    self.stream.write_all(describe_event(event).encode("ascii") + b"\r\n")
                    count += 1
            finally:
                self._clear_screen()
        return count

    def _clear_screen(self) -> None:
        try:
            self.stream.write_all(CLEAR_SCREEN + CURSOR_HOME)
        except DeviceError as e:
            logger.error("Could not clear screen on exit: %s", e)
