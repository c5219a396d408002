"""Screen geometry discovery.

The direct path asks the OS for the window size. When that is
unsupported or reports zero, the cursor is pushed to the bottom-right
corner and the terminal is asked where it ended up: the reply
``ESC [ <row> ; <col> R`` arrives on the same input stream as
keystrokes, so the probe must finish before any key decoding starts.
"""

from __future__ import annotations

import logging
import os
import re
from typing import Callable, Optional

from opterm.config import TerminalConfig
from opterm.core.constants import (
    CSI,
    POSITION_REPORT_END,
    REQUEST_POSITION_REPORT,
    cursor_far_bottom_right,
)
from opterm.core.errors import EndOfStream, ProtocolError
from opterm.core.geometry import ScreenGeometry
from opterm.terminal.stream import ByteSink, ByteSource

logger = logging.getLogger(__name__)

_REPORT_PAYLOAD = re.compile(rb"(\d+);(\d+)R")

SizeQuery = Callable[[int], os.terminal_size]


def parse_position_report(data: bytes) -> ScreenGeometry:
    """
    Parse a cursor position report into the geometry it implies.

    Args:
        data: Reply bytes, e.g. b"\\x1b[24;80R"

    Raises:
        ProtocolError: On a bad leading ESC [, a malformed payload,
            a missing R terminator or a zero coordinate.
    """
    if data[:2] != CSI:
        raise ProtocolError("position report does not start with ESC [", data)

    match = _REPORT_PAYLOAD.fullmatch(data[2:])
    if match is None:
        raise ProtocolError("malformed position report", data)

    rows, cols = int(match.group(1)), int(match.group(2))
    if rows <= 0 or cols <= 0:
        raise ProtocolError("position report has zero coordinate", data)
    return ScreenGeometry(rows, cols)


def read_position_report(source: ByteSource, budget: int, timeout: float) -> bytes:
    """
    Collect reply bytes up to and including the R terminator.

    Reads one byte at a time so nothing past the reply is consumed.
    Stops early on a read timeout or end of input; one byte of the budget is reserved,
    so at most budget - 1 bytes are returned.
    """
    reply = bytearray()
    while len(reply) < budget - 1:
        try:
            byte = source.read(1, timeout)
        except EndOfStream:
            logger.debug("Input ended inside position report %r", bytes(reply))
            break
        if not byte:
            break
        reply += byte
        if byte == POSITION_REPORT_END:
            break
    return bytes(reply)


class GeometryProbe:
    """Determines the visible row and column count of a terminal."""

    def __init__(
        self,
        source: ByteSource,
        sink: ByteSink,
        fd: int,
        config: Optional[TerminalConfig] = None,
        query_size: SizeQuery = os.get_terminal_size,
    ) -> None:
        self.source = source
        self.sink = sink
        self.fd = fd
        self.config = config or TerminalConfig()
        self._query_size = query_size

    def probe(self, force_fallback: bool = False) -> ScreenGeometry:
        """
        Discover the screen geometry.

        Raises:
            ProtocolError: The fallback reply was malformed or incomplete.
            DeviceError: Writing the request or reading the reply failed.
        """
        if not force_fallback:
            geometry = self.query_direct()
            if geometry is not None:
                logger.debug("Direct size query: %s", geometry)
                return geometry
        return self.query_position_report()

    def query_direct(self) -> Optional[ScreenGeometry]:
        """Ask the OS for the window size; None if unsupported or degenerate."""
        try:
            size = self._query_size(self.fd)
        except OSError as e:
            logger.debug("Direct size query unsupported: %s", e)
            return None
        if size.columns <= 0 or size.lines <= 0:
            logger.debug("Direct size query reported %dx%d", size.lines, size.columns)
            return None
        return ScreenGeometry(size.lines, size.columns)

    def query_position_report(self) -> ScreenGeometry:
        """Position-report fallback: park the cursor far bottom-right and ask."""
        self.sink.write_all(cursor_far_bottom_right(self.config.far_move))
        self.sink.write_all(REQUEST_POSITION_REPORT)
        reply = read_position_report(
            self.source, self.config.report_budget, self.config.idle_timeout
        )
        geometry = parse_position_report(reply)
        logger.debug("Position report %r -> %s", reply, geometry)
        return geometry
