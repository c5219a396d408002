"""Terminal device control: raw mode, geometry, key input."""

from opterm.terminal.context import TerminalContext, run
from opterm.terminal.input import DecoderState, KeyDecoder
from opterm.terminal.probe import GeometryProbe, parse_position_report, read_position_report
from opterm.terminal.session import RawModeSession, TerminalState
from opterm.terminal.stream import ByteSink, ByteSource, TerminalStream

__all__ = [
    "ByteSink",
    "ByteSource",
    "DecoderState",
    "GeometryProbe",
    "KeyDecoder",
    "RawModeSession",
    "TerminalContext",
    "TerminalState",
    "TerminalStream",
    "parse_position_report",
    "read_position_report",
    "run",
]
