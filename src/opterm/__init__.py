"""
opterm: terminal-control core for full-screen programs

Takes a terminal out of line-buffered, echoing mode, decodes raw input
into key events, discovers the screen size and renders whole frames
without flicker. Assumes an ANSI/VT100-compatible terminal on a POSIX
system.

Quick Start:
    >>> import opterm
    >>> def body(term):
    ...     term.render(opterm.CursorPosition(), ["hello"])
    ...     return term.wait_event()
    >>> event = opterm.run(body)

Features:
    - Raw mode with restoration on every exit path (atexit, SIGTERM/SIGHUP)
    - Geometry from the OS, or from a cursor position report when the OS
      does not know
    - Arrow key / bare Escape disambiguation with a bounded idle timeout
    - Single-write frame rendering
"""

import logging

__version__ = "0.1.0"

# Core types
from opterm.core.errors import DeviceError, EndOfStream, ProtocolError, TerminalError
from opterm.core.geometry import CursorPosition, ScreenGeometry
from opterm.core.keys import Direction, KeyEvent, KeyKind, ctrl_key

# Configuration
from opterm.config import TerminalConfig

# Terminal control
from opterm.render.frame import FrameCompositor, OutputBuffer
from opterm.terminal.context import TerminalContext, run
from opterm.terminal.input import KeyDecoder
from opterm.terminal.probe import GeometryProbe, parse_position_report
from opterm.terminal.session import RawModeSession, TerminalState
from opterm.terminal.stream import TerminalStream

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    # Version
    "__version__",
    # Core types
    "CursorPosition",
    "Direction",
    "KeyEvent",
    "KeyKind",
    "ScreenGeometry",
    "ctrl_key",
    # Errors
    "DeviceError",
    "EndOfStream",
    "ProtocolError",
    "TerminalError",
    # Configuration
    "TerminalConfig",
    # Terminal control
    "FrameCompositor",
    "GeometryProbe",
    "KeyDecoder",
    "OutputBuffer",
    "RawModeSession",
    "TerminalContext",
    "TerminalState",
    "TerminalStream",
    "parse_position_report",
    "run",
]
