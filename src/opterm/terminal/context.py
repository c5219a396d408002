"""The terminal as one explicit, owned context object."""

from __future__ import annotations

import logging
import os
import sys
from typing import Any, Callable, Optional, Sequence, TypeVar

from opterm.config import TerminalConfig
from opterm.core.errors import DeviceError, ProtocolError
from opterm.core.geometry import CursorPosition, ScreenGeometry
from opterm.core.keys import KeyEvent
from opterm.render.frame import FrameCompositor
from opterm.terminal.input import KeyDecoder
from opterm.terminal.probe import GeometryProbe, SizeQuery
from opterm.terminal.session import RawModeSession
from opterm.terminal.stream import TerminalStream

logger = logging.getLogger(__name__)

T = TypeVar("T")


class TerminalContext:
    """
    Raw mode session, geometry, decoder and compositor for one terminal.

    Startup order matters: raw mode first, then the geometry probe, and
    only then the key decoder, so that a position report is never read
    as keystrokes.

    Example:
        >>> with TerminalContext.from_fds(0, 1) as term:
        ...     term.render(CursorPosition(), ["hello"])
        ...     event = term.wait_event()
    """

    def __init__(
        self,
        stream: Any,
        session: RawModeSession,
        config: Optional[TerminalConfig] = None,
        query_size: SizeQuery = os.get_terminal_size,
        force_fallback: bool = False,
    ) -> None:
        self.stream = stream
        self.session = session
        self.config = config or TerminalConfig()
        self.force_fallback = force_fallback
        self.probe = GeometryProbe(
            stream, stream, session.fd, self.config, query_size=query_size
        )
        self.compositor = FrameCompositor(stream, filler=self.config.filler)
        self._geometry: Optional[ScreenGeometry] = None
        self._decoder: Optional[KeyDecoder] = None

    @classmethod
    def from_fds(
        cls,
        stdin_fd: int = 0,
        stdout_fd: int = 1,
        config: Optional[TerminalConfig] = None,
        force_fallback: bool = False,
    ) -> TerminalContext:
        """Context over real file descriptors."""
        config = config or TerminalConfig()
        return cls(
            TerminalStream(stdin_fd, stdout_fd),
            RawModeSession(stdin_fd, config),
            config,
            force_fallback=force_fallback,
        )

    @property
    def is_open(self) -> bool:
        return self._decoder is not None

    @property
    def geometry(self) -> ScreenGeometry:
        if self._geometry is None:
            raise RuntimeError("terminal context is not open")
        return self._geometry

    @property
    def decoder(self) -> KeyDecoder:
        if self._decoder is None:
            raise RuntimeError("terminal context is not open")
        return self._decoder

    def open(self) -> TerminalContext:
        """Enter raw mode and discover the geometry."""
        self.session.enter()
        try:
            self._geometry = self._discover_geometry(self.force_fallback)
        except BaseException:
            self._teardown()
            raise
        self._decoder = KeyDecoder(self.stream, self.config.idle_timeout)
        logger.info("Terminal open: %s", self._geometry)
        return self

    def _discover_geometry(self, force_fallback: bool = False) -> ScreenGeometry:
        try:
            return self.probe.probe(force_fallback=force_fallback)
        except ProtocolError as e:
            if self.config.fallback_geometry is None:
                raise
            logger.warning(
                "Geometry probe failed (%s), using %s", e, self.config.fallback_geometry
            )
            return self.config.fallback_geometry

    def refresh_geometry(self) -> ScreenGeometry:
        """Re-run the probe, e.g. after a resize."""
        self._geometry = self._discover_geometry()
        return self._geometry

    def next_event(self) -> KeyEvent:
        return self.decoder.next_event()

    def wait_event(self) -> KeyEvent:
        return self.decoder.wait_event()

    def render(self, cursor: CursorPosition, content_rows: Sequence[str] = ()) -> None:
        self.compositor.render(self.geometry, cursor, content_rows)

    def close(self) -> None:
        """Clear the screen, home the cursor and restore the terminal."""
        if not self.session.active:
            return
        self._decoder = None
        try:
            self.compositor.clear_screen()
        except DeviceError as e:
            logger.error("Could not clear screen on close: %s", e)
        finally:
            self.session.exit()
        logger.info("Terminal closed")

    def _teardown(self) -> None:
        """Close while another error propagates; never masks that error."""
        try:
            self.close()
        except DeviceError as e:
            logger.error("Restore failed during error handling: %s", e)

    def __enter__(self) -> TerminalContext:
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc is None:
            self.close()
        else:
            self._teardown()


def stdio_fds() -> tuple[int, int]:
    """File descriptors of the process's stdin and stdout."""
    try:
        return sys.stdin.fileno(), sys.stdout.fileno()
    except (OSError, ValueError) as e:
        raise DeviceError.from_exception("stdio", e) from e


def run(
    body: Callable[[TerminalContext], T],
    config: Optional[TerminalConfig] = None,
    stdin_fd: Optional[int] = None,
    stdout_fd: Optional[int] = None,
    force_fallback: bool = False,
) -> T:
    """
    Safe entry point: open a terminal context, call body(context), and
    always clean up.

    Errors raised by body or by startup propagate after the screen is
    cleared and the terminal configuration restored.
    """
    if stdin_fd is None or stdout_fd is None:
        default_in, default_out = stdio_fds()
        stdin_fd = default_in if stdin_fd is None else stdin_fd
        stdout_fd = default_out if stdout_fd is None else stdout_fd

    with TerminalContext.from_fds(stdin_fd, stdout_fd, config, force_fallback) as context:
        return body(context)
