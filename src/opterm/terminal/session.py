"""Raw terminal mode with guaranteed restoration."""

from __future__ import annotations

import atexit
import logging
import signal
import termios
import threading
from dataclasses import dataclass
from types import ModuleType
from typing import Any, Optional, Union

from opterm.config import TerminalConfig
from opterm.core.errors import DeviceError

logger = logging.getLogger(__name__)

# Termination requests that should unwind through finally blocks
_EXIT_SIGNALS = (signal.SIGTERM, signal.SIGHUP)


@dataclass(frozen=True)
class TerminalState:
    """
    Snapshot of a terminal's line-discipline configuration.

    Mirrors the list returned by termios.tcgetattr():
    [iflag, oflag, cflag, lflag, ispeed, ospeed, cc].
    """
    iflag: int
    oflag: int
    cflag: int
    lflag: int
    ispeed: int
    ospeed: int
    cc: tuple

    @classmethod
    def from_attrs(cls, attrs: list) -> TerminalState:
        iflag, oflag, cflag, lflag, ispeed, ospeed, cc = attrs
        return cls(iflag, oflag, cflag, lflag, ispeed, ospeed, tuple(cc))

    def to_attrs(self) -> list:
        """Fresh attribute list suitable for termios.tcsetattr()."""
        return [
            self.iflag, self.oflag, self.cflag, self.lflag,
            self.ispeed, self.ospeed, list(self.cc),
        ]

    def raw(self, idle_deciseconds: int = 1) -> TerminalState:
        """Derive the raw-mode configuration from this state."""
        cc = list(self.cc)
        # Read returns as soon as any byte arrives, or after the idle timeout
        cc[termios.VMIN] = 0
        cc[termios.VTIME] = idle_deciseconds
        return TerminalState(
            iflag=self.iflag & ~(
                termios.BRKINT | termios.ICRNL | termios.INPCK
                | termios.ISTRIP | termios.IXON
            ),
            oflag=self.oflag & ~termios.OPOST,
            cflag=(self.cflag & ~termios.CSIZE) | termios.CS8,
            lflag=self.lflag & ~(
                termios.ECHO | termios.ICANON | termios.IEXTEN | termios.ISIG
            ),
            ispeed=self.ispeed,
            ospeed=self.ospeed,
            cc=tuple(cc),
        )


class RawModeSession:
    """
    Exclusive raw control of a terminal device.

    enter() captures the current configuration and arranges for it to be
    restored on every exit path: exit() or the with-block, interpreter
    shutdown via atexit, and SIGTERM/SIGHUP, which are converted into
    SystemExit so that finally blocks run.

    The termios calls go through ``backend`` (the termios module by
    default), so tests can drive a fake device.
    """

    def __init__(
        self,
        fd: int,
        config: Optional[TerminalConfig] = None,
        backend: Union[ModuleType, Any] = termios,
        handle_signals: bool = True,
    ) -> None:
        self.fd = fd
        self.config = config or TerminalConfig()
        self._backend = backend
        self._handle_signals = handle_signals
        self._saved: Optional[TerminalState] = None
        self._old_handlers: dict[int, Any] = {}

    @property
    def active(self) -> bool:
        return self._saved is not None

    @property
    def saved_state(self) -> Optional[TerminalState]:
        """Configuration captured by enter(), None when inactive."""
        return self._saved

    def enter(self) -> TerminalState:
        """Capture the current configuration and switch to raw mode."""
        if self._saved is not None:
            raise RuntimeError("raw mode session already active")

        try:
            saved = TerminalState.from_attrs(self._backend.tcgetattr(self.fd))
        except (termios.error, OSError) as e:
            raise DeviceError.from_exception("tcgetattr", e) from e

        raw = saved.raw(self.config.idle_deciseconds)

        self._saved = saved
        atexit.register(self.exit)
        self._install_signal_handlers()

        try:
            self._backend.tcsetattr(self.fd, termios.TCSAFLUSH, raw.to_attrs())
        except (termios.error, OSError) as e:
            logger.error("Failed to enter raw mode on fd %d: %s", self.fd, e)
            self.restore_quietly()
            raise DeviceError.from_exception("tcsetattr", e) from e

        logger.debug("Entered raw mode on fd %d", self.fd)
        return saved

    def exit(self) -> None:
        """Restore the captured configuration. No-op when inactive."""
        saved = self._saved
        if saved is None:
            return
        self._saved = None

        atexit.unregister(self.exit)
        self._restore_signal_handlers()

        try:
            self._backend.tcsetattr(self.fd, termios.TCSAFLUSH, saved.to_attrs())
        except (termios.error, OSError) as e:
            raise DeviceError.from_exception("tcsetattr", e) from e
        logger.debug("Restored terminal configuration on fd %d", self.fd)

    def restore_quietly(self) -> None:
        """Best-effort restore used while another error is propagating."""
        try:
            self.exit()
        except DeviceError as e:
            logger.error("Restore failed during error handling: %s", e)

    def _install_signal_handlers(self) -> None:
        if not self._handle_signals:
            return
        if threading.current_thread() is not threading.main_thread():
            logger.debug("Not in main thread, leaving signal handlers alone")
            return
        for signum in _EXIT_SIGNALS:
            self._old_handlers[signum] = signal.signal(signum, _raise_system_exit)

    def _restore_signal_handlers(self) -> None:
        for signum, handler in self._old_handlers.items():
            signal.signal(signum, handler if handler is not None else signal.SIG_DFL)
        self._old_handlers.clear()

    def __enter__(self) -> TerminalState:
        return self.enter()

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc is not None:
            self.restore_quietly()
        else:
            self.exit()


def _raise_system_exit(signum, frame) -> None:
    raise SystemExit(128 + signum)
